#!/usr/bin/env python3
"""Task Generation Job - Main Entry Point.

Loads the arena description and task set, generates the requested task and
writes the result as JSON:

1. Load arena (workstations, cavities) and task definitions
2. Validate the arena against the task set
3. Generate the named task
4. Write the task payload to stdout or ``--output``

Usage:
    python generate_task.py --arena arena.yaml --tasks tasks.yaml --task BTT1

Environment Variables:
    TASKGEN_ARENA_PATH: Default arena file
    TASKGEN_TASKS_PATH: Default task-set file
    TASKGEN_SEED: Initial generator seed (a task's own ``seed`` option wins)
    LOG_LEVEL / LOG_JSON: Logging level and format
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add repo root to path for shared imports
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from refbox_tools.config import ARENA_PATH_ENV_VAR, TASKS_PATH_ENV_VAR
from refbox_tools.error_handling.errors import PipelineError
from refbox_tools.logging_config import init_logging, resolve_log_level
from refbox_tools.task_generation import TaskGenerator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Task Generator - generate an @Work arena task from arena and task configuration"
    )
    parser.add_argument(
        "--arena",
        type=str,
        default=os.environ.get(ARENA_PATH_ENV_VAR, ""),
        help="Path to the arena description (YAML or JSON)",
    )
    parser.add_argument(
        "--tasks",
        type=str,
        default=os.environ.get(TASKS_PATH_ENV_VAR, ""),
        help="Path to the task set (YAML or JSON)",
    )
    parser.add_argument(
        "--task",
        type=str,
        default=os.environ.get("TASK_NAME", ""),
        help="Name of the task to generate",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Initial generator seed",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="",
        help="Write the task JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--list-tasks",
        action="store_true",
        help="Print the configured task names and exit",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (defaults to LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Use plain-text instead of JSON log lines",
    )
    return parser


def run(args: argparse.Namespace) -> Dict[str, Any]:
    """Generate the requested task and return its JSON payload."""
    generator = TaskGenerator.from_files(args.arena or None, args.tasks or None, seed=args.seed)
    task = generator.generate(args.task)
    return task.to_dict()


def write_payload(payload: Dict[str, Any], output: str) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        logger.info("[TASK-GEN] Wrote task %s to %s", payload["task_name"], path)
    else:
        print(text)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    level = resolve_log_level(args.log_level) if args.log_level else None
    init_logging(level=level, json_enabled=False if args.plain_logs else None)

    try:
        if args.list_tasks:
            generator = TaskGenerator.from_files(args.arena or None, args.tasks or None)
            print("\n".join(generator.task_names))
            return 0
        if not args.task:
            logger.error("[TASK-GEN] No task name given (--task or TASK_NAME)")
            return 2
        payload = run(args)
    except PipelineError as exc:
        logger.error("[TASK-GEN] Task generation failed: %s", exc.message, extra={"task_error": exc})
        print(json.dumps({"error": exc.to_dict()}, indent=2))
        return 1

    write_payload(payload, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
