"""Task Generator Configuration Module.

Loads the arena description and the task set from YAML or JSON files and
validates them before a generator is built. Paths default to the
``TASKGEN_ARENA_PATH`` / ``TASKGEN_TASKS_PATH`` environment variables.

Arena file::

    workstations:
      WS01: "10"
      PP01: PP
    cavities:
      F20_20_H: 1

Task file::

    tasks:
      BTT1:
        object_count: 3
        table_height_10: true
        F20_20_B: 2
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from refbox_tools.error_handling.errors import ConfigLoadError
from refbox_tools.task_generation.models import ArenaDescription

from .schemas import ArenaConfig, TaskSetConfig

logger = logging.getLogger(__name__)

ARENA_PATH_ENV_VAR = "TASKGEN_ARENA_PATH"
TASKS_PATH_ENV_VAR = "TASKGEN_TASKS_PATH"

_YAML_SUFFIXES = {".yaml", ".yml"}
_JSON_SUFFIXES = {".json"}

PathLike = Union[str, Path]


def _resolve_path(path: Optional[PathLike], env_var: str) -> Path:
    if path is None:
        path = os.getenv(env_var)
    if not path:
        raise ConfigLoadError(f"No config path given and {env_var} is not set")
    return Path(path)


def _read_mapping(path: Path) -> Dict[str, Any]:
    """Read a YAML or JSON file into a mapping."""
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}", file_path=str(path))

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix in _YAML_SUFFIXES:
            data = yaml.safe_load(text) or {}
        elif suffix in _JSON_SUFFIXES:
            data = json.loads(text)
        else:
            raise ConfigLoadError(
                f"Unsupported config format {suffix!r} for {path}",
                file_path=str(path),
                expected_format="yaml|json",
            )
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigLoadError(
            f"Invalid {suffix.lstrip('.')} in {path}: {exc}",
            file_path=str(path),
            expected_format=suffix.lstrip("."),
            cause=exc,
        ) from exc

    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Config file {path} must contain a mapping at the top level",
            file_path=str(path),
        )
    return data


def arena_from_mapping(data: Dict[str, Any], source: str = "<memory>") -> ArenaDescription:
    try:
        config = ArenaConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(
            f"Arena configuration validation failed in {source}:\n{exc}",
            file_path=source,
            cause=exc,
        ) from exc
    return ArenaDescription(workstations=dict(config.workstations), cavities=dict(config.cavities))


def tasks_from_mapping(data: Dict[str, Any], source: str = "<memory>") -> Dict[str, Dict[str, Any]]:
    """Validate a task set; a mapping without a ``tasks`` key is the task set itself."""
    if "tasks" not in data:
        data = {"tasks": data}
    try:
        config = TaskSetConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(
            f"Task configuration validation failed in {source}:\n{exc}",
            file_path=source,
            cause=exc,
        ) from exc
    return {name: dict(options) for name, options in config.tasks.items()}


def load_arena_description(path: Optional[PathLike] = None) -> ArenaDescription:
    resolved = _resolve_path(path, ARENA_PATH_ENV_VAR)
    arena = arena_from_mapping(_read_mapping(resolved), source=str(resolved))
    logger.info(
        "[TASK-GEN] Loaded arena from %s: %d workstations, %d cavity types",
        resolved,
        len(arena.workstations),
        len(arena.cavities),
    )
    return arena


def load_task_definitions(path: Optional[PathLike] = None) -> Dict[str, Dict[str, Any]]:
    resolved = _resolve_path(path, TASKS_PATH_ENV_VAR)
    tasks = tasks_from_mapping(_read_mapping(resolved), source=str(resolved))
    logger.info("[TASK-GEN] Loaded %d tasks from %s", len(tasks), resolved)
    return tasks


__all__ = [
    "ARENA_PATH_ENV_VAR",
    "TASKS_PATH_ENV_VAR",
    "arena_from_mapping",
    "load_arena_description",
    "load_task_definitions",
    "tasks_from_mapping",
]
