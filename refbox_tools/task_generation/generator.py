"""Task generator bound to one arena and one task set."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from refbox_tools.error_handling.errors import UnknownTask

from .engine import GenerationEngine
from .inventory import ObjectInventory
from .models import ArenaDescription, GeneratedTask, TaskDefinition
from .tables import TableRegistry
from .validation import validate_arena

logger = logging.getLogger(__name__)


class TaskGenerator:
    """Generates named tasks for an arena.

    Construction validates the arena against the task set and raises
    :class:`InfeasibleConfiguration` if they can never produce a task, so a
    constructed generator is always usable.

    Example:
        generator = TaskGenerator(arena, {"BTT1": {"object_count": 3, "F20_20_B": 3}})
        task = generator.generate("BTT1")
    """

    def __init__(
        self,
        arena: ArenaDescription,
        tasks: Mapping[str, TaskDefinition],
        *,
        seed: Optional[int] = None,
    ):
        self._arena = arena
        self._tasks: Dict[str, Dict] = {name: dict(definition) for name, definition in tasks.items()}
        self._registry = TableRegistry.from_arena(arena)
        validate_arena(self._registry, self._tasks)
        self._engine = GenerationEngine(
            self._registry,
            ObjectInventory.cavities_of_arena(arena),
            seed=seed,
        )
        logger.info(
            "[TASK-GEN] Task generator ready: %d tables, tasks: %s",
            len(self._registry),
            " ".join(self._tasks),
        )

    @classmethod
    def from_files(
        cls,
        arena_path: Optional[Union[str, Path]] = None,
        tasks_path: Optional[Union[str, Path]] = None,
        *,
        seed: Optional[int] = None,
    ) -> "TaskGenerator":
        """Build a generator from arena and task-set config files."""
        from refbox_tools.config import load_arena_description, load_task_definitions

        return cls(
            load_arena_description(arena_path),
            load_task_definitions(tasks_path),
            seed=seed,
        )

    @property
    def task_names(self) -> List[str]:
        return list(self._tasks)

    @property
    def registry(self) -> TableRegistry:
        return self._registry

    def definition(self, task_name: str) -> Dict:
        if task_name not in self._tasks:
            raise UnknownTask(task_name, self.task_names)
        return dict(self._tasks[task_name])

    def generate(self, task_name: str) -> GeneratedTask:
        if task_name not in self._tasks:
            logger.error(
                "[TASK-GEN] Unknown task %s requested",
                task_name,
                extra={"task_name": task_name},
            )
            raise UnknownTask(task_name, self.task_names)
        return self._engine.generate(task_name, self._tasks[task_name])

    __call__ = generate
