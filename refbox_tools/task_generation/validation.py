"""Feasibility checks run before any task is generated.

Two passes exist: :func:`validate_arena` runs once when a generator is built
and rejects arena/task-set combinations that can never produce a task;
:func:`validate_task` runs at the start of every ``generate`` call, before any
random draw, and rejects a single task whose quotas the arena cannot serve.
Both raise :class:`InfeasibleConfiguration` listing every failed check.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from refbox_tools.error_handling.errors import InfeasibleConfiguration

from .inventory import ObjectInventory
from .models import TaskDefinition
from .tables import HEIGHT_CLASSES, PRECISION_PLACEMENT, ROTATING_TABLE, SHELF, Table, TableRegistry
from .type_codec import ObjectCategory

logger = logging.getLogger(__name__)

MIN_ARENA_TABLES = 2

# option -> (table type, description used in the error message)
TABLE_HEIGHT_OPTIONS = {
    "table_height_0": ("00", "zero height table"),
    "table_height_5": ("05", "5cm table"),
    "table_height_10": ("10", "10cm table"),
    "table_height_15": ("15", "15cm table"),
}


def option(definition: TaskDefinition, key: str, default: int = 0) -> int:
    """Return a numeric task option; booleans count as 0/1."""
    value = definition.get(key, default)
    if value is None:
        return default
    return int(value)


def is_defined(definition: TaskDefinition, key: str) -> bool:
    """A quota is defined when present with a non-negative value."""
    return key in definition and option(definition, key, -1) >= 0


def container_tables(registry: TableRegistry, definition: TaskDefinition) -> List[Table]:
    types = list(HEIGHT_CLASSES)
    if option(definition, "container_in_shelf"):
        types.append(SHELF)
    return registry.tables_of_types(types)


def validate_arena(registry: TableRegistry, tasks: Mapping[str, TaskDefinition]) -> None:
    """Global sanity checks for an arena and its configured task set."""
    issues: List[str] = []
    if len(registry) < MIN_ARENA_TABLES:
        issues.append(
            f"At least {MIN_ARENA_TABLES} tables need to exist in the arena! Found {len(registry)}."
        )
    if not tasks:
        issues.append("No Tasks configured!")
    for name, definition in tasks.items():
        if option(definition, "object_count") == 0 and option(definition, "waypoint_count") == 0:
            issues.append(f"{name}: Empty Task defined!")

    if issues:
        raise InfeasibleConfiguration("; ".join(issues), issues=issues)
    logger.debug(
        "[TASK-GEN] Arena passed sanity checks: %d tables, %d tasks",
        len(registry),
        len(tasks),
    )


def validate_task(
    task_name: str,
    definition: TaskDefinition,
    registry: TableRegistry,
    available_objects: Optional[ObjectInventory] = None,
) -> None:
    """Check that ``definition`` can be served by the registered tables and inventory."""
    if available_objects is None:
        available_objects = ObjectInventory.objects_of_task(definition)

    issues: List[str] = []
    if is_defined(definition, "object_count") and not available_objects:
        issues.append(f"{task_name}: Transportation Task without allowed object defined!")

    if is_defined(definition, "waypoint_count"):
        waypoints = option(definition, "waypoint_count")
        if len(registry) < waypoints:
            issues.append(
                f"{task_name}: Navigation Task without enough workstations defined! "
                f"Requested {waypoints} waypoints, arena has {len(registry)} tables."
            )

    if (option(definition, "shelf_grasping") or option(definition, "shelf_picking")) and not registry.has_type(SHELF):
        issues.append(f"{task_name}: Transportation Task involving shelf ({SHELF}) requested in Arena without it!")

    if (option(definition, "rt_grasping") or option(definition, "rt_picking")) and not registry.has_type(ROTATING_TABLE):
        issues.append(
            f"{task_name}: Transportation Task involving Rotating Table ({ROTATING_TABLE}) "
            "requested in Arena without it!"
        )

    if option(definition, "pp") and not registry.has_type(PRECISION_PLACEMENT):
        issues.append(
            f"{task_name}: Transportation Task involving Precision Placement ({PRECISION_PLACEMENT}) "
            "requested in Arena without it!"
        )

    for key, (table_type, description) in TABLE_HEIGHT_OPTIONS.items():
        if option(definition, key) and not registry.has_type(table_type):
            issues.append(
                f"{task_name}: Transportation Task involving {description} ({table_type}) "
                "requested in Arena without it!"
            )

    if available_objects.total(ObjectCategory.CONTAINER) > 0 and not container_tables(registry, definition):
        issues.append(
            f"{task_name}: Containers requested in Arena without a table to hold them "
            f"({'/'.join(HEIGHT_CLASSES)})!"
        )

    seed = definition.get("seed")
    if seed is not None and int(seed) < 0:
        issues.append(f"{task_name}: Negative seed {int(seed)} configured! Seeds must be >= 0.")

    if issues:
        for issue in issues:
            logger.error("[TASK-GEN] %s", issue, extra={"task_name": task_name})
        raise InfeasibleConfiguration("; ".join(issues), issues=issues, task_name=task_name)
