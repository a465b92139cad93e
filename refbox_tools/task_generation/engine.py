"""Seeded task generation engine.

The engine turns one task definition into a :class:`GeneratedTask`. Stages
run in a fixed order because later stages place objects into instances
created by earlier ones:

1. cavities on precision placement (PP) tables
2. precision placement goals into those cavities (``pp``)
3. containers on regular tables (``CONTAINER_*`` entries)
4. container placements (``container_placing``)
5. picks from shelves and rotating tables (``shelf_picking``, ``rt_picking``)
6. free transports until ``object_count`` transported objects exist
7. navigation waypoints (``waypoint_count``)

Every random draw goes through one ``numpy.random.Generator``. A task that
carries a ``seed`` option re-seeds it before the first draw, which makes the
generated task reproducible; otherwise the stream continues from the previous
call.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from refbox_tools.config.seed import make_rng
from refbox_tools.error_handling.errors import (
    InsufficientCavities,
    InsufficientContainers,
    InventoryExhausted,
)

from .formatting import format_object, format_objects
from .inventory import ObjectInventory, ObjectTypeQuota
from .models import GeneratedTask, ObjectInstance, TaskDefinition
from .tables import HEIGHT_CLASSES, PRECISION_PLACEMENT, ROTATING_TABLE, SHELF, Table, TableRegistry
from .type_codec import Classification, ObjectCategory
from .validation import container_tables, is_defined, option, validate_task

logger = logging.getLogger(__name__)

CAVITIES_PER_PP_TABLE = 5

# quota option -> table type the picked objects come from
LOCATION_PICK_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("shelf_picking", SHELF),
    ("rt_picking", ROTATING_TABLE),
)

# flag option -> table type that joins the source pool for free transports
SOURCE_POOL_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("shelf_grasping", SHELF),
    ("rt_grasping", ROTATING_TABLE),
)

T = TypeVar("T")
PlacementTarget = Union[Table, ObjectInstance]


class GenerationEngine:
    """Stateful generator bound to one arena.

    Not safe for concurrent ``generate`` calls: each call advances the shared
    random stream and rebuilds the per-call state held on the instance.
    """

    def __init__(
        self,
        registry: TableRegistry,
        cavities: ObjectInventory,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._registry = registry
        self._cavities = cavities
        self._rng = rng if rng is not None else make_rng(seed)
        self._next_id = 0
        self._task_name = ""

    @property
    def registry(self) -> TableRegistry:
        return self._registry

    def reseed(self, seed: int) -> None:
        self._rng = np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def generate(self, task_name: str, definition: TaskDefinition) -> GeneratedTask:
        self._task_name = task_name
        self._next_id = 0
        objects: List[ObjectInstance] = []

        available_objects = ObjectInventory.objects_of_task(definition)
        available_cavities = self._cavities.copy()
        self._debug("Tables:\n%s", self._registry.describe())
        self._debug("Cavities: %s", available_cavities)
        self._debug("ObjectTypes: %s", available_objects)

        validate_task(task_name, definition, self._registry, available_objects)

        seed = definition.get("seed")
        if seed is not None:
            self.reseed(int(seed))

        cavities = self.generate_cavities(definition, available_cavities, available_objects, objects)
        self.fill_precision_placements(definition, available_objects, objects, cavities)

        containers = self.generate_containers(definition, available_objects, objects)
        self.fill_containers(definition, available_objects, objects, containers)

        self.generate_location_picks(definition, available_objects, objects)
        unmet_quotas = self.generate_remaining(definition, available_objects, objects)
        waypoints = self.generate_waypoints(definition)

        self._debug("Objects:\n%s", format_objects(objects, self._registry))
        logger.info(
            "[TASK-GEN] Generated task %s: %d objects (%d cavities, %d containers), %d waypoints",
            task_name,
            len(objects),
            len(cavities),
            len(containers),
            len(waypoints),
            extra={"task_name": task_name},
        )
        return GeneratedTask(
            task_name=task_name,
            objects=tuple(objects),
            waypoints=tuple(waypoints),
            seed=int(seed) if seed is not None else None,
            unmet_quotas=unmet_quotas,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def generate_cavities(
        self,
        definition: TaskDefinition,
        available_cavities: ObjectInventory,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
    ) -> List[ObjectInstance]:
        """Create cavities for the PP tables.

        Only cavity types whose form matches one of the task's transportable
        objects are candidates, so every generated cavity can be filled. The
        candidate type list is shuffled and sliced, so each type contributes
        at most one cavity per task regardless of its supply count.
        """
        pp_tables = self._registry.tables_of_types([PRECISION_PLACEMENT])
        if not pp_tables:
            return []

        forms = {quota.classification.form for quota in available_objects.eligible()}
        candidates = ObjectInventory(
            quota for quota in available_cavities if quota.classification.form in forms
        )
        if not candidates:
            self._debug("No cavity type matches the object forms of the task, skipping cavities")
            return []

        needed = len(pp_tables) * CAVITIES_PER_PP_TABLE
        supply = candidates.total()
        if needed > supply:
            logger.warning(
                "[TASK-GEN] Not enough cavities available for %d PP tables! Available: %d, Needed: %d!",
                len(pp_tables),
                supply,
                needed,
                extra={"task_name": self._task_name},
            )
        to_generate = min(needed, supply)

        pool = self._shuffled(candidates.as_list())
        selected = pool[:to_generate]
        if len(selected) < to_generate:
            logger.warning(
                "[TASK-GEN] Only %d distinct cavity types available, generating %d of %d cavities",
                len(pool),
                len(selected),
                to_generate,
                extra={"task_name": self._task_name},
            )

        cavities = []
        for quota in selected:
            quota.decrement()
            table = self._choice(pp_tables)
            cavities.append(self._new_object(quota.classification, objects, table.name, table.name))
        self._debug("Generated Cavities: %s", " ".join(cavity.type_code for cavity in cavities))
        self._debug("Generated Objects (after Cavity Generation):\n%s", format_objects(objects, self._registry))
        return cavities

    def fill_precision_placements(
        self,
        definition: TaskDefinition,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
        cavities: Sequence[ObjectInstance],
    ) -> List[ObjectInstance]:
        """Place an object into ``pp`` distinct, randomly chosen cavities."""
        requested = option(definition, "pp")
        if len(cavities) < requested:
            raise InsufficientCavities(requested, len(cavities), task_name=self._task_name)

        live = list(cavities)
        placed = []
        for i in range(max(requested, 0)):
            last = len(live) - 1 - i
            index = int(self._rng.integers(last + 1))
            placed.append(self.place(definition, available_objects, objects, live[index]))
            live[index], live[last] = live[last], live[index]
        return placed

    def generate_containers(
        self,
        definition: TaskDefinition,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
    ) -> List[ObjectInstance]:
        """Create every requested container on a regular (or shelf) table."""
        tables = container_tables(self._registry, definition)
        containers = []
        for quota in available_objects.of_category(ObjectCategory.CONTAINER):
            for _ in range(quota.count):
                table = self._choice(tables)
                containers.append(self._new_object(quota.classification, objects, table.name, table.name))

        requested = option(definition, "container_placing")
        if requested > 0 and not containers:
            raise InsufficientContainers(requested, len(containers), task_name=self._task_name)

        self._debug("Generated Objects (after Container Generation):\n%s", format_objects(objects, self._registry))
        return containers

    def fill_containers(
        self,
        definition: TaskDefinition,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
        containers: Sequence[ObjectInstance],
    ) -> List[ObjectInstance]:
        placed = []
        for _ in range(max(option(definition, "container_placing"), 0)):
            container = self._choice(containers)
            placed.append(self.place(definition, available_objects, objects, container))
        return placed

    def generate_location_picks(
        self,
        definition: TaskDefinition,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
    ) -> List[ObjectInstance]:
        """Transport objects whose source is a shelf or the rotating table."""
        picked = []
        for key, table_type in LOCATION_PICK_OPTIONS:
            requested = option(definition, key)
            if requested <= 0:
                continue
            sources = self._registry.tables_of_types([table_type])
            for _ in range(requested):
                source = self._choice(sources)
                destination = self._choose_destination(exclude=source.name)
                picked.append(
                    self.place(definition, available_objects, objects, destination, source=source.name)
                )
        return picked

    def generate_remaining(
        self,
        definition: TaskDefinition,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
    ) -> Dict[str, Tuple[int, int]]:
        """Add free transports until ``object_count`` objects are transported.

        Returns the quotas that could not be matched exactly as
        ``{option: (requested, generated)}``.
        """
        unmet: Dict[str, Tuple[int, int]] = {}
        if not is_defined(definition, "object_count"):
            return unmet

        requested = option(definition, "object_count")
        transported = sum(1 for obj in objects if obj.classification.is_transportable)
        if transported > requested:
            logger.warning(
                "[TASK-GEN] Sub-task quotas already transport %d objects, more than object_count=%d",
                transported,
                requested,
                extra={"task_name": self._task_name},
            )
            unmet["object_count"] = (requested, transported)
            return unmet

        remaining = requested - transported
        supply = sum(quota.count for quota in available_objects.eligible())
        if remaining > supply:
            raise InventoryExhausted(
                f"{self._task_name}: {remaining} more transported objects requested, "
                f"only {supply} left in the inventory!",
                requested=remaining,
                available=supply,
                task_name=self._task_name,
            )

        source_types = self._source_pool_types(definition)
        for _ in range(remaining):
            destination = self._choose_destination()
            source = self._choose_source(destination.name, source_types)
            self.place(definition, available_objects, objects, destination, source=source.name)
        return unmet

    def generate_waypoints(self, definition: TaskDefinition) -> List[str]:
        """Draw ``waypoint_count`` distinct tables for the navigation sub-task."""
        requested = option(definition, "waypoint_count")
        if requested <= 0:
            return []
        tables = list(self._registry)
        order = self._rng.permutation(len(tables))
        return [tables[int(i)].name for i in order[:requested]]

    # ------------------------------------------------------------------
    # Placement step
    # ------------------------------------------------------------------

    def place(
        self,
        definition: TaskDefinition,
        available_objects: ObjectInventory,
        objects: List[ObjectInstance],
        target: PlacementTarget,
        source: Optional[str] = None,
    ) -> ObjectInstance:
        """Create one transported object whose goal is ``target``.

        ``target`` is either a table or a previously generated cavity or
        container. Objects for a cavity must share the cavity's form. The
        chosen type is drawn uniformly among eligible types and its count is
        decremented.
        """
        predicate = None
        if isinstance(target, ObjectInstance):
            self._debug("Generate Object to be placed in Container %s", format_object(target, self._registry))
            if target.category is ObjectCategory.CAVITY:
                form = target.classification.form

                def predicate(quota: ObjectTypeQuota) -> bool:
                    return quota.classification.form == form

                if option(definition, "pp_team_orientation"):
                    target = self._replace_object(objects, target.with_free_orientation())
            destination = target.destination
            container: Optional[int] = target.id
            label = f"{target.type_code}({target.id})"
        else:
            destination = target.name
            container = None
            label = str(target)

        candidates = available_objects.eligible(predicate)
        if not candidates:
            raise InventoryExhausted(
                f"{self._task_name}: No object left to place at {label}!",
                task_name=self._task_name,
            )
        quota: ObjectTypeQuota = self._choice(candidates)
        quota.decrement()

        if source is None:
            source = self._choose_source(destination).name

        obj = self._new_object(quota.classification, objects, source, destination, container)
        self._debug("Placed %s", format_object(obj, self._registry))
        return obj

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_object(
        self,
        classification: Classification,
        objects: List[ObjectInstance],
        source: str,
        destination: str,
        container: Optional[int] = None,
    ) -> ObjectInstance:
        obj = ObjectInstance(
            id=self._next_id,
            classification=classification,
            source=source,
            destination=destination,
            container=container,
        )
        self._next_id += 1
        objects.append(obj)
        return obj

    @staticmethod
    def _replace_object(objects: List[ObjectInstance], obj: ObjectInstance) -> ObjectInstance:
        """Swap in an updated copy of the instance with the same id."""
        for index, existing in enumerate(objects):
            if existing.id == obj.id:
                objects[index] = obj
                return obj
        raise KeyError(f"No object with id {obj.id} generated")

    def _choice(self, items: Sequence[T]) -> T:
        return items[int(self._rng.integers(len(items)))]

    def _shuffled(self, items: Sequence[T]) -> List[T]:
        order = self._rng.permutation(len(items))
        return [items[int(i)] for i in order]

    def _regular_tables(self) -> List[Table]:
        return self._registry.tables_of_types(HEIGHT_CLASSES) or list(self._registry)

    def _source_pool_types(self, definition: TaskDefinition) -> List[str]:
        types = list(HEIGHT_CLASSES)
        for key, table_type in SOURCE_POOL_FLAGS:
            if option(definition, key):
                types.append(table_type)
        return types

    def _choose_destination(self, exclude: Optional[str] = None) -> Table:
        tables = self._regular_tables()
        candidates = [table for table in tables if table.name != exclude] or tables
        return self._choice(candidates)

    def _choose_source(self, destination: Optional[str], types: Optional[Sequence[str]] = None) -> Table:
        tables = self._registry.tables_of_types(types) if types else []
        if not tables:
            tables = self._regular_tables()
        candidates = [table for table in tables if table.name != destination] or tables
        return self._choice(candidates)

    def _debug(self, message: str, *args) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("[TASK-GEN] " + message, *args, extra={"task_name": self._task_name})
