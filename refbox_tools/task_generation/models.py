"""Data model shared by the generator components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .type_codec import Classification, ObjectCategory

OptionValue = Union[int, float, bool]
TaskDefinition = Mapping[str, OptionValue]
TaskDefinitions = Mapping[str, TaskDefinition]


@dataclass(frozen=True)
class ArenaDescription:
    """Workstations (``{name: table type}``) and cavity supply (``{code: count}``)."""
    workstations: Mapping[str, str] = field(default_factory=dict)
    cavities: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectInstance:
    """One generated object, cavity or container.

    ``source`` and ``destination`` hold table names; ``container`` holds the id
    of another instance of the same task. Instances are built complete and
    never changed; :meth:`with_free_orientation` returns an updated copy.
    """
    id: int
    classification: Classification
    source: Optional[str] = None
    destination: Optional[str] = None
    container: Optional[int] = None

    @property
    def category(self) -> ObjectCategory:
        return self.classification.category

    @property
    def type_code(self) -> str:
        return self.classification.type_code

    def with_free_orientation(self) -> "ObjectInstance":
        return replace(self, classification=self.classification.with_free_orientation())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type_code,
            "category": self.classification.category.value,
            "form": self.classification.form,
            "color": self.classification.color,
            "orientation": self.classification.orientation.value,
            "source": self.source,
            "destination": self.destination,
            "container": self.container,
        }


@dataclass(frozen=True)
class GeneratedTask:
    """Result of one ``generate`` call."""
    task_name: str
    objects: Tuple[ObjectInstance, ...]
    waypoints: Tuple[str, ...] = ()
    seed: Optional[int] = None
    unmet_quotas: Mapping[str, Tuple[int, int]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "waypoints", tuple(self.waypoints))
        object.__setattr__(self, "unmet_quotas", MappingProxyType(dict(self.unmet_quotas)))

    def __len__(self) -> int:
        return len(self.objects)

    def get(self, object_id: int) -> ObjectInstance:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        raise KeyError(f"No object with id {object_id} in task {self.task_name}")

    def of_category(self, category: ObjectCategory) -> Tuple[ObjectInstance, ...]:
        return tuple(obj for obj in self.objects if obj.category is category)

    @property
    def cavities(self) -> Tuple[ObjectInstance, ...]:
        return self.of_category(ObjectCategory.CAVITY)

    @property
    def containers(self) -> Tuple[ObjectInstance, ...]:
        return self.of_category(ObjectCategory.CONTAINER)

    @property
    def transported(self) -> Tuple[ObjectInstance, ...]:
        return tuple(obj for obj in self.objects if obj.classification.is_transportable)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_name": self.task_name,
            "seed": self.seed,
            "objects": [obj.to_dict() for obj in self.objects],
            "waypoints": list(self.waypoints),
            "unmet_quotas": {
                name: {"requested": requested, "generated": generated}
                for name, (requested, generated) in self.unmet_quotas.items()
            },
        }


__all__ = [
    "ArenaDescription",
    "GeneratedTask",
    "ObjectInstance",
    "OptionValue",
    "TaskDefinition",
    "TaskDefinitions",
]
