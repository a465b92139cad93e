"""Catalog of obtainable object and cavity types with remaining counts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Mapping, Optional

from refbox_tools.error_handling.errors import InventoryExhausted

from .type_codec import Classification, ObjectCategory, classify, is_type_code


@dataclass
class ObjectTypeQuota:
    """How many more instances of a type may still be generated."""
    classification: Classification
    count: int

    @classmethod
    def from_code(cls, code: str, count: int) -> "ObjectTypeQuota":
        return cls(classification=classify(code), count=int(count))

    def __bool__(self) -> bool:
        return self.count > 0

    @property
    def category(self) -> ObjectCategory:
        return self.classification.category

    @property
    def type_code(self) -> str:
        return self.classification.type_code

    def decrement(self) -> "ObjectTypeQuota":
        if self.count <= 0:
            raise InventoryExhausted(f"Object type {self.type_code} has no instances left")
        self.count -= 1
        return self

    def __str__(self) -> str:
        return f"{self.type_code}x{self.count}"


class ObjectInventory:
    """Ordered collection of :class:`ObjectTypeQuota` entries.

    Instances built from configuration act as immutable templates; the engine
    works on :meth:`copy` so repeated generation calls never share counts.
    """

    def __init__(self, quotas: Iterable[ObjectTypeQuota] = ()):
        self._quotas: List[ObjectTypeQuota] = list(quotas)

    @classmethod
    def from_counts(
        cls,
        counts: Mapping[str, object],
        key_filter: Optional[Callable[[str], bool]] = None,
    ) -> "ObjectInventory":
        """Build an inventory from ``{type code: count}``, skipping empty entries."""
        quotas = []
        for code, count in counts.items():
            if key_filter is not None and not key_filter(code):
                continue
            if isinstance(count, bool):
                count = int(count)
            if not isinstance(count, (int, float)) or count <= 0:
                continue
            quotas.append(ObjectTypeQuota.from_code(code, int(count)))
        return cls(quotas)

    @classmethod
    def cavities_of_arena(cls, arena) -> "ObjectInventory":
        return cls.from_counts(arena.cavities)

    @classmethod
    def objects_of_task(cls, definition: Mapping[str, object]) -> "ObjectInventory":
        """Derive the object types a task may use from its option entries."""
        return cls.from_counts(definition, key_filter=is_type_code)

    def copy(self) -> "ObjectInventory":
        return ObjectInventory(
            ObjectTypeQuota(classification=quota.classification, count=quota.count)
            for quota in self._quotas
        )

    def __iter__(self) -> Iterator[ObjectTypeQuota]:
        return iter(self._quotas)

    def __len__(self) -> int:
        return len(self._quotas)

    def __getitem__(self, index: int) -> ObjectTypeQuota:
        return self._quotas[index]

    def __bool__(self) -> bool:
        return bool(self._quotas)

    def as_list(self) -> List[ObjectTypeQuota]:
        return list(self._quotas)

    def total(self, category: Optional[ObjectCategory] = None) -> int:
        return sum(
            quota.count
            for quota in self._quotas
            if category is None or quota.category is category
        )

    def of_category(self, category: ObjectCategory) -> List[ObjectTypeQuota]:
        return [quota for quota in self._quotas if quota.category is category]

    def eligible(self, predicate: Optional[Callable[[ObjectTypeQuota], bool]] = None) -> List[ObjectTypeQuota]:
        """Transportable types with instances left, optionally filtered further."""
        return [
            quota
            for quota in self._quotas
            if quota and quota.classification.is_transportable
            and (predicate is None or predicate(quota))
        ]

    def __str__(self) -> str:
        return " ".join(str(quota) for quota in self._quotas)
