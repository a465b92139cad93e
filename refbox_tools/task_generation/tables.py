"""Arena table registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

PRECISION_PLACEMENT = "PP"
SHELF = "SH"
ROTATING_TABLE = "TT"
HEIGHT_CLASSES: Tuple[str, ...] = ("00", "05", "10", "15")


@dataclass(frozen=True)
class Table:
    """A named workstation in the arena, tagged with its table type code."""
    name: str
    table_type: str

    def __str__(self) -> str:
        return f"Table {self.name}({self.table_type})"


class TableRegistry:
    """Multi-valued index from table type code to the arena's tables.

    Built once from the arena's workstation mapping and never mutated.
    """

    def __init__(self, tables: Iterable[Table] = ()):
        self._by_type: Dict[str, List[Table]] = {}
        self._by_name: Dict[str, Table] = {}
        for table in tables:
            self._by_type.setdefault(table.table_type, []).append(table)
            self._by_name[table.name] = table

    @classmethod
    def build(cls, workstations: Mapping[str, str]) -> "TableRegistry":
        """Create a registry from a ``{table name: table type}`` mapping."""
        return cls(Table(name=str(name), table_type=str(table_type)) for name, table_type in workstations.items())

    @classmethod
    def from_arena(cls, arena) -> "TableRegistry":
        return cls.build(arena.workstations)

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> Iterator[Table]:
        for group in self._by_type.values():
            yield from group

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Table:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"No table named {name!r} in the arena") from None

    def types(self) -> List[str]:
        return list(self._by_type)

    def count(self, table_type: str) -> int:
        return len(self._by_type.get(table_type, ()))

    def has_type(self, table_type: str) -> bool:
        return self.count(table_type) > 0

    def tables_of_types(self, types: Iterable[str]) -> List[Table]:
        """Return every table whose type is in ``types``.

        Groups follow the order of ``types``; within a group tables keep arena
        order. Returns an empty list when nothing matches.
        """
        tables: List[Table] = []
        seen = set()
        for table_type in types:
            if table_type in seen:
                continue
            seen.add(table_type)
            tables.extend(self._by_type.get(table_type, ()))
        return tables

    def describe(self) -> str:
        return "\n".join(f"{table.table_type} = {table}" for table in self)
