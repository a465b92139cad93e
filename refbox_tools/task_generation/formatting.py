"""Human-readable renderings used in diagnostic log lines."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .models import ObjectInstance
from .tables import TableRegistry


def format_object(obj: ObjectInstance, registry: Optional[TableRegistry] = None,
                  objects: Optional[Mapping[int, ObjectInstance]] = None) -> str:
    """Render an instance as ``Object <type>(<id>): Src: .. Dst: .. Cont: ..``."""
    parts = [f"Object {obj.type_code}({obj.id}):"]
    if obj.source is not None:
        parts.append(f"Src: {_table_label(obj.source, registry)}")
    if obj.destination is not None:
        parts.append(f"Dst: {_table_label(obj.destination, registry)}")
    if obj.container is not None:
        container = objects.get(obj.container) if objects else None
        label = container.type_code if container is not None else "?"
        parts.append(f"Cont: {label}({obj.container})")
    return " ".join(parts)


def format_objects(objects: Iterable[ObjectInstance], registry: Optional[TableRegistry] = None) -> str:
    objects = list(objects)
    by_id = {obj.id: obj for obj in objects}
    return "\n".join(format_object(obj, registry, by_id) for obj in objects)


def _table_label(name: str, registry: Optional[TableRegistry]) -> str:
    if registry is not None and name in registry:
        return f"{name}({registry.get(name).table_type})"
    return name
