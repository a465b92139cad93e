"""Type code classification.

Arena and task configuration name objects with compact type codes such as
``F20_20_B`` (a blue F20_20 profile), ``S40_40_H`` (a horizontal S40_40
cavity) or ``CONTAINER_RED``. This module turns those codes into a
:class:`Classification`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from refbox_tools.error_handling.errors import InvalidTypeCode


CONTAINER_PREFIX = "CONTAINER_"
DEFAULT_ATTRIBUTE = "DEFAULT"

_TYPE_CODE_PATTERN = re.compile(r"[A-Z0-9_]+")


class ObjectCategory(str, Enum):
    """Semantic category encoded in a type code."""
    UNKNOWN = "unknown"
    PLAIN_OBJECT = "plain_object"
    COLORED_OBJECT = "colored_object"
    CAVITY = "cavity"
    CONTAINER = "container"


class Orientation(str, Enum):
    """Orientation constraint of a cavity."""
    FREE = "FREE"
    VERTICAL = "V"
    HORIZONTAL = "H"


@dataclass(frozen=True)
class Classification:
    """Decoded form of a type code."""
    category: ObjectCategory
    form: str
    color: str = DEFAULT_ATTRIBUTE
    orientation: Orientation = Orientation.FREE

    @property
    def type_code(self) -> str:
        """Render the classification back into type code notation."""
        if self.category is ObjectCategory.CAVITY:
            return f"{self.form}_{self.orientation.value}"
        if self.category is ObjectCategory.CONTAINER:
            return f"{CONTAINER_PREFIX}{self.color}"
        if self.category is ObjectCategory.COLORED_OBJECT:
            return f"{self.form}_{self.color}"
        if self.category is ObjectCategory.PLAIN_OBJECT:
            return self.form
        return "UNKNOWN"

    @property
    def is_transportable(self) -> bool:
        return self.category in (ObjectCategory.PLAIN_OBJECT, ObjectCategory.COLORED_OBJECT)

    def with_free_orientation(self) -> "Classification":
        return replace(self, orientation=Orientation.FREE)


def _category(code: str) -> ObjectCategory:
    if code[-2] == "_":
        if code[-1] in ("H", "V"):
            return ObjectCategory.CAVITY
        if code[-1] in ("G", "B"):
            return ObjectCategory.COLORED_OBJECT
    if code.startswith(CONTAINER_PREFIX):
        return ObjectCategory.CONTAINER
    return ObjectCategory.PLAIN_OBJECT


def classify(code: str) -> Classification:
    """Decode a type code into its classification.

    Raises:
        InvalidTypeCode: if ``code`` is not a string of at least two characters.
    """
    if not isinstance(code, str) or len(code) < 2:
        raise InvalidTypeCode(code)

    category = _category(code)
    if category in (ObjectCategory.CAVITY, ObjectCategory.COLORED_OBJECT):
        form = code[:-2]
    elif category is ObjectCategory.CONTAINER:
        form = DEFAULT_ATTRIBUTE
    else:
        form = code

    if category is ObjectCategory.COLORED_OBJECT:
        color = code[-1]
    elif category is ObjectCategory.CONTAINER:
        color = code[len(CONTAINER_PREFIX):]
    else:
        color = DEFAULT_ATTRIBUTE

    orientation = Orientation.FREE
    if category is ObjectCategory.CAVITY:
        orientation = Orientation.VERTICAL if code[-1] == "V" else Orientation.HORIZONTAL

    return Classification(category=category, form=form, color=color, orientation=orientation)


def is_type_code(key: str) -> bool:
    """Return True when a task option key names an object type."""
    return bool(_TYPE_CODE_PATTERN.fullmatch(key))
