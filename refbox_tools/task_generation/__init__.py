"""
Task generation for @Work arena rounds.

Components:
- type_codec: classification of type codes such as ``F20_20_B``
- tables: arena table registry
- inventory: object and cavity types with remaining counts
- validation: arena and task feasibility checks
- engine: seeded generation of cavities, containers and transports
- generator: ``TaskGenerator`` facade binding an arena to a task set
"""

from .engine import CAVITIES_PER_PP_TABLE, GenerationEngine
from .generator import TaskGenerator
from .inventory import ObjectInventory, ObjectTypeQuota
from .models import ArenaDescription, GeneratedTask, ObjectInstance, TaskDefinition, TaskDefinitions
from .tables import Table, TableRegistry
from .type_codec import Classification, ObjectCategory, Orientation, classify, is_type_code
from .validation import validate_arena, validate_task

__all__ = [
    "CAVITIES_PER_PP_TABLE",
    "ArenaDescription",
    "Classification",
    "GeneratedTask",
    "GenerationEngine",
    "ObjectCategory",
    "ObjectInstance",
    "ObjectInventory",
    "ObjectTypeQuota",
    "Orientation",
    "Table",
    "TableRegistry",
    "TaskDefinition",
    "TaskDefinitions",
    "TaskGenerator",
    "classify",
    "is_type_code",
    "validate_arena",
    "validate_task",
]
