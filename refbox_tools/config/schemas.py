"""
Pydantic schemas for arena and task-set configuration files.
"""

from __future__ import annotations

from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from refbox_tools.task_generation.type_codec import is_type_code

OptionValue = Union[bool, int, float]


class ArenaConfig(BaseModel):
    """Arena description: workstations and the cavity supply."""

    model_config = ConfigDict(extra="ignore")

    workstations: Dict[str, str] = Field(default_factory=dict)
    cavities: Dict[str, int] = Field(default_factory=dict)

    @field_validator("workstations")
    @classmethod
    def validate_workstations(cls, v: Dict[str, str]) -> Dict[str, str]:
        for name, table_type in v.items():
            if not str(name).strip():
                raise ValueError("Workstation names must not be empty")
            if not str(table_type).strip():
                raise ValueError(f"Workstation {name} has an empty table type")
        return v

    @field_validator("cavities")
    @classmethod
    def validate_cavities(cls, v: Dict[str, int]) -> Dict[str, int]:
        for code, count in v.items():
            if len(code) < 2:
                raise ValueError(f"Cavity type code {code!r} is too short")
            if count < 0:
                raise ValueError(f"Cavity {code} has a negative count ({count})")
        return v


class TaskSetConfig(BaseModel):
    """Named task definitions: ``{task name: {option: value}}``."""

    model_config = ConfigDict(extra="ignore")

    tasks: Dict[str, Dict[str, OptionValue]]

    @model_validator(mode="after")
    def validate_object_counts(self) -> "TaskSetConfig":
        for task_name, options in self.tasks.items():
            for key, value in options.items():
                if not is_type_code(key):
                    continue
                if len(key) < 2:
                    raise ValueError(f"{task_name}: object type code {key!r} is too short")
                if value < 0:
                    raise ValueError(f"{task_name}: object {key} has a negative count ({value})")
        return self
