"""
Custom Exception Classes for the task generator.

Provides a hierarchy of exceptions for the different ways a task generation
request can be rejected, so callers can tell fatal configuration problems
(reject at startup) from per-call generation failures (retry with different
parameters).
"""

from __future__ import annotations

import json
import os
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorSeverity(str, Enum):
    """Severity levels for generator errors."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Categories of generator errors."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    RESOURCE = "resource"
    DATA = "data"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for an error."""
    task_name: Optional[str] = None
    round_id: Optional[str] = None
    step: Optional[str] = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    additional: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_name": self.task_name,
            "round_id": self.round_id,
            "step": self.step,
            "timestamp": self.timestamp,
            "additional": self.additional,
        }


class PipelineError(Exception):
    """
    Base exception for all generator errors.

    Provides structured error information for logging and for the JSON error
    record written by the job entry point.
    """

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        retryable: bool = True,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.retryable = retryable
        self.context = context or ErrorContext()
        self.cause = cause
        self._debug_enabled = os.getenv("TASKGEN_DEBUG", "0").strip().lower() in {
            "1", "true", "yes", "y", "on",
        }
        self.traceback_str = traceback.format_exc() if cause and self._debug_enabled else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "traceback": self.traceback_str if self._debug_enabled else None,
        }

    def to_json(self) -> str:
        """Serialize error to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


class TaskGenerationError(PipelineError):
    """Error raised while validating or generating a named task."""

    def __init__(
        self,
        message: str,
        task_name: Optional[str] = None,
        step: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or ErrorContext()
        context.task_name = task_name
        context.step = step

        super().__init__(message, context=context, **kwargs)
        self.task_name = task_name


class InvalidTypeCode(TaskGenerationError):
    """A type code could not be classified (too short or not a string)."""

    def __init__(self, code: Any, **kwargs):
        super().__init__(
            f"Invalid type code {code!r}: type codes need at least two characters",
            step="classification",
            category=ErrorCategory.VALIDATION,
            retryable=False,
            **kwargs,
        )
        self.code = code


class InfeasibleConfiguration(TaskGenerationError):
    """Arena or task fails a feasibility precondition."""

    def __init__(
        self,
        message: str,
        issues: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        kwargs.setdefault("step", "feasibility")
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            retryable=False,
            **kwargs,
        )
        self.issues: List[str] = list(issues) if issues else [message]
        self.context.additional["issues"] = self.issues


class QuotaError(TaskGenerationError):
    """A generation stage could not meet its quota from available inventory."""

    def __init__(
        self,
        message: str,
        requested: int,
        available: int,
        **kwargs,
    ):
        kwargs.setdefault("retryable", True)
        context = kwargs.pop("context", None) or ErrorContext()
        context.additional["requested"] = requested
        context.additional["available"] = available

        super().__init__(
            message,
            category=ErrorCategory.RESOURCE,
            context=context,
            **kwargs,
        )
        self.requested = requested
        self.available = available


class InsufficientCavities(QuotaError):
    """Fewer cavities were generated than precision placements requested."""

    def __init__(self, requested: int, available: int, **kwargs):
        super().__init__(
            f"Not enough cavities generated! Generated {available}, "
            f"min Necessary: {requested}!",
            requested=requested,
            available=available,
            step="precision_placement",
            **kwargs,
        )


class InsufficientContainers(QuotaError):
    """Container placements requested but no container was generated."""

    def __init__(self, requested: int, available: int, **kwargs):
        super().__init__(
            f"Not enough containers generated! Generated {available}, "
            f"min Necessary: 1 for {requested} container placements!",
            requested=requested,
            available=available,
            step="container_placing",
            **kwargs,
        )


class InventoryExhausted(QuotaError):
    """No object type with remaining count is eligible for a placement."""

    def __init__(self, message: str, requested: int = 1, available: int = 0, **kwargs):
        kwargs.setdefault("step", "placement")
        super().__init__(message, requested=requested, available=available, **kwargs)


class UnknownTask(TaskGenerationError):
    """A task name was requested that is not present in the configuration."""

    def __init__(self, task_name: str, valid_tasks: Sequence[str], **kwargs):
        self.valid_tasks = list(valid_tasks)
        super().__init__(
            f"No Task {task_name} configured. Valid tasks are: {' '.join(self.valid_tasks)}",
            task_name=task_name,
            step="lookup",
            category=ErrorCategory.VALIDATION,
            retryable=False,
            **kwargs,
        )
        self.context.additional["valid_tasks"] = self.valid_tasks


class ConfigLoadError(PipelineError):
    """Error in a configuration file (unreadable, invalid format or schema)."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        expected_format: Optional[str] = None,
        **kwargs,
    ):
        kwargs.setdefault("retryable", False)

        context = kwargs.pop("context", None) or ErrorContext()
        context.step = "config_load"
        context.additional["file_path"] = file_path
        context.additional["expected_format"] = expected_format

        super().__init__(
            message,
            category=ErrorCategory.DATA,
            context=context,
            **kwargs,
        )
        self.file_path = file_path
        self.expected_format = expected_format
