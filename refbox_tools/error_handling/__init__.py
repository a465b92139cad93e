"""
Task Generator Error Handling Module.

Usage:
    from refbox_tools.error_handling import (
        InfeasibleConfiguration,
        TaskGenerationError,
        UnknownTask,
    )

    try:
        task = generator.generate("BTT1")
    except InfeasibleConfiguration as exc:
        logger.error("Task cannot be generated: %s", exc.issues)
"""

from .errors import (
    ConfigLoadError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InfeasibleConfiguration,
    InsufficientCavities,
    InsufficientContainers,
    InvalidTypeCode,
    InventoryExhausted,
    PipelineError,
    QuotaError,
    TaskGenerationError,
    UnknownTask,
)

__all__ = [
    "ConfigLoadError",
    "ErrorCategory",
    "ErrorContext",
    "ErrorSeverity",
    "InfeasibleConfiguration",
    "InsufficientCavities",
    "InsufficientContainers",
    "InvalidTypeCode",
    "InventoryExhausted",
    "PipelineError",
    "QuotaError",
    "TaskGenerationError",
    "UnknownTask",
]
