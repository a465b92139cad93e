"""Tests for error handling modules."""

import json

import pytest

from refbox_tools.error_handling import (
    ConfigLoadError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InfeasibleConfiguration,
    InsufficientCavities,
    InventoryExhausted,
    PipelineError,
    QuotaError,
    TaskGenerationError,
    UnknownTask,
)


class TestPipelineError:
    """Test PipelineError class."""

    def test_pipeline_error_creation(self):
        """Test creating a pipeline error."""
        error = PipelineError(
            message="Test error",
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.ERROR,
        )
        assert error.message == "Test error"
        assert error.category == ErrorCategory.VALIDATION
        assert error.severity == ErrorSeverity.ERROR
        assert error.retryable is True

    def test_pipeline_error_with_context(self):
        """Test pipeline error with error context."""
        context = ErrorContext(task_name="BTT1", round_id="r1", step="placement")
        error = PipelineError(message="Placement failed", context=context)

        assert error.context.task_name == "BTT1"
        assert error.context.round_id == "r1"
        assert error.context.step == "placement"

    def test_pipeline_error_to_dict(self):
        """Test error serialization to dict."""
        error = PipelineError(message="Test error", category=ErrorCategory.VALIDATION)

        error_dict = error.to_dict()

        assert error_dict["error_type"] == "PipelineError"
        assert error_dict["message"] == "Test error"
        assert error_dict["category"] == "validation"
        assert error_dict["traceback"] is None
        assert json.loads(error.to_json())["message"] == "Test error"

    def test_debug_mode_keeps_traceback(self, monkeypatch):
        monkeypatch.setenv("TASKGEN_DEBUG", "1")
        try:
            raise ValueError("boom")
        except ValueError as exc:
            error = PipelineError("wrapped", cause=exc)

        assert "ValueError" in error.to_dict()["traceback"]
        assert error.to_dict()["cause"] == "boom"


class TestTaskGenerationErrors:
    """Test the task generation error hierarchy."""

    def test_task_context_is_populated(self):
        error = TaskGenerationError("failed", task_name="PPT", step="precision_placement")

        assert error.task_name == "PPT"
        assert error.context.task_name == "PPT"
        assert error.context.step == "precision_placement"

    def test_infeasible_configuration_is_fatal(self):
        error = InfeasibleConfiguration("a; b", issues=["a", "b"], task_name="BTT1")

        assert isinstance(error, TaskGenerationError)
        assert error.issues == ["a", "b"]
        assert error.severity == ErrorSeverity.CRITICAL
        assert error.retryable is False
        assert error.to_dict()["context"]["additional"]["issues"] == ["a", "b"]

    def test_infeasible_configuration_defaults_issues_to_message(self):
        assert InfeasibleConfiguration("No Tasks configured!").issues == ["No Tasks configured!"]

    def test_quota_errors_are_retryable(self):
        error = InsufficientCavities(requested=4, available=2, task_name="PPT")

        assert isinstance(error, QuotaError)
        assert error.retryable is True
        assert error.category == ErrorCategory.RESOURCE
        assert error.message == "Not enough cavities generated! Generated 2, min Necessary: 4!"
        assert error.context.additional == {"requested": 4, "available": 2}

    def test_inventory_exhausted_defaults(self):
        error = InventoryExhausted("No object left")

        assert (error.requested, error.available) == (1, 0)
        assert error.context.step == "placement"

    def test_unknown_task(self):
        error = UnknownTask("NOPE", ["BTT1", "BNT"])

        assert str(error) == "No Task NOPE configured. Valid tasks are: BTT1 BNT"
        assert error.category == ErrorCategory.VALIDATION
        assert error.to_dict()["context"]["additional"]["valid_tasks"] == ["BTT1", "BNT"]

    def test_config_load_error(self):
        error = ConfigLoadError("bad file", file_path="arena.yaml", expected_format="yaml")

        assert error.category == ErrorCategory.DATA
        assert error.retryable is False
        assert error.context.step == "config_load"
        assert error.context.additional["file_path"] == "arena.yaml"

    @pytest.mark.parametrize(
        "error",
        [
            InsufficientCavities(requested=1, available=0),
            UnknownTask("X", []),
            ConfigLoadError("x"),
        ],
    )
    def test_all_errors_are_pipeline_errors(self, error):
        assert isinstance(error, PipelineError)
