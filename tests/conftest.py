"""
Shared pytest fixtures for task generator tests.

Provides small in-memory arenas and task sets plus the paths to the example
configuration shipped with the job.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from refbox_tools.task_generation import ArenaDescription, TaskGenerator


# ============================================================================
# PATH AND MODULE FIXTURES
# ============================================================================

@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Return the repository root directory."""
    return REPO_ROOT


@pytest.fixture(scope="session")
def job_config_dir(repo_root: Path) -> Path:
    return repo_root / "task-generation-job" / "config"


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a Python module from a file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Unable to load module {module_name} from {file_path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def generate_task_module(repo_root: Path):
    """Load the job entry point (its directory name is not importable)."""
    return _load_module_from_path(
        "task_generation_job_generate_task",
        repo_root / "task-generation-job" / "generate_task.py",
    )


# ============================================================================
# ARENA AND TASK FIXTURES
# ============================================================================

@pytest.fixture
def workstations() -> Dict[str, str]:
    return {
        "WS01": "00",
        "WS02": "05",
        "WS03": "10",
        "WS04": "15",
        "SH01": "SH",
        "TT01": "TT",
        "PP01": "PP",
        "PP02": "PP",
    }


@pytest.fixture
def cavities() -> Dict[str, int]:
    return {
        "F20_20_H": 1,
        "F20_20_V": 2,
        "S40_40_H": 1,
        "S40_40_V": 1,
        "M20_100_H": 1,
        "M20_100_V": 1,
        "M20_H": 1,
        "M20_V": 1,
        "M30_H": 1,
        "M30_V": 1,
        "R20_H": 1,
        "R20_V": 1,
    }


@pytest.fixture
def arena(workstations: Dict[str, str], cavities: Dict[str, int]) -> ArenaDescription:
    return ArenaDescription(workstations=workstations, cavities=cavities)


@pytest.fixture
def full_task() -> Dict[str, Any]:
    """A task exercising every generation stage; supply covers any draw."""
    return {
        "object_count": 10,
        "waypoint_count": 3,
        "pp": 4,
        "container_placing": 2,
        "shelf_picking": 1,
        "rt_picking": 1,
        "rt_grasping": True,
        "seed": 7,
        "CONTAINER_RED": 1,
        "CONTAINER_BLUE": 2,
        "F20_20_B": 3,
        "F20_20_G": 2,
        "S40_40_B": 2,
        "M20_100": 2,
        "M20": 2,
        "M30": 2,
        "R20": 2,
        "BEARING_BOX": 1,
    }


@pytest.fixture
def tasks(full_task: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {
        "BTT1": {"object_count": 3, "table_height_10": True, "F20_20_B": 2, "M20": 2},
        "BNT": {"waypoint_count": 4},
        "FINAL": full_task,
    }


@pytest.fixture
def generator(arena: ArenaDescription, tasks: Dict[str, Dict[str, Any]]) -> TaskGenerator:
    return TaskGenerator(arena, tasks, seed=0)


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
