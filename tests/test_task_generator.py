"""Tests for the TaskGenerator facade."""

import pytest

from refbox_tools.error_handling.errors import InfeasibleConfiguration, InvalidTypeCode, UnknownTask
from refbox_tools.task_generation import ArenaDescription, GeneratedTask, TaskGenerator


@pytest.mark.unit
def test_unknown_task_lists_valid_names(arena):
    generator = TaskGenerator(arena, {"BTT1": {"object_count": 1, "M20": 1}})

    with pytest.raises(UnknownTask) as exc_info:
        generator.generate("NOPE")

    error = exc_info.value
    assert "BTT1" in str(error)
    assert "NOPE" in str(error)
    assert error.valid_tasks == ["BTT1"]
    assert error.retryable is False


@pytest.mark.unit
def test_generate_returns_named_task(generator):
    task = generator.generate("BTT1")

    assert isinstance(task, GeneratedTask)
    assert task.task_name == "BTT1"
    assert len(task.transported) == 3


@pytest.mark.unit
def test_call_delegates_to_generate(generator):
    assert generator("BNT").task_name == "BNT"


@pytest.mark.unit
def test_task_names_and_definitions(generator):
    assert generator.task_names == ["BTT1", "BNT", "FINAL"]

    definition = generator.definition("BTT1")
    definition["object_count"] = 99
    assert generator.definition("BTT1")["object_count"] == 3

    with pytest.raises(UnknownTask):
        generator.definition("NOPE")


@pytest.mark.unit
def test_constructor_is_fatal_on_infeasible_arena():
    arena = ArenaDescription(workstations={"WS01": "10"})

    with pytest.raises(InfeasibleConfiguration):
        TaskGenerator(arena, {"BTT1": {"object_count": 1, "M20": 1}})


@pytest.mark.unit
def test_constructor_rejects_bad_cavity_codes(workstations):
    arena = ArenaDescription(workstations=workstations, cavities={"H": 1})

    with pytest.raises(InvalidTypeCode):
        TaskGenerator(arena, {"BTT1": {"object_count": 1, "M20": 1}})


@pytest.mark.unit
def test_task_level_failure_does_not_break_generator(arena, tasks):
    tasks["SHELFLESS"] = {"object_count": 1, "M20": 1, "shelf_picking": 1}
    arena = ArenaDescription(
        workstations={name: t for name, t in arena.workstations.items() if t != "SH"},
        cavities=arena.cavities,
    )
    generator = TaskGenerator(arena, tasks)

    with pytest.raises(InfeasibleConfiguration, match="shelf"):
        generator.generate("SHELFLESS")

    assert generator.generate("BTT1").task_name == "BTT1"


@pytest.mark.integration
def test_generates_every_shipped_task(job_config_dir):
    generator = TaskGenerator.from_files(
        job_config_dir / "arena.yaml",
        job_config_dir / "tasks.yaml",
        seed=0,
    )

    for name in generator.task_names:
        task = generator.generate(name)
        definition = generator.definition(name)
        assert [obj.id for obj in task.objects] == list(range(len(task)))
        if "object_count" in definition:
            assert len(task.transported) >= definition["object_count"]
        assert len(task.waypoints) == definition.get("waypoint_count", 0)


@pytest.mark.unit
def test_negative_task_seed_is_a_typed_error(arena):
    generator = TaskGenerator(arena, {"T": {"object_count": 1, "seed": -1, "M20": 1}})

    with pytest.raises(InfeasibleConfiguration, match="Negative seed"):
        generator.generate("T")
