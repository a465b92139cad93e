"""Tests for the task generation job entry point."""

from __future__ import annotations

import json
import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def config_args(job_config_dir):
    return [
        "--arena",
        str(job_config_dir / "arena.yaml"),
        "--tasks",
        str(job_config_dir / "tasks.yaml"),
        "--plain-logs",
    ]


@pytest.mark.integration
def test_main_writes_task_json(generate_task_module, config_args, tmp_path):
    output = tmp_path / "out" / "ppt.json"

    exit_code = generate_task_module.main(config_args + ["--task", "PPT", "--output", str(output)])

    assert exit_code == 0
    payload = json.loads(output.read_text())
    assert payload["task_name"] == "PPT"
    assert payload["seed"] == 14
    assert sum(obj["category"] == "cavity" for obj in payload["objects"]) == 5


@pytest.mark.integration
def test_main_prints_to_stdout(generate_task_module, config_args, capsys):
    exit_code = generate_task_module.main(config_args + ["--task", "BNT"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["objects"] == []
    assert len(payload["waypoints"]) == 4


@pytest.mark.integration
def test_main_is_reproducible(generate_task_module, config_args, tmp_path):
    first, second = tmp_path / "a.json", tmp_path / "b.json"

    generate_task_module.main(config_args + ["--task", "BTT1", "--seed", "3", "--output", str(first)])
    generate_task_module.main(config_args + ["--task", "BTT1", "--seed", "3", "--output", str(second)])

    assert first.read_text() == second.read_text()


@pytest.mark.integration
def test_unknown_task_reports_error(generate_task_module, config_args, capsys):
    exit_code = generate_task_module.main(config_args + ["--task", "NOPE"])

    assert exit_code == 1
    error = json.loads(capsys.readouterr().out)["error"]
    assert error["error_type"] == "UnknownTask"
    assert "FINAL" in error["message"]


@pytest.mark.integration
def test_missing_config_reports_error(generate_task_module, tmp_path, capsys):
    exit_code = generate_task_module.main(
        ["--arena", str(tmp_path / "missing.yaml"), "--tasks", str(tmp_path / "t.yaml"), "--task", "BNT"]
    )

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out)["error"]["category"] == "data"


@pytest.mark.integration
def test_list_tasks(generate_task_module, config_args, capsys):
    exit_code = generate_task_module.main(config_args + ["--list-tasks"])

    assert exit_code == 0
    assert capsys.readouterr().out.split() == ["BNT", "BMT", "BTT1", "PPT", "RTT", "FINAL"]


@pytest.mark.unit
def test_missing_task_name(generate_task_module, config_args, monkeypatch):
    monkeypatch.delenv("TASK_NAME", raising=False)

    assert generate_task_module.main(config_args) == 2


@pytest.mark.unit
def test_parser_defaults_from_env(generate_task_module, monkeypatch):
    monkeypatch.setenv("TASKGEN_ARENA_PATH", "/tmp/arena.yaml")
    monkeypatch.setenv("TASK_NAME", "FINAL")

    args = generate_task_module.build_parser().parse_args([])

    assert args.arena == "/tmp/arena.yaml"
    assert args.task == "FINAL"
    assert args.seed is None


@pytest.mark.integration
def test_negative_seed_reports_error(generate_task_module, tmp_path, job_config_dir, capsys):
    tasks = tmp_path / "tasks.yaml"
    tasks.write_text("tasks:\n  T:\n    object_count: 1\n    seed: -1\n    M20: 1\n")

    exit_code = generate_task_module.main(
        ["--arena", str(job_config_dir / "arena.yaml"), "--tasks", str(tasks), "--task", "T", "--plain-logs"]
    )

    assert exit_code == 1
    error = json.loads(capsys.readouterr().out)["error"]
    assert error["error_type"] == "InfeasibleConfiguration"
