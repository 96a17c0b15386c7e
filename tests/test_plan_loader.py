from __future__ import annotations

from pathlib import Path

import pytest

from automator.config.loader import load_plan, parse_plan, validate_descriptor
from automator.util.errors import PlanError


def _write(path: Path, content: str) -> Path:
    path.write_text(content.strip() + "\n", encoding="utf-8")
    return path


def test_load_plan_reads_task_descriptor_and_context(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path / "plan.yaml",
        """
task: collab
descriptor:
  title: My Collab
  private: false
  after:
    - nav:
        name: Overview
        app: Wiki
    - storage:
        storage:
          data.csv: 0b1c
context:
  user: me
""",
    )

    plan = load_plan(plan_path)

    assert plan.task == "collab"
    assert plan.descriptor["title"] == "My Collab"
    assert plan.descriptor["after"][0] == {"nav": {"name": "Overview", "app": "Wiki"}}
    assert plan.context == {"user": "me"}


def test_load_plan_defaults_descriptor_and_context(tmp_path: Path) -> None:
    plan = load_plan(_write(tmp_path / "plan.yaml", "task: collab"))
    assert plan.descriptor == {}
    assert plan.context == {}


def test_load_plan_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PlanError, match="plan file not found"):
        load_plan(tmp_path / "missing.yaml")


def test_load_plan_rejects_unreadable_path_like_directory(tmp_path: Path) -> None:
    plan_dir = tmp_path / "plan_dir"
    plan_dir.mkdir()

    with pytest.raises(PlanError, match="failed to read plan file"):
        load_plan(plan_dir)


def test_load_plan_rejects_invalid_yaml(tmp_path: Path) -> None:
    plan_path = _write(tmp_path / "plan.yaml", "task: [unclosed")
    with pytest.raises(PlanError, match="failed to parse yaml"):
        load_plan(plan_path)


def test_load_plan_rejects_non_utf8_content(tmp_path: Path) -> None:
    plan_path = tmp_path / "plan.yaml"
    plan_path.write_bytes(b"task: \xff\xfe")
    with pytest.raises(PlanError, match="utf-8"):
        load_plan(plan_path)


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        (["task"], "plan root must be a mapping"),
        ({1: "x"}, "plan root keys must be strings"),
        ({"task": "collab", "tasks": []}, "unknown fields"),
        ({"descriptor": {}}, "plan.task is required"),
        ({"task": "  "}, "plan.task is required"),
        ({"task": "collab", "descriptor": []}, "plan.descriptor must be a mapping"),
        ({"task": "collab", "context": "x"}, "plan.context must be a mapping"),
    ],
)
def test_parse_plan_rejects_invalid_roots(raw: object, message: str) -> None:
    with pytest.raises(PlanError, match=message):
        parse_plan(raw)


@pytest.mark.parametrize(
    ("descriptor", "message"),
    [
        ({"after": {"nav": {}}}, r"descriptor\.after must be a list"),
        ({"after": [{}]}, r"descriptor\.after\[0\] must be a non-empty mapping"),
        ({"after": ["nav"]}, r"descriptor\.after\[0\] must be a non-empty mapping"),
        ({"after": [{"": {}}]}, "task names must be non-empty strings"),
        ({"after": [{"nav": ["x"]}]}, r"descriptor\.after\[0\]\.nav must be a mapping"),
        (
            {"after": [{"nav": {"after": [{"storage": {"after": 1}}]}}]},
            r"descriptor\.after\[0\]\.nav\.after\[0\]\.storage\.after must be a list",
        ),
    ],
)
def test_validate_descriptor_names_offending_path(descriptor: dict, message: str) -> None:
    with pytest.raises(PlanError, match=message):
        validate_descriptor(descriptor)


def test_validate_descriptor_accepts_null_child_descriptor() -> None:
    validate_descriptor({"after": [{"nav": None}], "title": "x"})
