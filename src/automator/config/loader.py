from __future__ import annotations

import stat
from pathlib import Path
from typing import Any

import yaml

from automator.config.schema import PlanSpec
from automator.util.errors import PlanError

_ALLOWED_PLAN_KEYS = {"task", "descriptor", "context"}
_AFTER_KEY = "after"


def _is_non_blank_str(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip()) and "\x00" not in value


def _ensure_mapping(name: str, value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PlanError(f"{name} must be a mapping")
    if any(not isinstance(key, str) for key in value):
        raise PlanError(f"{name} keys must be strings")
    return value


def validate_descriptor(descriptor: dict[str, Any], path: str = "descriptor") -> None:
    """Check the shape of ``after`` recursively; other fields belong to handlers."""
    after = descriptor.get(_AFTER_KEY)
    if after is None:
        return
    if not isinstance(after, list):
        raise PlanError(f"{path}.{_AFTER_KEY} must be a list")
    for idx, entry in enumerate(after):
        entry_path = f"{path}.{_AFTER_KEY}[{idx}]"
        if not isinstance(entry, dict) or not entry:
            raise PlanError(f"{entry_path} must be a non-empty mapping")
        for name, child in entry.items():
            if not _is_non_blank_str(name):
                raise PlanError(f"{entry_path} task names must be non-empty strings")
            child_path = f"{entry_path}.{name}"
            validate_descriptor(_ensure_mapping(child_path, child), child_path)


def parse_plan(raw: Any) -> PlanSpec:
    if not isinstance(raw, dict):
        raise PlanError("plan root must be a mapping")
    if any(not isinstance(key, str) for key in raw):
        raise PlanError("plan root keys must be strings")
    unknown_root = set(raw.keys()) - _ALLOWED_PLAN_KEYS
    if unknown_root:
        raise PlanError(f"plan contains unknown fields: {sorted(unknown_root)}")

    task = raw.get("task")
    if not _is_non_blank_str(task):
        raise PlanError("plan.task is required and must be non-empty string")

    descriptor = _ensure_mapping("plan.descriptor", raw.get("descriptor"))
    context = _ensure_mapping("plan.context", raw.get("context"))
    validate_descriptor(descriptor)
    return PlanSpec(task=task, descriptor=descriptor, context=context)


def load_plan(path: Path) -> PlanSpec:
    try:
        meta = path.stat()
    except FileNotFoundError as exc:
        raise PlanError(f"plan file not found: {path}") from exc
    except OSError as exc:
        raise PlanError(f"failed to read plan file: {path}") from exc
    if not stat.S_ISREG(meta.st_mode):
        raise PlanError(f"failed to read plan file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeError as exc:
        raise PlanError(f"failed to decode plan file as utf-8: {path}") from exc
    except OSError as exc:
        raise PlanError(f"failed to read plan file: {path}") from exc

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise PlanError(f"failed to parse yaml: {exc}") from exc

    return parse_plan(raw)
