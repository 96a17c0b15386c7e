from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

TaskStatus = Literal["idle", "progress", "success", "error"]
TERMINAL_STATUS_VALUES: set[str] = {"success", "error"}


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(key): _jsonable(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return repr(value)


@dataclass(slots=True)
class TaskSnapshot:
    name: str
    status: TaskStatus
    descriptor: dict[str, Any]
    result: Any = None
    error: dict[str, Any] | None = None
    started_at: str | None = None
    ended_at: str | None = None
    duration_sec: float | None = None
    subtasks: list[TaskSnapshot] = field(default_factory=list)

    @property
    def settled(self) -> bool:
        return self.status in TERMINAL_STATUS_VALUES

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "status": self.status,
            "descriptor": _jsonable(
                {key: val for key, val in self.descriptor.items() if key != "after"}
            ),
            "result": _jsonable(self.result),
            "error": _jsonable(self.error),
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "duration_sec": self.duration_sec,
            "subtasks": [sub.to_dict() for sub in self.subtasks],
        }
