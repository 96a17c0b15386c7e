"""Application-level error types."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class AutomatorError(Exception):
    """Base error for automator, carrying a kind tag and a diagnostic payload."""

    default_type = "AutomatorError"

    def __init__(
        self,
        message: str,
        *,
        type: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.type = type or self.default_type
        self.message = message
        self.data: dict[str, Any] = dict(data or {})

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        data = {
            key: repr(value) if isinstance(value, BaseException) else value
            for key, value in self.data.items()
        }
        return {"type": self.type, "message": self.message, "data": data}


class TaskNotFoundError(AutomatorError):
    """Raised when no handler is registered for a task name."""

    default_type = "TaskNotFound"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Task not found: {name}", data={"name": name})


class InvalidTaskError(AutomatorError):
    """Raised when a task tree cannot be constructed."""

    default_type = "InvalidTask"

    def __init__(
        self,
        name: str,
        cause: BaseException,
        *,
        descriptor: Any = None,
        context: Any = None,
    ) -> None:
        self.name = name
        self.cause = cause
        super().__init__(
            f"Invalid task {name}: {cause}",
            data={
                "cause": cause,
                "name": name,
                "descriptor": descriptor,
                "context": context,
            },
        )


class MissingParameterError(AutomatorError, KeyError):
    """Raised when a required descriptor key is absent."""

    default_type = "KeyError"

    def __init__(self, key: str, config: Any) -> None:
        self.key = key
        AutomatorError.__init__(
            self,
            f"Missing `{key}` key in config",
            data={"key": key, "config": config},
        )


class PlanError(AutomatorError):
    """Raised when plan loading/validation fails."""

    default_type = "PlanError"


def error_envelope(exc: BaseException) -> AutomatorError:
    """
    Normalize ``exc`` into an :class:`AutomatorError`.

    Existing envelopes are returned unchanged. Anything else keeps its class
    name as the kind tag and is chained as ``__cause__``.
    """
    if isinstance(exc, AutomatorError):
        return exc
    wrapped = AutomatorError(
        str(exc) or type(exc).__name__,
        type=type(exc).__name__,
        data={"cause": exc},
    )
    wrapped.__cause__ = exc
    return wrapped
