"""Run-once task tree execution."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterator, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from automator.core.context import child_context, merge_context
from automator.core.registry import HandlerRegistry
from automator.state.model import TERMINAL_STATUS_VALUES, TaskSnapshot, TaskStatus
from automator.util.errors import AutomatorError, TaskNotFoundError, error_envelope
from automator.util.time import duration_sec, now

logger = logging.getLogger(__name__)


def _iso(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat(timespec="seconds")


class Task:
    """
    A named unit of work bound to a descriptor and an ordered list of subtasks.

    The handler registered under ``name`` runs at most once per instance.
    After it succeeds, every subtask runs concurrently with a context that
    holds the handler result under ``name``. Instances are built by
    :func:`automator.core.factory.build_task`.
    """

    def __init__(
        self,
        name: str,
        registry: HandlerRegistry,
        *,
        descriptor: Mapping[str, Any],
        context: Mapping[str, Any],
        subtasks: list[Task],
    ) -> None:
        self.name = name
        self.descriptor: Mapping[str, Any] = MappingProxyType(dict(descriptor))
        self.default_context: Mapping[str, Any] = MappingProxyType(dict(context))
        self.subtasks: tuple[Task, ...] = tuple(subtasks)
        self.state: TaskStatus = "idle"
        self.result: Any = None
        self.error: AutomatorError | None = None
        self._registry = registry
        self._run_result: asyncio.Task[Any] | None = None
        self._started: datetime | None = None
        self._ended: datetime | None = None

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, state={self.state!r}, subtasks={len(self.subtasks)})"

    @property
    def settled(self) -> bool:
        return self.state in TERMINAL_STATUS_VALUES

    def run(self, context: Mapping[str, Any] | None = None) -> asyncio.Task[Any]:
        """
        Launch the task and return an awaitable of the handler result.

        Only the first call starts the handler. Any later call, even while the
        first one is still in flight, gets the same ``asyncio.Task`` back and
        its ``context`` argument is ignored. Must be called from a running
        event loop.
        """
        if self._run_result is not None:
            return self._run_result
        loop = asyncio.get_running_loop()
        effective = merge_context(self.default_context, context)
        self.state = "progress"
        self._run_result = loop.create_task(self._execute(effective), name=f"task:{self.name}")
        return self._run_result

    async def _execute(self, context: dict[str, Any]) -> Any:
        self._started = now()
        logger.debug("run task %s", self.name)
        try:
            result = await self._call_handler(context)
        except Exception as exc:
            error = self._fail(exc)
            if error is exc:
                raise
            raise error from exc

        self.result = result
        try:
            await self._run_subtasks(child_context(context, self.name, result))
        except Exception as exc:
            error = self._fail(exc)
            if error is exc:
                raise
            raise error from exc

        self.state = "success"
        self._ended = now()
        logger.debug("task %s succeeded", self.name)
        return result

    async def _call_handler(self, context: dict[str, Any]) -> Any:
        handler = self._registry.lookup(self.name)
        if handler is None:
            raise TaskNotFoundError(self.name)
        outcome = handler(self.descriptor, context)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome

    async def _run_subtasks(self, context: dict[str, Any]) -> None:
        if not self.subtasks:
            return
        outcomes = await asyncio.gather(
            *(subtask.run(context) for subtask in self.subtasks),
            return_exceptions=True,
        )
        failures: list[BaseException] = []
        for subtask, outcome in zip(self.subtasks, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                failures.append(outcome)
                logger.warning("subtask %s of %s failed: %s", subtask.name, self.name, outcome)
        if failures:
            raise failures[0]

    def _fail(self, exc: BaseException) -> AutomatorError:
        error = error_envelope(exc)
        self.state = "error"
        self.error = error
        self._ended = now()
        logger.debug("task %s failed: %s", self.name, error)
        return error

    def walk(self) -> Iterator[Task]:
        """Yield this task then every descendant, depth-first in declaration order."""
        yield self
        for subtask in self.subtasks:
            yield from subtask.walk()

    def snapshot(self) -> TaskSnapshot:
        elapsed: float | None = None
        if self._started is not None and self._ended is not None:
            elapsed = duration_sec(self._started, self._ended)
        return TaskSnapshot(
            name=self.name,
            status=self.state,
            descriptor=dict(self.descriptor),
            result=self.result,
            error=self.error.to_dict() if self.error is not None else None,
            started_at=_iso(self._started),
            ended_at=_iso(self._ended),
            duration_sec=elapsed,
            subtasks=[subtask.snapshot() for subtask in self.subtasks],
        )
