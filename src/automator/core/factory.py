"""Build task trees from descriptors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from automator.core.registry import HandlerRegistry
from automator.core.task import Task
from automator.util.errors import InvalidTaskError, TaskNotFoundError

logger = logging.getLogger(__name__)

AFTER_KEY = "after"


def _iter_subtask_specs(after: Any) -> list[tuple[str, Any]]:
    if after is None:
        return []
    if not isinstance(after, list):
        raise TypeError(f"`{AFTER_KEY}` must be a list of mappings")
    specs: list[tuple[str, Any]] = []
    for entry in after:
        if not isinstance(entry, Mapping):
            raise TypeError(f"`{AFTER_KEY}` entries must be mappings, got {type(entry).__name__}")
        specs.extend(entry.items())
    return specs


def _build_subtasks(registry: HandlerRegistry, descriptor: Mapping[str, Any]) -> list[Task]:
    return [
        build_task(registry, child_name, child_descriptor)
        for child_name, child_descriptor in _iter_subtask_specs(descriptor.get(AFTER_KEY))
    ]


def build_task(
    registry: HandlerRegistry,
    name: str,
    descriptor: Mapping[str, Any] | None = None,
    context: Mapping[str, Any] | None = None,
) -> Task:
    """
    Construct a :class:`Task` and, depth-first, every subtask listed in
    ``descriptor["after"]``.

    Raises :class:`TaskNotFoundError` when ``name`` has no handler and
    :class:`InvalidTaskError` for any other failure, including a non-string
    or blank name and any failure raised while building a subtask. Children
    get no construction context; they receive their context when the parent
    runs them.
    """
    if not isinstance(name, str) or not name.strip():
        exc = TypeError(f"task name must be a non-empty string, got {name!r}")
        logger.error("invalid task %r: %s", name, exc)
        raise InvalidTaskError(name, exc, descriptor=descriptor, context=context) from exc
    if name not in registry:
        raise TaskNotFoundError(name)
    try:
        descriptor = {} if descriptor is None else descriptor
        context = {} if context is None else context
        if not isinstance(descriptor, Mapping):
            raise TypeError(f"descriptor must be a mapping, got {type(descriptor).__name__}")
        if not isinstance(context, Mapping):
            raise TypeError(f"context must be a mapping, got {type(context).__name__}")
        subtasks = _build_subtasks(registry, descriptor)
    except Exception as exc:
        logger.error("invalid task %s: %s", name, exc)
        raise InvalidTaskError(name, exc, descriptor=descriptor, context=context) from exc
    return Task(name, registry, descriptor=descriptor, context=context, subtasks=subtasks)
