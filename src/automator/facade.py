"""
Task automation facade.

Handlers are registered by name, then ``task`` turns a descriptor into a
tree of tasks that run in order::

    automator.register_handler("collab", create_collab)
    automator.register_handler("nav", create_nav_item)

    root = automator.task(
        "collab",
        {"title": "My Collab", "after": [{"nav": {"name": "Overview", "app": "Wiki"}}]},
    )
    collab = await root.run()

Each subtask sees the results of its ancestors in its context, keyed by the
ancestor task name, but never the results of its siblings.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from automator.core import context as _context
from automator.core.factory import build_task
from automator.core.registry import Handler, HandlerRegistry
from automator.core.task import Task


class Automator:
    def __init__(self, registry: HandlerRegistry | None = None) -> None:
        self.handlers = registry if registry is not None else HandlerRegistry()

    def register_handler(self, name: str, handler: Handler) -> None:
        """Register ``handler`` for tasks called ``name``; the last registration wins."""
        self.handlers.register(name, handler)

    def handler(self, name: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register_handler`."""

        def decorator(fn: Handler) -> Handler:
            self.register_handler(name, fn)
            return fn

        return decorator

    def task(
        self,
        name: str,
        descriptor: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Task:
        return build_task(self.handlers, name, descriptor, context)

    @staticmethod
    def extract_attributes(config: Mapping[str, Any], attrs: Iterable[str]) -> dict[str, Any]:
        return _context.extract_attributes(config, attrs)

    @staticmethod
    def ensure_parameters(config: Mapping[str, Any], *keys: str) -> Mapping[str, Any]:
        return _context.ensure_parameters(config, *keys)


default_automator = Automator()

register_handler = default_automator.register_handler
handler = default_automator.handler
task = default_automator.task
extract_attributes = _context.extract_attributes
ensure_parameters = _context.ensure_parameters
