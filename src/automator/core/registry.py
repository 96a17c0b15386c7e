"""Handler registry mapping task-type names to handler callables."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

Descriptor = Mapping[str, Any]
Context = dict[str, Any]
Handler = Callable[[Descriptor, Context], Any]


class HandlerRegistry:
    """
    Mutable name -> handler mapping.

    Registration is order-independent and the last write for a name wins.
    Handlers are never removed.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("handler name must be a non-empty string")
        if not callable(handler):
            raise TypeError(f"handler for '{name}' must be callable")
        if name in self._handlers:
            logger.debug("replacing handler %s", name)
        self._handlers[name] = handler
        logger.debug("handler registered: %s", name)

    def lookup(self, name: str) -> Handler | None:
        return self._handlers.get(name)

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
