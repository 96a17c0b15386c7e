from __future__ import annotations

from automator.core.queue import OrderingQueue
from automator.facade import Automator
from automator.handlers.collab import collab_handler
from automator.handlers.nav import nav_handler
from automator.handlers.services import CollabServices
from automator.handlers.storage import storage_handler


def register_collab_handlers(
    automator: Automator, services: CollabServices, *, queue: OrderingQueue | None = None
) -> None:
    """Register the ``collab``, ``nav`` and ``storage`` handlers backed by ``services``."""
    automator.register_handler("collab", collab_handler(services.collab_store))
    automator.register_handler("nav", nav_handler(services, queue))
    automator.register_handler("storage", storage_handler(services))
