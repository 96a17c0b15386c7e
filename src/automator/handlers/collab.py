from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from automator.core.context import extract_attributes
from automator.core.registry import Handler
from automator.handlers.services import Collab, CollabStore

logger = logging.getLogger(__name__)

COLLAB_ATTRIBUTES = ("title", "content", "private")


def collab_handler(collab_store: CollabStore) -> Handler:
    """
    Handler creating a collab from ``title``, ``content`` and ``private``.

    Other descriptor fields are ignored.
    """

    async def create_collab(descriptor: Mapping[str, Any], context: dict[str, Any]) -> Collab:
        attrs = extract_attributes(descriptor, COLLAB_ATTRIBUTES)
        logger.debug("create collab %s", attrs)
        return await collab_store.create(attrs)

    return create_collab
