from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from automator.core.context import ensure_parameters
from automator.core.registry import Handler
from automator.handlers.services import CollabServices, Entity, collab_id_from

logger = logging.getLogger(__name__)


def storage_handler(services: CollabServices) -> Handler:
    """
    Handler copying entities into the collab storage project.

    ``descriptor["storage"]`` maps a destination name to the UUID of the
    entity to copy. The result maps the same names to the copied entities.
    """

    async def copy_to_storage(
        descriptor: Mapping[str, Any], context: dict[str, Any]
    ) -> dict[str, Entity]:
        ensure_parameters(descriptor, "storage")
        storage = descriptor["storage"]
        if not isinstance(storage, Mapping):
            raise TypeError("storage must be a mapping of name to entity uuid")
        project = await services.storage.get_project_by_collab(
            collab_id_from(descriptor, context)
        )
        names: list[str] = []
        copies = []
        for name, value in storage.items():
            if isinstance(value, str):
                names.append(name)
                copies.append(services.entity_store.copy(value, project.uuid))
            else:
                logger.warning("Invalid configuration for storage task: %s=%r", name, value)
        copied = await asyncio.gather(*copies)
        return dict(zip(names, copied))

    return copy_to_storage
