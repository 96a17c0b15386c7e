from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from automator.core.context import ensure_parameters
from automator.core.queue import OrderingQueue, insert_queue
from automator.core.registry import Handler
from automator.handlers.services import CollabServices, Entity, NavItem, collab_id_from
from automator.util.errors import AutomatorError

logger = logging.getLogger(__name__)


async def _resolve_entity(
    services: CollabServices, name: str, context: Mapping[str, Any]
) -> Entity:
    # Might be a name produced by an ancestor storage task.
    copied = context.get("storage")
    if isinstance(copied, Mapping) and name in copied:
        return copied[name]
    return await services.entity_store.get(name)


def nav_handler(services: CollabServices, queue: OrderingQueue | None = None) -> Handler:
    """
    Handler adding a nav item running ``descriptor["app"]`` to a collab.

    Optional fields: ``collab`` (defaults to the ancestor collab result),
    ``order`` (zero-based position under the root, applied through the
    ordering queue) and ``entity`` (storage entity linked to the item).
    """
    ordering = queue if queue is not None else insert_queue

    async def create_nav_item(descriptor: Mapping[str, Any], context: dict[str, Any]) -> NavItem:
        ensure_parameters(descriptor, "name", "app")
        collab_id = collab_id_from(descriptor, context)
        logger.debug("create nav item %s in collab %s", descriptor["name"], collab_id)

        app = await services.app_store.find_one({"title": descriptor["app"]})
        if app is None:
            raise AutomatorError(
                f"app not found: {descriptor['app']}",
                type="NotFound",
                data={"app": descriptor["app"]},
            )
        root = await services.nav_store.get_root(collab_id)
        nav = await services.nav_store.add_node(
            collab_id,
            NavItem(
                collab_id=collab_id,
                name=descriptor["name"],
                app_id=app.id,
                parent_id=root.id,
            ),
        )

        order = descriptor.get("order")
        if order is not None:
            placed = nav
            nav = await ordering.enqueue(
                lambda: services.nav_store.insert_node(collab_id, placed, root, int(order))
            )

        entity_name = descriptor.get("entity")
        if entity_name:
            entity = await _resolve_entity(services, entity_name, context)
            await services.storage.set_context_metadata(entity, nav.context)
        return nav

    return create_nav_item
