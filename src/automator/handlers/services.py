"""
Contracts of the external collaborators used by the built-in handlers.

The HTTP clients for the collab, app, navigation and storage APIs live
outside this package; anything matching these protocols can be plugged in.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from automator.util.errors import MissingParameterError


@dataclass(slots=True)
class Collab:
    id: int | str
    title: str
    content: str | None = None
    private: bool = False


@dataclass(slots=True)
class App:
    id: int | str
    title: str


@dataclass(slots=True)
class NavItem:
    collab_id: int | str
    name: str
    app_id: int | str | None = None
    parent_id: int | str | None = None
    id: int | str | None = None
    order: int | None = None
    context: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(slots=True)
class Entity:
    uuid: str
    name: str | None = None
    entity_type: str = "file"


class CollabStore(Protocol):
    async def create(self, attrs: Mapping[str, Any]) -> Collab: ...


class AppStore(Protocol):
    async def find_one(self, options: Mapping[str, Any]) -> App | None: ...


class NavStore(Protocol):
    async def get_root(self, collab_id: int | str) -> NavItem: ...

    async def add_node(self, collab_id: int | str, nav_item: NavItem) -> NavItem: ...

    async def insert_node(
        self, collab_id: int | str, nav_item: NavItem, parent_item: NavItem, insert_at: int
    ) -> NavItem: ...


class EntityStore(Protocol):
    async def get(self, entity_id: str) -> Entity: ...

    async def copy(self, entity_id: str, destination_id: str) -> Entity: ...


class Storage(Protocol):
    async def get_project_by_collab(self, collab_id: int | str) -> Entity: ...

    async def set_context_metadata(self, entity: Entity, context_id: str) -> None: ...


@dataclass(slots=True)
class CollabServices:
    collab_store: CollabStore
    app_store: AppStore
    nav_store: NavStore
    entity_store: EntityStore
    storage: Storage


def collab_id_from(descriptor: Mapping[str, Any], context: Mapping[str, Any]) -> int | str:
    """Collab id from ``descriptor["collab"]``, else from the ``collab`` task result."""
    explicit = descriptor.get("collab")
    if explicit is not None:
        return explicit
    collab = context.get("collab")
    if isinstance(collab, Mapping):
        collab = collab.get("id")
    else:
        collab = getattr(collab, "id", None)
    if collab is None:
        raise MissingParameterError("collab", dict(descriptor))
    return collab
