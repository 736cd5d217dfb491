"""Data-access port protocol."""

from typing import Any, Protocol, runtime_checkable

from cardshow_authz.constants.entities import EntityType


@runtime_checkable
class EntityPort(Protocol):
    """Data access for one entity type, supplied by the storage layer."""

    entity_type: EntityType

    async def get(self, entity_id: Any, for_update: bool = False) -> Any | None:
        """Fetch one row by primary key."""
        ...

    async def exists(self, **filters: Any) -> bool:
        """Check whether any row matches the equality filters."""
        ...

    async def list(self, **filters: Any) -> list[Any]:
        """Fetch all rows matching the equality filters."""
        ...

    async def insert(self, values: dict[str, Any]) -> Any:
        """Insert a row and return it."""
        ...

    async def update(self, entity_id: Any, values: dict[str, Any]) -> Any | None:
        """Update a row in place and return it."""
        ...

    async def delete(self, entity_id: Any) -> bool:
        """Delete a row, returning whether it existed."""
        ...
