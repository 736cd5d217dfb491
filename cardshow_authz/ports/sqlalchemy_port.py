"""SQLAlchemy implementation of the data-access port."""

from typing import Any

from sqlalchemy import literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.constants.entities import EntityType
from cardshow_authz.models.base import Base


class SQLAlchemyEntityPort:
    """Entity port backed by an async session.

    All ports built for one session share its transaction, so a decision
    and the access it guards see the same data.
    """

    def __init__(self, session: AsyncSession, model: type[Base], entity_type: EntityType):
        self.session = session
        self.model = model
        self.entity_type = entity_type

    async def get(self, entity_id: Any, for_update: bool = False) -> Any | None:
        """Fetch one row by primary key, optionally locking it."""
        if entity_id is None:
            return None

        stmt = select(self.model).where(self.model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, **filters: Any) -> bool:
        """Single indexed existence probe."""
        stmt = select(literal(1)).select_from(self.model).where(*self._criteria(filters)).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def list(self, **filters: Any) -> list[Any]:
        """Fetch rows matching the filters in primary key order."""
        stmt = select(self.model).where(*self._criteria(filters)).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert(self, values: dict[str, Any]) -> Any:
        """Insert a row within the current transaction."""
        row = self.model(**values)
        self.session.add(row)
        await self.session.flush()
        # Load server-generated columns while still inside the async context
        await self.session.refresh(row)
        return row

    async def update(self, entity_id: Any, values: dict[str, Any]) -> Any | None:
        """Apply column updates to an existing row."""
        row = await self.get(entity_id)
        if row is None:
            return None

        for key, value in values.items():
            self._column(key)
            setattr(row, key, value)

        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def delete(self, entity_id: Any) -> bool:
        """Delete a row by primary key."""
        row = await self.get(entity_id)
        if row is None:
            return False

        await self.session.delete(row)
        await self.session.flush()
        return True

    def _column(self, name: str):
        """Resolve a filter or update key to a mapped column."""
        if name not in self.model.__mapper__.column_attrs:
            raise ValueError(f"Unknown field '{name}' for {self.entity_type.value}")
        return getattr(self.model, name)

    def _criteria(self, filters: dict[str, Any]) -> list:
        """Build equality / membership criteria from keyword filters."""
        criteria = []
        for name, value in filters.items():
            column = self._column(name)
            if isinstance(value, (list, tuple, set, frozenset)):
                criteria.append(column.in_(list(value)))
            else:
                criteria.append(column == value)
        return criteria

    def __repr__(self) -> str:
        return f"<SQLAlchemyEntityPort(entity_type='{self.entity_type.value}')>"
