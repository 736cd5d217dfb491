"""Declarative base shared by every marketplace table."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, as_declarative, declared_attr, mapped_column


def new_id() -> str:
    """Generate a primary key compatible with identity provider subject ids."""
    return str(uuid.uuid4())


@as_declarative()
class Base:
    """Rows expose their columns through ``as_dict`` for ports and responses."""

    id: Any
    __name__: str

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    def as_dict(self) -> dict[str, Any]:
        """Column values of this row keyed by attribute name."""
        return {column.key: getattr(self, column.key) for column in self.__mapper__.column_attrs}


class IdMixin:
    """Text UUID primary key."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """Server-side creation and modification times."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
