"""Want list models."""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class WantList(Base, IdMixin, TimestampMixin):
    """Cards a collector is looking for."""

    __tablename__ = "want_lists"

    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def __repr__(self) -> str:
        return f"<WantList(id={self.id}, user_id={self.user_id})>"


class SharedWantList(Base, IdMixin, TimestampMixin):
    """Exposes a want list to the dealers and organizer of one show."""

    __tablename__ = "shared_want_lists"

    want_list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("want_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    show_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("want_list_id", "show_id", name="unique_shared_want_list"),
    )

    def __repr__(self) -> str:
        return f"<SharedWantList(want_list_id={self.want_list_id}, show_id={self.show_id})>"
