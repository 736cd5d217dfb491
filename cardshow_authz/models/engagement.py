"""Favorite show and review models."""

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class Favorite(Base, IdMixin, TimestampMixin):
    """A show a user has marked as favorite."""

    __tablename__ = "user_favorite_shows"

    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    show_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (UniqueConstraint("user_id", "show_id", name="unique_favorite_show"),)

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, show_id={self.show_id})>"


class Review(Base, IdMixin, TimestampMixin):
    """A review of a show by someone who took part in it."""

    __tablename__ = "reviews"

    show_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Review(show_id={self.show_id}, user_id={self.user_id}, rating={self.rating})>"
