"""Show and show series models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class ShowSeries(Base, IdMixin, TimestampMixin):
    """A recurring series of shows run by one organizer."""

    __tablename__ = "show_series"

    organizer_id: Mapped[str | None] = mapped_column(String(36), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<ShowSeries(id={self.id}, organizer_id={self.organizer_id})>"


class Show(Base, IdMixin, TimestampMixin):
    """A trading-card show, owned by its organizer."""

    __tablename__ = "shows"

    organizer_id: Mapped[str | None] = mapped_column(String(36), index=True)
    series_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("show_series.id", ondelete="SET NULL"), index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="upcoming", nullable=False)

    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)

    # Legacy membership list of dealer user ids
    dealers: Mapped[list[str] | None] = mapped_column(JSON, default=list)

    @property
    def dealer_ids(self) -> set[str]:
        """Dealer ids from the legacy list, tolerant of comma separated text."""
        raw = self.dealers
        if not raw:
            return set()
        if isinstance(raw, str):
            return {part.strip() for part in raw.split(",") if part.strip()}
        return {str(item) for item in raw}

    def __repr__(self) -> str:
        return f"<Show(id={self.id}, organizer_id={self.organizer_id}, status='{self.status}')>"
