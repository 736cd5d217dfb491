"""Show participation and planned attendance models."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cardshow_authz.constants.entities import (
    ACTIVE_PARTICIPATION_STATUSES,
    ParticipationRole,
    ParticipationStatus,
)

from .base import Base, IdMixin, TimestampMixin


class ShowParticipation(Base, IdMixin, TimestampMixin):
    """Links a user to a show as dealer, MVP dealer, organizer or attendee."""

    __tablename__ = "show_participants"

    show_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    role: Mapped[str] = mapped_column(
        String(20), default=ParticipationRole.DEALER.value, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=ParticipationStatus.REGISTERED.value, nullable=False, index=True
    )

    __table_args__ = (UniqueConstraint("show_id", "user_id", name="unique_show_participant"),)

    @property
    def is_active(self) -> bool:
        """Check if the participation still counts towards the show."""
        return self.status in ACTIVE_PARTICIPATION_STATUSES

    def __repr__(self) -> str:
        return (
            f"<ShowParticipation(show_id={self.show_id}, user_id={self.user_id}, "
            f"status='{self.status}')>"
        )


class PlannedAttendance(Base, IdMixin, TimestampMixin):
    """A user's intent to attend a show."""

    __tablename__ = "planned_attendance"

    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    show_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (UniqueConstraint("user_id", "show_id", name="unique_planned_attendance"),)

    def __repr__(self) -> str:
        return f"<PlannedAttendance(user_id={self.user_id}, show_id={self.show_id})>"
