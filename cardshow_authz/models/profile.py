"""Profile model and marketplace roles."""

from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class Role(str, Enum):
    """Marketplace role of a user."""

    ADMIN = "admin"  # Unconditional access to every entity
    SHOW_ORGANIZER = "show_organizer"  # Runs shows and show series
    MVP_DEALER = "mvp_dealer"  # Paid dealer tier, sees shared want lists
    DEALER = "dealer"
    ATTENDEE = "attendee"
    UNKNOWN = "unknown"  # Unrecognised stored value, never privileged

    @classmethod
    def normalize(cls, raw: str | None) -> "Role":
        """Map a free-text stored role onto the closed enum.

        Stored roles vary in case and separators (``MVP_DEALER``, ``mvp-dealer``).
        Anything not recognised becomes ``UNKNOWN``.
        """
        if not raw:
            return cls.UNKNOWN

        value = raw.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            role = cls(value)
        except ValueError:
            return cls.UNKNOWN
        return role


class Profile(Base, IdMixin, TimestampMixin):
    """User profile holding the stored role string."""

    __tablename__ = "profiles"

    # Role as stored by the account system; normalised only at principal load
    role: Mapped[str | None] = mapped_column(String(50))
    display_name: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255), index=True)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, role='{self.role}')>"
