"""Conversation, participant and message models."""

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class Conversation(Base, IdMixin, TimestampMixin):
    """A direct, group or show-wide conversation."""

    __tablename__ = "conversations"

    type: Mapped[str] = mapped_column(String(20), default="direct", nullable=False)
    show_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("shows.id", ondelete="SET NULL"), index=True
    )

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, type='{self.type}')>"


class ConversationParticipant(Base, IdMixin, TimestampMixin):
    """Membership of a user in a conversation."""

    __tablename__ = "conversation_participants"

    conversation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("conversation_id", "user_id", name="unique_conversation_participant"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConversationParticipant(conversation_id={self.conversation_id}, "
            f"user_id={self.user_id})>"
        )


class Message(Base, IdMixin, TimestampMixin):
    """A message posted to a conversation."""

    __tablename__ = "messages"

    conversation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    read_by: Mapped[list[str] | None] = mapped_column(JSON, default=list)

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, sender_id={self.sender_id})>"
