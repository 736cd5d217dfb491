"""Database models."""

from cardshow_authz.constants.entities import EntityType

from .audit_log import AuditLogEntry
from .base import Base, IdMixin, TimestampMixin, new_id
from .engagement import Favorite, Review
from .messaging import Conversation, ConversationParticipant, Message
from .participation import PlannedAttendance, ShowParticipation
from .profile import Profile, Role
from .show import Show, ShowSeries
from .want_list import SharedWantList, WantList

# Model backing each protected entity type
ENTITY_MODELS = {
    EntityType.SHOW: Show,
    EntityType.SHOW_SERIES: ShowSeries,
    EntityType.SHOW_PARTICIPATION: ShowParticipation,
    EntityType.PLANNED_ATTENDANCE: PlannedAttendance,
    EntityType.WANT_LIST: WantList,
    EntityType.SHARED_WANT_LIST: SharedWantList,
    EntityType.CONVERSATION: Conversation,
    EntityType.CONVERSATION_PARTICIPANT: ConversationParticipant,
    EntityType.MESSAGE: Message,
    EntityType.FAVORITE: Favorite,
    EntityType.REVIEW: Review,
}

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "new_id",
    "ENTITY_MODELS",
    "AuditLogEntry",
    "Profile",
    "Role",
    "Show",
    "ShowSeries",
    "ShowParticipation",
    "PlannedAttendance",
    "WantList",
    "SharedWantList",
    "Conversation",
    "ConversationParticipant",
    "Message",
    "Favorite",
    "Review",
]
