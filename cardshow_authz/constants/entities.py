"""Protected entity types and data operations."""

from enum import Enum


class EntityType(str, Enum):
    """Entity types guarded by the authorization layer."""

    SHOW = "show"
    SHOW_SERIES = "show_series"
    SHOW_PARTICIPATION = "show_participation"
    PLANNED_ATTENDANCE = "planned_attendance"
    WANT_LIST = "want_list"
    SHARED_WANT_LIST = "shared_want_list"
    CONVERSATION = "conversation"
    CONVERSATION_PARTICIPANT = "conversation_participant"
    MESSAGE = "message"
    FAVORITE = "favorite"
    REVIEW = "review"


class Operation(str, Enum):
    """Data operations a principal can request on an entity."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class ParticipationStatus(str, Enum):
    """Lifecycle of a show participation row."""

    REGISTERED = "registered"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ParticipationRole(str, Enum):
    """Capacity in which a user takes part in a show."""

    DEALER = "dealer"
    MVP_DEALER = "mvp_dealer"
    ORGANIZER = "organizer"
    ATTENDEE = "attendee"


# Readable by anyone, signed in or not
PUBLIC_READABLE = frozenset({EntityType.SHOW, EntityType.SHOW_SERIES})

# Participation rows that count as "takes part in the show"
ACTIVE_PARTICIPATION_STATUSES = (
    ParticipationStatus.REGISTERED.value,
    ParticipationStatus.CONFIRMED.value,
)


def is_public_read(entity_type: EntityType, operation: Operation) -> bool:
    """Check if the operation is a read of a publicly visible entity."""
    return operation == Operation.SELECT and entity_type in PUBLIC_READABLE
