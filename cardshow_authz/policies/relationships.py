"""Relationship resolver: ownership and participation facts for one principal.

Every lookup is a bounded indexed point or small list query against the
ports of entity types OTHER than the one being protected. A store failure
makes the lookup false and is recorded as an EvaluationFault for the
evaluator to report.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from cardshow_authz.constants.entities import ACTIVE_PARTICIPATION_STATUSES, EntityType
from cardshow_authz.ports.registry import MembershipProbe, ScopedPorts
from cardshow_authz.utils.exceptions import EvaluationFault

from .base_policy import Principal

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Store errors that fail a lookup closed
LOOKUP_ERRORS = (SQLAlchemyError, ConnectionError, TimeoutError)

_MISSING = object()


class RelationshipResolver:
    """Side-effect-free relationship lookups scoped to one evaluation."""

    def __init__(
        self,
        ports: ScopedPorts,
        principal: Principal,
        membership: MembershipProbe | None = None,
    ):
        self.ports = ports
        self.principal = principal
        self.membership = membership
        self.faults: list[EvaluationFault] = []
        self.lookups = 0
        self._rows: dict[tuple[EntityType, Any], Any] = {}

    @property
    def protected(self) -> EntityType:
        """Entity type whose policy this resolver serves."""
        return self.ports.excluded

    @property
    def degraded(self) -> bool:
        return bool(self.faults)

    async def _lookup(self, relation: str, fetch: Callable[[], Awaitable[T]], default: T) -> T:
        self.lookups += 1
        try:
            return await fetch()
        except LOOKUP_ERRORS as exc:
            fault = EvaluationFault(
                f"Relationship lookup '{relation}' failed",
                details={
                    "relation": relation,
                    "protected_entity": self.protected.value,
                    "principal_id": self.principal.id,
                    "error_type": type(exc).__name__,
                },
            )
            self.faults.append(fault)
            logger.warning(
                f"Relationship lookup '{relation}' failed, treating as false: {exc}",
                extra={"event": "evaluation_fault", **fault.details},
            )
            return default

    async def _row(self, entity_type: EntityType, entity_id: Any) -> Any | None:
        """Point read of a related row, cached for this evaluation."""
        key = (entity_type, entity_id)
        cached = self._rows.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        port = self.ports[entity_type]
        failures = len(self.faults)
        row = await self._lookup(f"{entity_type.value}.get", lambda: port.get(entity_id), None)
        if len(self.faults) == failures:
            self._rows[key] = row
        return row

    def _is_principal(self, user_id: Any) -> bool:
        return user_id is not None and str(user_id) == str(self.principal.id)

    # Shows

    async def organizes_show(self, show_id: Any) -> bool:
        """Show.organizer_id is the principal."""
        if show_id is None:
            return False
        show = await self._row(EntityType.SHOW, show_id)
        return show is not None and self._is_principal(show.organizer_id)

    async def listed_as_dealer(self, show_id: Any) -> bool:
        """Principal appears in the show's legacy dealers list."""
        if show_id is None:
            return False
        show = await self._row(EntityType.SHOW, show_id)
        return show is not None and str(self.principal.id) in show.dealer_ids

    async def has_planned_attendance(self, show_id: Any) -> bool:
        port = self.ports.planned_attendance
        return await self._lookup(
            "planned_attendance.exists",
            lambda: port.exists(user_id=self.principal.id, show_id=show_id),
            False,
        )

    async def has_show_participation(self, show_id: Any) -> bool:
        """A registered or confirmed participation row for the principal.

        Unavailable while protecting ShowParticipation itself.
        """
        port = self.ports.show_participations
        return await self._lookup(
            "show_participation.exists",
            lambda: port.exists(
                user_id=self.principal.id,
                show_id=show_id,
                status=ACTIVE_PARTICIPATION_STATUSES,
            ),
            False,
        )

    async def participates_in_show_safe(self, show_id: Any) -> bool:
        """Organizes, is a listed dealer, or plans to attend.

        Never consults ShowParticipation, so ShowParticipation's own read
        policy can depend on it.
        """
        if show_id is None:
            return False
        if await self.organizes_show(show_id):
            return True
        if await self.listed_as_dealer(show_id):
            return True
        return await self.has_planned_attendance(show_id)

    async def participates_in_show(self, show_id: Any) -> bool:
        """Safe participation plus participation rows, skipping the protected source."""
        if show_id is None:
            return False
        if await self.organizes_show(show_id):
            return True
        if await self.listed_as_dealer(show_id):
            return True
        if self.ports.allows(EntityType.PLANNED_ATTENDANCE) and await self.has_planned_attendance(show_id):
            return True
        if self.ports.allows(EntityType.SHOW_PARTICIPATION):
            return await self.has_show_participation(show_id)
        return False

    async def organizes_series(self, series_id: Any) -> bool:
        if series_id is None:
            return False
        series = await self._row(EntityType.SHOW_SERIES, series_id)
        return series is not None and self._is_principal(series.organizer_id)

    # Messaging

    async def is_conversation_participant(self, conversation_id: Any) -> bool:
        """Principal has a participant row in the conversation."""
        if conversation_id is None:
            return False
        port = self.ports.conversation_participants
        return await self._lookup(
            "conversation_participant.exists",
            lambda: port.exists(conversation_id=conversation_id, user_id=self.principal.id),
            False,
        )

    async def shares_conversation(self, conversation_id: Any) -> bool:
        """Membership check for ConversationParticipant's own policy.

        Uses the single-row membership probe; it terminates in one lookup.
        """
        if conversation_id is None:
            return False
        if self.membership is None:
            return await self.is_conversation_participant(conversation_id)
        return await self._lookup(
            "conversation_participant.self_membership",
            lambda: self.membership.is_member(conversation_id),
            False,
        )

    # Want lists

    async def owns_want_list(self, want_list_id: Any) -> bool:
        """WantList.user_id is the principal."""
        if want_list_id is None:
            return False
        want_list = await self._row(EntityType.WANT_LIST, want_list_id)
        return want_list is not None and self._is_principal(want_list.user_id)

    async def shares_want_list_with_show(self, want_list_id: Any, show_id: Any) -> bool:
        """A SharedWantList row joins the want list to the show."""
        port = self.ports.shared_want_lists
        return await self._lookup(
            "shared_want_list.exists",
            lambda: port.exists(want_list_id=want_list_id, show_id=show_id),
            False,
        )

    async def shared_show_ids(self, want_list_id: Any) -> list[Any]:
        """Shows a want list has been shared with."""
        if want_list_id is None:
            return []
        port = self.ports.shared_want_lists

        async def fetch() -> list[Any]:
            rows = await port.list(want_list_id=want_list_id)
            return [row.show_id for row in rows]

        return await self._lookup("shared_want_list.list", fetch, [])
