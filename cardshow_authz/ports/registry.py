"""Port registry and scoped port capabilities.

Relationship checks that protect entity type E never hold a reference to
E's own port: the evaluator hands them ``registry.excluding(E)``, and the
scoped view refuses that one type. This is what keeps ShowParticipation
visibility from re-entering ShowParticipation.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.constants.entities import EntityType
from cardshow_authz.models import ENTITY_MODELS
from cardshow_authz.utils.exceptions import NonRecursionViolation

from .base import EntityPort
from .sqlalchemy_port import SQLAlchemyEntityPort


class PortRegistry:
    """All data-access ports bound to a single session."""

    def __init__(self, ports: Mapping[EntityType, EntityPort]):
        missing = set(EntityType) - set(ports)
        if missing:
            names = sorted(entity_type.value for entity_type in missing)
            raise ValueError(f"Missing data-access ports for: {names}")
        self._ports = dict(ports)

    @classmethod
    def for_session(cls, session: AsyncSession) -> "PortRegistry":
        """Build SQLAlchemy ports for every entity type on one session."""
        return cls(
            {
                entity_type: SQLAlchemyEntityPort(session, model, entity_type)
                for entity_type, model in ENTITY_MODELS.items()
            }
        )

    def port(self, entity_type: EntityType) -> EntityPort:
        """Port used to read or write the guarded row itself."""
        return self._ports[EntityType(entity_type)]

    def excluding(self, entity_type: EntityType) -> "ScopedPorts":
        """Ports available to relationship checks protecting ``entity_type``."""
        return ScopedPorts(self._ports, excluded=EntityType(entity_type))

    def self_membership(self, user_id: Any) -> "MembershipProbe":
        """Single-row membership probe for the principal's own participant row."""
        return MembershipProbe(self._ports[EntityType.CONVERSATION_PARTICIPANT], user_id)


class ScopedPorts:
    """Ports for every entity type except the one being protected."""

    def __init__(self, ports: Mapping[EntityType, EntityPort], excluded: EntityType):
        self._ports = ports
        self.excluded = excluded

    def allows(self, entity_type: EntityType) -> bool:
        """Check whether the port for ``entity_type`` may be used."""
        return entity_type != self.excluded

    def __getitem__(self, entity_type: EntityType) -> EntityPort:
        if entity_type == self.excluded:
            raise NonRecursionViolation(entity_type)
        return self._ports[entity_type]

    @property
    def shows(self) -> EntityPort:
        return self[EntityType.SHOW]

    @property
    def show_series(self) -> EntityPort:
        return self[EntityType.SHOW_SERIES]

    @property
    def show_participations(self) -> EntityPort:
        return self[EntityType.SHOW_PARTICIPATION]

    @property
    def planned_attendance(self) -> EntityPort:
        return self[EntityType.PLANNED_ATTENDANCE]

    @property
    def want_lists(self) -> EntityPort:
        return self[EntityType.WANT_LIST]

    @property
    def shared_want_lists(self) -> EntityPort:
        return self[EntityType.SHARED_WANT_LIST]

    @property
    def conversation_participants(self) -> EntityPort:
        return self[EntityType.CONVERSATION_PARTICIPANT]

    def __repr__(self) -> str:
        return f"<ScopedPorts(excluded='{self.excluded.value}')>"


class MembershipProbe:
    """The one sanctioned self-referential lookup.

    ConversationParticipant visibility may check the principal's own
    membership row. The probe only offers a single point query keyed on
    (conversation_id, user_id), never a list or join over other rows.
    """

    def __init__(self, port: EntityPort, user_id: Any):
        self._port = port
        self.user_id = user_id

    async def is_member(self, conversation_id: Any) -> bool:
        return await self._port.exists(conversation_id=conversation_id, user_id=self.user_id)
