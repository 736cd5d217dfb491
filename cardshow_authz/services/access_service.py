"""Guarded data access.

Each operation decides and then reads or writes inside one transaction on
one session. UPDATE and DELETE lock the target row before the decision so
its ownership cannot change between decision and use.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.audit.emitter import AuditEmitter
from cardshow_authz.constants.entities import EntityType, Operation, is_public_read
from cardshow_authz.policies.base_policy import Decision, DecisionOutcome, Principal
from cardshow_authz.policies.evaluator import PolicyEvaluator
from cardshow_authz.ports.registry import PortRegistry
from cardshow_authz.utils.exceptions import (
    EntityNotFoundError,
    EvaluationFault,
    UnauthenticatedError,
    UnauthorizedError,
)
from cardshow_authz.utils.transaction_manager import transaction_scope

logger = logging.getLogger(__name__)


class AccessService:
    """Read and write protected entities on behalf of a principal."""

    def __init__(self, db: AsyncSession, audit: Optional[AuditEmitter] = None):
        self.db = db
        self.ports = PortRegistry.for_session(db)
        self.evaluator = PolicyEvaluator(self.ports, audit=audit)

    async def get(self, principal: Optional[Principal], entity_type: EntityType, entity_id: Any) -> Any:
        """Fetch one row the principal may see."""
        entity_type = EntityType(entity_type)
        async with transaction_scope(self.db):
            row = await self.ports.port(entity_type).get(entity_id)
            decision = await self.evaluator.authorize(
                principal, entity_type, Operation.SELECT, entity_id=entity_id, resource=row
            )
            self._raise_for(decision, principal, row)
            return row

    async def list_visible(
        self,
        principal: Optional[Principal],
        entity_type: EntityType,
        **filters: Any,
    ) -> List[Any]:
        """List rows matching the filters, keeping only those the principal may see.

        Each row is decided on its own; a denied row is left out rather than
        failing the whole listing. Anonymous listings of private entities are
        refused before any row is read, whether or not rows match.
        """
        entity_type = EntityType(entity_type)
        if principal is None and not is_public_read(entity_type, Operation.SELECT):
            raise UnauthenticatedError()

        async with transaction_scope(self.db):
            rows = await self.ports.port(entity_type).list(**filters)
            visible = []
            for row in rows:
                decision = await self.evaluator.authorize(
                    principal, entity_type, Operation.SELECT, entity_id=row.id, resource=row
                )
                if decision.outcome == DecisionOutcome.UNAUTHENTICATED:
                    raise UnauthenticatedError()
                if decision.allowed:
                    visible.append(row)

            logger.debug(
                f"Listed {len(visible)}/{len(rows)} visible {entity_type.value} rows",
                extra={"principal_id": principal.id if principal else None, "filters": filters},
            )
            return visible

    async def insert(
        self,
        principal: Optional[Principal],
        entity_type: EntityType,
        values: Dict[str, Any],
    ) -> Any:
        """Insert a row after checking the proposed values."""
        entity_type = EntityType(entity_type)
        async with transaction_scope(self.db):
            decision = await self.evaluator.authorize(
                principal, entity_type, Operation.INSERT, resource=dict(values)
            )
            self._raise_for(decision, principal, values)
            return await self.ports.port(entity_type).insert(dict(values))

    async def update(
        self,
        principal: Optional[Principal],
        entity_type: EntityType,
        entity_id: Any,
        values: Dict[str, Any],
    ) -> Any:
        """Update a row the principal may change, into a state it may still own.

        The current row is checked first, then the row as it would look after
        the update, so a principal cannot hand a row to someone else.
        """
        entity_type = EntityType(entity_type)
        port = self.ports.port(entity_type)
        async with transaction_scope(self.db):
            row = await port.get(entity_id, for_update=True)
            decision = await self.evaluator.authorize(
                principal, entity_type, Operation.UPDATE, entity_id=entity_id, resource=row
            )
            self._raise_for(decision, principal, row)

            proposed = {**row.as_dict(), **values}
            decision = await self.evaluator.authorize(
                principal, entity_type, Operation.UPDATE, entity_id=entity_id, resource=proposed
            )
            self._raise_for(decision, principal, proposed)

            return await port.update(entity_id, values)

    async def delete(self, principal: Optional[Principal], entity_type: EntityType, entity_id: Any) -> None:
        """Delete a row the principal may remove."""
        entity_type = EntityType(entity_type)
        port = self.ports.port(entity_type)
        async with transaction_scope(self.db):
            row = await port.get(entity_id, for_update=True)
            decision = await self.evaluator.authorize(
                principal, entity_type, Operation.DELETE, entity_id=entity_id, resource=row
            )
            self._raise_for(decision, principal, row)
            await port.delete(entity_id)

    @staticmethod
    def _raise_for(decision: Decision, principal: Optional[Principal], row: Any) -> None:
        """Turn a decision into the caller-facing error, if any.

        A missing row only gets past the evaluator for principals who could
        have seen it (admins, public reads); everyone else gets the ordinary
        deny.
        """
        if decision.outcome == DecisionOutcome.UNAUTHENTICATED:
            raise UnauthenticatedError()
        if decision.degraded:
            raise EvaluationFault()
        if not decision.allowed:
            raise UnauthorizedError()
        if row is None:
            raise EntityNotFoundError()
