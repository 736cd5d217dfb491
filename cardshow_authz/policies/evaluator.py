"""Policy evaluator: one allow/deny decision per (principal, entity, operation).

Order of evaluation:

1. no principal: public reads allowed, everything else unauthenticated
2. public reads (Show, ShowSeries SELECT) allowed
3. admin and service principals allowed, audited as overrides
4. unknown roles denied
5. target row loaded (the guarded row itself, not a relationship lookup)
6. entity policy run with relationship lookups that exclude the entity's own port

Relationship lookups that hit a store error count as false and are audited
as evaluation errors; a deny they contributed to is marked degraded.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from cardshow_authz.audit.emitter import AuditEmitter
from cardshow_authz.audit.events import AuditDecision, AuditEvent
from cardshow_authz.config.settings import settings
from cardshow_authz.constants.entities import EntityType, Operation, is_public_read
from cardshow_authz.ports.registry import PortRegistry
from cardshow_authz.utils.exceptions import EvaluationFault

from . import roles
from .base_policy import BasePolicy, Decision, PolicyContext, Principal
from .guards import POLICY_REGISTRY
from .relationships import LOOKUP_ERRORS, RelationshipResolver

logger = logging.getLogger(__name__)


class PolicyEvaluator:
    """Evaluate entity policies against one port registry (one transaction)."""

    def __init__(
        self,
        ports: PortRegistry,
        audit: Optional[AuditEmitter] = None,
        policies: Optional[Mapping[EntityType, BasePolicy]] = None,
        audit_admin_overrides: Optional[bool] = None,
    ):
        self.ports = ports
        self.audit = audit
        if policies is None:
            policies = {entity_type: policy_class() for entity_type, policy_class in POLICY_REGISTRY.items()}
        self.policies = dict(policies)
        if audit_admin_overrides is None:
            audit_admin_overrides = settings.AUDIT_ADMIN_OVERRIDES
        self.audit_admin_overrides = audit_admin_overrides

    async def authorize(
        self,
        principal: Optional[Principal],
        entity_type: EntityType,
        operation: Operation,
        entity_id: Any = None,
        resource: Any = None,
        for_update: bool = False,
    ) -> Decision:
        """Decide whether ``principal`` may perform ``operation`` on the entity.

        ``resource`` is the target row when the caller already holds it, or
        the proposed values for INSERT. Otherwise the row is read by
        ``entity_id``, with ``FOR UPDATE`` when ``for_update`` is set.
        """
        entity_type = EntityType(entity_type)
        operation = Operation(operation)

        decision = await self._evaluate(principal, entity_type, operation, entity_id, resource, for_update)

        logger.debug(
            f"authorize {operation.value} {entity_type.value}: {decision.outcome.value}",
            extra={
                "event": "authz_decision",
                "principal_id": principal.id if principal else None,
                "entity_type": entity_type.value,
                "entity_id": self._entity_id(entity_id, resource),
                "operation": operation.value,
                "outcome": decision.outcome.value,
                "reason": decision.reason,
            },
        )
        return decision

    async def _evaluate(
        self,
        principal: Optional[Principal],
        entity_type: EntityType,
        operation: Operation,
        entity_id: Any,
        resource: Any,
        for_update: bool,
    ) -> Decision:
        if principal is None:
            if is_public_read(entity_type, operation):
                return Decision.allow("public_read")
            return Decision.unauthenticated()

        if is_public_read(entity_type, operation):
            return Decision.allow("public_read")

        if roles.has_admin_override(principal):
            reason = "service_override" if roles.is_service(principal) else "admin_override"
            if self.audit_admin_overrides:
                self._emit(principal, entity_type, operation, entity_id, resource, AuditDecision.ADMIN_OVERRIDE, reason)
            return Decision.allow(reason, admin_override=True)

        if not roles.has_known_role(principal):
            return self._deny(principal, entity_type, operation, entity_id, resource, "unknown_role")

        if resource is None and entity_id is not None:
            try:
                resource = await self.ports.port(entity_type).get(entity_id, for_update=for_update)
            except LOOKUP_ERRORS as e:
                fault = EvaluationFault(
                    f"Loading {entity_type.value} failed",
                    details={"entity_type": entity_type.value, "error_type": type(e).__name__},
                )
                logger.warning(
                    f"{fault.message}: {e}",
                    extra={"event": "evaluation_fault", "principal_id": principal.id, **fault.details},
                )
                self._emit(
                    principal, entity_type, operation, entity_id, None, AuditDecision.EVALUATION_ERROR, fault.message
                )
                return self._deny(
                    principal, entity_type, operation, entity_id, None, "evaluation_fault", degraded=True
                )
            if resource is None:
                return self._deny(principal, entity_type, operation, entity_id, None, "not_found")

        if resource is None:
            return self._deny(principal, entity_type, operation, entity_id, None, "no_target")

        policy = self.policies.get(entity_type)
        if policy is None:
            return self._deny(principal, entity_type, operation, entity_id, resource, "no_policy")

        relations = self.resolver_for(principal, entity_type)
        context = PolicyContext(
            principal=principal,
            entity_type=entity_type,
            operation=operation,
            relations=relations,
            resource=resource,
            resource_id=entity_id,
        )
        result = await policy.check(operation, context)

        for fault in relations.faults:
            self._emit(
                principal,
                entity_type,
                operation,
                entity_id,
                resource,
                AuditDecision.EVALUATION_ERROR,
                fault.details.get("relation", fault.message),
            )

        if result.allowed:
            return Decision.allow(result.reason)
        if relations.degraded:
            return self._deny(
                principal, entity_type, operation, entity_id, resource, "evaluation_fault", degraded=True
            )
        return self._deny(principal, entity_type, operation, entity_id, resource, result.reason or "denied")

    def resolver_for(self, principal: Principal, entity_type: EntityType) -> RelationshipResolver:
        """Relationship resolver that cannot reach ``entity_type``'s own port."""
        membership = None
        if entity_type == EntityType.CONVERSATION_PARTICIPANT:
            membership = self.ports.self_membership(principal.id)
        return RelationshipResolver(self.ports.excluding(entity_type), principal, membership=membership)

    def _deny(
        self,
        principal: Principal,
        entity_type: EntityType,
        operation: Operation,
        entity_id: Any,
        resource: Any,
        reason: str,
        degraded: bool = False,
    ) -> Decision:
        logger.info(
            f"Denied {operation.value} on {entity_type.value}",
            extra={
                "event": "authz_deny",
                "principal_id": principal.id,
                "entity_type": entity_type.value,
                "entity_id": self._entity_id(entity_id, resource),
                "reason": reason,
                "degraded": degraded,
            },
        )
        self._emit(principal, entity_type, operation, entity_id, resource, AuditDecision.DENY, reason)
        return Decision.deny(reason, degraded=degraded)

    def _emit(
        self,
        principal: Principal,
        entity_type: EntityType,
        operation: Operation,
        entity_id: Any,
        resource: Any,
        decision: AuditDecision,
        reason: Optional[str],
    ) -> None:
        if self.audit is None:
            return
        self.audit.emit(
            AuditEvent(
                principal_id=principal.id,
                entity_type=entity_type.value,
                operation=operation.value,
                decision=decision,
                entity_id=self._entity_id(entity_id, resource),
                reason=reason,
            )
        )

    @staticmethod
    def _entity_id(entity_id: Any, resource: Any) -> Optional[str]:
        if entity_id is None and resource is not None:
            entity_id = resource.get("id") if isinstance(resource, dict) else getattr(resource, "id", None)
        return None if entity_id is None else str(entity_id)
