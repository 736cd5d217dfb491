"""Base policy classes and types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from cardshow_authz.constants.entities import EntityType, Operation
from cardshow_authz.constants.status_codes import MUST_SIGN_IN_MESSAGE, NOT_PERMITTED_MESSAGE
from cardshow_authz.models.profile import Role

from . import roles

if TYPE_CHECKING:
    from .relationships import RelationshipResolver


@dataclass(frozen=True)
class Principal:
    """Resolved identity and role making a request."""

    id: str
    role: Role = Role.UNKNOWN
    is_service: bool = False


@dataclass
class PolicyContext:
    """Context for policy evaluation."""

    principal: Principal
    entity_type: EntityType
    operation: Operation
    relations: "RelationshipResolver"
    resource: Optional[Any] = None
    resource_id: Optional[Any] = None

    def field(self, name: str, default: Any = None) -> Any:
        """Read a field from the target row or the proposed values."""
        if self.resource is None:
            return default
        if isinstance(self.resource, dict):
            return self.resource.get(name, default)
        return getattr(self.resource, name, default)

    def is_self(self, name: str = "user_id") -> bool:
        """Check if the given field of the resource is the principal."""
        value = self.field(name)
        return value is not None and str(value) == str(self.principal.id)


@dataclass
class PolicyResult:
    """Result of policy evaluation."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls, reason: Optional[str] = None) -> "PolicyResult":
        """Create an allow result."""
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str) -> "PolicyResult":
        """Create a deny result."""
        return cls(allowed=False, reason=reason)


class DecisionOutcome(str, Enum):
    """Outcome of an authorization request."""

    ALLOW = "allow"
    DENY = "deny"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Decision:
    """Decision returned by the policy evaluator.

    ``reason`` is for logs and audit only; callers surface ``public_message``.
    """

    outcome: DecisionOutcome
    reason: Optional[str] = None
    degraded: bool = False
    admin_override: bool = False

    @property
    def allowed(self) -> bool:
        return self.outcome == DecisionOutcome.ALLOW

    @property
    def public_message(self) -> Optional[str]:
        """Generic message safe to show the caller."""
        if self.outcome == DecisionOutcome.UNAUTHENTICATED:
            return MUST_SIGN_IN_MESSAGE
        if self.outcome == DecisionOutcome.DENY:
            return NOT_PERMITTED_MESSAGE
        return None

    @classmethod
    def allow(cls, reason: Optional[str] = None, admin_override: bool = False) -> "Decision":
        return cls(DecisionOutcome.ALLOW, reason=reason, admin_override=admin_override)

    @classmethod
    def deny(cls, reason: str, degraded: bool = False) -> "Decision":
        return cls(DecisionOutcome.DENY, reason=reason, degraded=degraded)

    @classmethod
    def unauthenticated(cls) -> "Decision":
        return cls(DecisionOutcome.UNAUTHENTICATED, reason="No principal")


class BasePolicy(ABC):
    """Base class for all entity policies.

    Each check ORs its predicates: any path that grants access is enough,
    and no role path narrows another.
    """

    entity_type: EntityType

    async def check(self, operation: Operation, context: PolicyContext) -> PolicyResult:
        """Check if operation is allowed in the given context."""
        if operation == Operation.SELECT:
            return await self._check_select(context)
        elif operation == Operation.INSERT:
            return await self._check_insert(context)
        elif operation == Operation.UPDATE:
            return await self._check_update(context)
        elif operation == Operation.DELETE:
            return await self._check_delete(context)
        else:
            return PolicyResult.deny(f"Unknown operation: {operation}")

    @abstractmethod
    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        pass

    @abstractmethod
    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        pass

    @abstractmethod
    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        pass

    @abstractmethod
    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        pass

    def _self_only(self, context: PolicyContext, field: str = "user_id") -> PolicyResult:
        """Allow only when the row belongs to the principal."""
        if context.is_self(field):
            return PolicyResult.allow("Self access")
        return PolicyResult.deny("Not the owner")

    async def _organizes_with_role(self, context: PolicyContext, show_id: Any) -> bool:
        """MVP dealers and organizers, for shows they organize themselves."""
        principal = context.principal
        if not (roles.is_mvp_dealer(principal) or roles.is_organizer(principal)):
            return False
        return await context.relations.organizes_show(show_id)

    async def _sees_shares_at_show(self, context: PolicyContext, show_id: Any) -> bool:
        """Want lists shared with a show reach its organizer, and MVP dealers taking part in it."""
        if await self._organizes_with_role(context, show_id):
            return True
        if not roles.is_mvp_dealer(context.principal):
            return False
        return await context.relations.participates_in_show(show_id)
