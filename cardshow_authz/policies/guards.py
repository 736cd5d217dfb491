"""Guard helpers for authorization checks."""

from typing import TYPE_CHECKING, Any, Optional

from cardshow_authz.constants.entities import EntityType, Operation
from cardshow_authz.utils.exceptions import EvaluationFault, UnauthenticatedError, UnauthorizedError

from .base_policy import BasePolicy, DecisionOutcome, Principal
from .engagement_policy import FavoritePolicy, ReviewPolicy
from .messaging_policy import ConversationParticipantPolicy, ConversationPolicy, MessagePolicy
from .participation_policy import PlannedAttendancePolicy, ShowParticipationPolicy
from .show_policy import ShowPolicy, ShowSeriesPolicy
from .want_list_policy import SharedWantListPolicy, WantListPolicy

if TYPE_CHECKING:
    from .evaluator import PolicyEvaluator

# Policy registry
POLICY_REGISTRY: dict[EntityType, type[BasePolicy]] = {
    EntityType.SHOW: ShowPolicy,
    EntityType.SHOW_SERIES: ShowSeriesPolicy,
    EntityType.SHOW_PARTICIPATION: ShowParticipationPolicy,
    EntityType.PLANNED_ATTENDANCE: PlannedAttendancePolicy,
    EntityType.WANT_LIST: WantListPolicy,
    EntityType.SHARED_WANT_LIST: SharedWantListPolicy,
    EntityType.CONVERSATION: ConversationPolicy,
    EntityType.CONVERSATION_PARTICIPANT: ConversationParticipantPolicy,
    EntityType.MESSAGE: MessagePolicy,
    EntityType.FAVORITE: FavoritePolicy,
    EntityType.REVIEW: ReviewPolicy,
}


async def can(
    evaluator: "PolicyEvaluator",
    principal: Optional[Principal],
    operation: Operation,
    entity_type: EntityType,
    entity_id: Any | None = None,
    resource: Any | None = None,
) -> bool:
    """
    Check if principal can perform operation on an entity.

    Usage:
        await can(evaluator, principal, Operation.SELECT, EntityType.WANT_LIST, entity_id=want_list_id)
        await can(evaluator, principal, Operation.INSERT, EntityType.REVIEW, resource=values)
    """
    decision = await evaluator.authorize(
        principal, entity_type, operation, entity_id=entity_id, resource=resource
    )
    return decision.allowed


async def require(
    evaluator: "PolicyEvaluator",
    principal: Optional[Principal],
    operation: Operation,
    entity_type: EntityType,
    entity_id: Any | None = None,
    resource: Any | None = None,
    for_update: bool = False,
):
    """
    Require that principal can perform operation on an entity.
    Raises UnauthenticatedError or UnauthorizedError with a generic message,
    or EvaluationFault when the deny came from an unreachable data source.

    Usage:
        await require(evaluator, principal, Operation.DELETE, EntityType.MESSAGE, entity_id=message_id)
    """
    decision = await evaluator.authorize(
        principal,
        entity_type,
        operation,
        entity_id=entity_id,
        resource=resource,
        for_update=for_update,
    )

    if decision.outcome == DecisionOutcome.UNAUTHENTICATED:
        raise UnauthenticatedError()
    if decision.degraded:
        raise EvaluationFault()
    if not decision.allowed:
        raise UnauthorizedError()
    return decision


def register_policy(entity_type: EntityType, policy_class: type[BasePolicy]) -> None:
    """
    Replace the policy used for an entity type.

    Usage:
        register_policy(EntityType.REVIEW, StrictReviewPolicy)
    """
    POLICY_REGISTRY[EntityType(entity_type)] = policy_class
