"""Decision API routes."""

from fastapi import APIRouter, Depends

from cardshow_authz.dependencies.auth import get_optional_principal
from cardshow_authz.dependencies.services import get_policy_evaluator
from cardshow_authz.policies.base_policy import Principal
from cardshow_authz.policies.evaluator import PolicyEvaluator
from cardshow_authz.schemas.decision import AuthorizeRequest, AuthorizeResponse

router = APIRouter()


@router.post("/authorize", response_model=AuthorizeResponse)
async def authorize(
    request: AuthorizeRequest,
    principal: Principal | None = Depends(get_optional_principal),
    evaluator: PolicyEvaluator = Depends(get_policy_evaluator),
):
    """Decide allow / deny / unauthenticated for the current principal."""

    decision = await evaluator.authorize(
        principal,
        request.entity_type,
        request.operation,
        entity_id=request.entity_id,
        resource=request.resource,
    )

    return AuthorizeResponse(
        message=decision.public_message,
        decision=decision.outcome,
        allowed=decision.allowed,
        degraded=decision.degraded,
    )
