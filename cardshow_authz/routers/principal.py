"""Current principal routes."""

from fastapi import APIRouter, Depends

from cardshow_authz.dependencies.auth import get_current_principal
from cardshow_authz.policies.base_policy import Principal
from cardshow_authz.schemas.decision import PrincipalResponse

router = APIRouter()


@router.get("/me", response_model=PrincipalResponse)
async def get_me(principal: Principal = Depends(get_current_principal)):
    """Get the resolved principal for the bearer token."""
    return PrincipalResponse(id=principal.id, role=principal.role, is_service=principal.is_service)
