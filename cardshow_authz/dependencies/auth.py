"""Principal dependencies for FastAPI."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.policies.base_policy import Principal
from cardshow_authz.services.identity_service import IdentityProvider, JWTIdentityProvider
from cardshow_authz.services.principal_service import PrincipalResolver
from cardshow_authz.utils.exceptions import UnauthenticatedError

from .database import get_db

# Security scheme for Bearer tokens
security = HTTPBearer(auto_error=False)


def get_identity_provider() -> IdentityProvider:
    """Identity collaborator used to verify bearer tokens."""
    return JWTIdentityProvider()


async def get_optional_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Principal | None:
    """Resolve the principal for this request, or None when not signed in.

    Resolved at most once per request and kept on ``request.state``.
    """
    if hasattr(request.state, "principal"):
        return request.state.principal

    token = credentials.credentials if credentials else None
    principal = await PrincipalResolver(db, identity).resolve_optional(token)
    request.state.principal = principal
    return principal


async def get_current_principal(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    """Require a signed-in principal."""
    if principal is None:
        raise UnauthenticatedError()
    return principal
