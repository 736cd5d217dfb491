"""Service layer for business logic."""

from .access_service import AccessService
from .identity_service import IdentityProvider, JWTIdentityProvider, Subject
from .principal_service import PrincipalResolver

__all__ = [
    "AccessService",
    "IdentityProvider",
    "JWTIdentityProvider",
    "PrincipalResolver",
    "Subject",
]
