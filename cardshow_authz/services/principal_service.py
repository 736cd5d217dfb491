"""Principal resolver: session credential to Principal{id, role}."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.models.profile import Profile, Role
from cardshow_authz.policies.base_policy import Principal
from cardshow_authz.utils.exceptions import EvaluationFault, UnauthenticatedError

from .identity_service import IdentityProvider, JWTIdentityProvider

logger = logging.getLogger(__name__)


class PrincipalResolver:
    """Resolve the requesting principal.

    Looks up exactly one profile row per resolution and normalizes its role
    once; predicates downstream compare enum members only. No retries.
    """

    def __init__(self, db: AsyncSession, identity: Optional[IdentityProvider] = None):
        self.db = db
        self.identity = identity or JWTIdentityProvider()

    async def resolve(self, token: Optional[str]) -> Principal:
        """Resolve a token to a principal or raise UnauthenticatedError."""
        if not token:
            raise UnauthenticatedError()

        subject = await self.identity.current_subject(token)
        if subject is None:
            raise UnauthenticatedError()

        # Service principals act for the platform and carry no profile
        if subject.is_service:
            return Principal(id=subject.id, role=Role.UNKNOWN, is_service=True)

        try:
            result = await self.db.execute(select(Profile.role).where(Profile.id == subject.id))
            row = result.first()
        except SQLAlchemyError as e:
            logger.error(
                f"Profile lookup failed: {e}",
                extra={"event": "evaluation_fault", "principal_id": subject.id},
            )
            raise EvaluationFault("Profile store unavailable")

        if row is None:
            logger.info("No profile for authenticated subject", extra={"principal_id": subject.id})
            raise UnauthenticatedError()

        role = Role.normalize(row.role)
        if role == Role.UNKNOWN:
            logger.warning(
                "Profile role not recognized",
                extra={"principal_id": subject.id, "raw_role": row.role},
            )
        return Principal(id=subject.id, role=role)

    async def resolve_optional(self, token: Optional[str]) -> Optional[Principal]:
        """Resolve a token, returning None instead of raising when unauthenticated."""
        try:
            return await self.resolve(token)
        except UnauthenticatedError:
            return None
