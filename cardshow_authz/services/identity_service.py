"""Identity collaborator: session credential to subject.

Token issuance belongs to the external identity provider; this side only
verifies tokens it is handed.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from cardshow_authz.config.settings import settings
from cardshow_authz.utils.exceptions import InvalidTokenError as CustomInvalidTokenError
from cardshow_authz.utils.exceptions import TokenExpiredError


@dataclass(frozen=True)
class Subject:
    """Authenticated subject as reported by the identity provider."""

    id: str
    is_service: bool = False


@runtime_checkable
class IdentityProvider(Protocol):
    async def current_subject(self, token: str) -> Optional[Subject]: ...


class JWTIdentityProvider:
    """Verify bearer tokens signed by the identity provider."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
        service_role: Optional[str] = None,
    ):
        self.secret = secret or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.audience = audience if audience is not None else settings.JWT_AUDIENCE
        self.service_role = service_role or settings.SERVICE_ROLE_CLAIM

    def decode(self, token: str) -> dict:
        """Decode and verify a token."""
        options = {"require": ["sub", "exp"], "verify_aud": bool(self.audience)}
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience or None,
                options=options,
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except InvalidTokenError:
            raise CustomInvalidTokenError()

    async def current_subject(self, token: str) -> Optional[Subject]:
        payload = self.decode(token)
        subject_id = payload.get("sub")
        if not subject_id:
            return None
        return Subject(id=str(subject_id), is_service=payload.get("role") == self.service_role)
