"""Decision API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from cardshow_authz.constants.entities import EntityType, Operation
from cardshow_authz.models.profile import Role
from cardshow_authz.policies.base_policy import DecisionOutcome

from .common import BaseResponse


class AuthorizeRequest(BaseModel):
    """Ask whether the current principal may perform an operation."""

    entity_type: EntityType
    operation: Operation
    entity_id: str | None = Field(None, max_length=36)
    resource: dict[str, Any] | None = Field(
        None, description="Proposed row values for insert, or the row when already loaded"
    )


class AuthorizeResponse(BaseResponse):
    """Decision for the request. Never names the predicate that failed."""

    decision: DecisionOutcome
    allowed: bool
    degraded: bool = False


class PrincipalResponse(BaseResponse):
    id: str
    role: Role
    is_service: bool = False
