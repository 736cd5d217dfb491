"""Pydantic schemas for request/response models."""

from .common import *
from .decision import *

__all__ = [
    # Common
    "BaseResponse",
    "HealthResponse",
    "EntityResponse",
    "EntityListResponse",
    # Decisions
    "AuthorizeRequest",
    "AuthorizeResponse",
    "PrincipalResponse",
]
