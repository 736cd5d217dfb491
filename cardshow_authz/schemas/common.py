"""Common Pydantic schemas."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class BaseResponse(BaseModel):
    """Base response model."""

    model_config = {"extra": "allow"}

    success: bool = True
    message: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str


class EntityResponse(BaseResponse):
    """One entity row."""

    data: dict[str, Any]


class EntityListResponse(BaseResponse):
    """Entity rows visible to the principal."""

    data: list[dict[str, Any]]
    count: int = Field(ge=0)
