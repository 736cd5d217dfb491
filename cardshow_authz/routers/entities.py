"""Guarded entity routes.

Thin HTTP access to the guarded access service for callers outside this
process. Every route decides and reads or writes in one transaction.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from cardshow_authz.constants.entities import EntityType
from cardshow_authz.dependencies.auth import get_current_principal, get_optional_principal
from cardshow_authz.dependencies.services import get_access_service
from cardshow_authz.policies.base_policy import Principal
from cardshow_authz.schemas.common import EntityListResponse, EntityResponse
from cardshow_authz.services.access_service import AccessService

router = APIRouter()


@router.get("/{entity_type}", response_model=EntityListResponse)
async def list_entities(
    entity_type: EntityType,
    show_id: str | None = Query(None),
    user_id: str | None = Query(None),
    conversation_id: str | None = Query(None),
    want_list_id: str | None = Query(None),
    principal: Principal | None = Depends(get_optional_principal),
    access: AccessService = Depends(get_access_service),
):
    """List rows of an entity type that the principal may see."""

    filters = {
        "show_id": show_id,
        "user_id": user_id,
        "conversation_id": conversation_id,
        "want_list_id": want_list_id,
    }
    filters = {key: value for key, value in filters.items() if value is not None}

    try:
        rows = await access.list_visible(principal, entity_type, **filters)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return EntityListResponse(data=[row.as_dict() for row in rows], count=len(rows))


@router.get("/{entity_type}/{entity_id}", response_model=EntityResponse)
async def get_entity(
    entity_type: EntityType,
    entity_id: str,
    principal: Principal | None = Depends(get_optional_principal),
    access: AccessService = Depends(get_access_service),
):
    """Get one row."""
    row = await access.get(principal, entity_type, entity_id)
    return EntityResponse(data=row.as_dict())


@router.post("/{entity_type}", response_model=EntityResponse, status_code=status.HTTP_201_CREATED)
async def create_entity(
    entity_type: EntityType,
    values: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    access: AccessService = Depends(get_access_service),
):
    """Insert a row."""

    try:
        row = await access.insert(principal, entity_type, values)
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return EntityResponse(message=f"{entity_type.value} created", data=row.as_dict())


@router.patch("/{entity_type}/{entity_id}", response_model=EntityResponse)
async def update_entity(
    entity_type: EntityType,
    entity_id: str,
    values: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    access: AccessService = Depends(get_access_service),
):
    """Update a row."""

    try:
        row = await access.update(principal, entity_type, entity_id, values)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return EntityResponse(message=f"{entity_type.value} updated", data=row.as_dict())


@router.delete("/{entity_type}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entity(
    entity_type: EntityType,
    entity_id: str,
    principal: Principal = Depends(get_current_principal),
    access: AccessService = Depends(get_access_service),
):
    """Delete a row."""
    await access.delete(principal, entity_type, entity_id)
