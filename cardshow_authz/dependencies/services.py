"""Service dependency injection."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.audit.emitter import AuditEmitter
from cardshow_authz.audit.emitter import get_audit_emitter as _get_audit_emitter
from cardshow_authz.policies.evaluator import PolicyEvaluator
from cardshow_authz.ports.registry import PortRegistry
from cardshow_authz.services.access_service import AccessService

from .database import get_db


def get_audit_emitter() -> AuditEmitter:
    """Get the process-wide audit emitter."""
    return _get_audit_emitter()


async def get_policy_evaluator(
    db: AsyncSession = Depends(get_db),
    audit: AuditEmitter = Depends(get_audit_emitter),
) -> AsyncGenerator[PolicyEvaluator, None]:
    """Get a PolicyEvaluator bound to the request session."""
    yield PolicyEvaluator(PortRegistry.for_session(db), audit=audit)


async def get_access_service(
    db: AsyncSession = Depends(get_db),
    audit: AuditEmitter = Depends(get_audit_emitter),
) -> AsyncGenerator[AccessService, None]:
    """Get AccessService instance."""
    yield AccessService(db, audit=audit)
