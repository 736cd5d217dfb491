"""FastAPI dependencies."""

from .auth import *
from .database import *
from .services import *

__all__ = [
    "get_current_principal",
    "get_optional_principal",
    "get_identity_provider",
    "get_db",
    "get_audit_emitter",
    "get_policy_evaluator",
    "get_access_service",
]
