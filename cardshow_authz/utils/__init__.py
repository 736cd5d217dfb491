"""Utility functions and classes."""

from .exceptions import *
from .transaction_manager import *

__all__ = [
    # Exceptions
    "BaseAuthzException",
    "UnauthenticatedError",
    "TokenExpiredError",
    "InvalidTokenError",
    "UnauthorizedError",
    "EntityNotFoundError",
    "EvaluationFault",
    "PortUnavailableError",
    "NonRecursionViolation",
    # Transactions
    "transaction_scope",
]
