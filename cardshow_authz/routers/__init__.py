"""API routers."""

from . import decisions, entities, principal

__all__ = ["decisions", "entities", "principal"]
