"""Data-access ports consumed by the authorization layer."""

from .base import EntityPort
from .registry import MembershipProbe, PortRegistry, ScopedPorts
from .sqlalchemy_port import SQLAlchemyEntityPort

__all__ = [
    "EntityPort",
    "SQLAlchemyEntityPort",
    "PortRegistry",
    "ScopedPorts",
    "MembershipProbe",
]
