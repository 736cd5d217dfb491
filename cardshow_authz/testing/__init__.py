"""Conformance harness and seeded test world."""

from .harness import (
    MAX_LOOKUPS_PER_DECISION,
    ConformanceReport,
    CountingPort,
    CountingPortRegistry,
    run_conformance,
)
from .world import STORED_ROLES, World, seed_world

__all__ = [
    "MAX_LOOKUPS_PER_DECISION",
    "ConformanceReport",
    "CountingPort",
    "CountingPortRegistry",
    "run_conformance",
    "STORED_ROLES",
    "World",
    "seed_world",
]
