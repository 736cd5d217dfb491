"""Conformance harness run against the seeded marketplace."""

import pytest

from cardshow_authz.constants.entities import EntityType, Operation
from cardshow_authz.policies.base_policy import DecisionOutcome
from cardshow_authz.testing.harness import MAX_LOOKUPS_PER_DECISION, CountingPortRegistry, run_conformance

pytestmark = pytest.mark.asyncio


async def test_conformance_passes(session_factory):
    report = await run_conformance(session_factory)

    assert report.ok, "\n".join(str(violation) for violation in report.violations)
    assert report.max_lookups <= MAX_LOOKUPS_PER_DECISION
    # 10 principals, 11 entity types, 4 operations, each decided twice
    assert report.decisions == 10 * 11 * 4 * 2


async def test_conformance_outcomes(session_factory):
    report = await run_conformance(session_factory)

    assert report.outcome("anonymous", EntityType.SHOW, Operation.SELECT) == DecisionOutcome.ALLOW
    assert report.outcome("anonymous", EntityType.REVIEW, Operation.SELECT) == DecisionOutcome.UNAUTHENTICATED
    assert report.outcome("unknown", EntityType.MESSAGE, Operation.SELECT) == DecisionOutcome.DENY
    assert report.outcome("service", EntityType.MESSAGE, Operation.DELETE) == DecisionOutcome.ALLOW


async def test_counting_registry_counts_by_entity(db_session, world):
    ports = CountingPortRegistry.for_session(db_session)

    await ports.port(EntityType.SHOW).get(world.show.id)
    await ports.port(EntityType.SHOW_PARTICIPATION).exists(show_id=world.show.id)
    await ports.port(EntityType.SHOW_PARTICIPATION).list(show_id=world.show.id)

    assert ports.calls[EntityType.SHOW] == 1
    assert ports.calls[EntityType.SHOW_PARTICIPATION] == 2
    assert ports.total == 3
    ports.reset()
    assert ports.total == 0
