"""Relationship resolver tests."""

import pytest

from cardshow_authz.constants.entities import EntityType
from cardshow_authz.models import PlannedAttendance, Show, new_id
from cardshow_authz.policies.relationships import RelationshipResolver
from cardshow_authz.testing.harness import CountingPortRegistry
from cardshow_authz.utils.exceptions import NonRecursionViolation

pytestmark = pytest.mark.asyncio


def resolver(ports, world, label, protecting=EntityType.WANT_LIST):
    return RelationshipResolver(ports.excluding(protecting), world.principal(label))


class TestOrganizesShow:
    async def test_matches_organizer_id(self, ports, world):
        assert await resolver(ports, world, "organizer").organizes_show(world.show.id)
        assert not await resolver(ports, world, "other_organizer").organizes_show(world.show.id)
        assert await resolver(ports, world, "other_organizer").organizes_show(world.row("other_show").id)

    async def test_missing_show(self, ports, world):
        relations = resolver(ports, world, "organizer")
        assert not await relations.organizes_show("missing")
        assert not await relations.organizes_show(None)

    async def test_every_show_and_principal(self, ports, world, db_session):
        """organizes_show holds exactly when the show's organizer_id is the principal."""
        shows = await ports.port(EntityType.SHOW).list()
        for label in world.users:
            relations = resolver(ports, world, label)
            for show in shows:
                assert await relations.organizes_show(show.id) == (show.organizer_id == world.users[label])


class TestParticipatesInShowSafe:
    async def test_paths(self, ports, world):
        show_id = world.show.id
        protecting = EntityType.SHOW_PARTICIPATION

        # organizer, dealers list, planned attendance
        assert await resolver(ports, world, "organizer", protecting).participates_in_show_safe(show_id)
        assert await resolver(ports, world, "dealer", protecting).participates_in_show_safe(show_id)
        assert await resolver(ports, world, "attendee", protecting).participates_in_show_safe(show_id)

        # a confirmed participation row alone does not count
        assert not await resolver(ports, world, "mvp_dealer", protecting).participates_in_show_safe(show_id)
        assert not await resolver(ports, world, "outsider", protecting).participates_in_show_safe(show_id)

    async def test_never_queries_show_participation(self, db_session, world):
        ports = CountingPortRegistry.for_session(db_session)
        relations = RelationshipResolver(
            ports.excluding(EntityType.SHOW_PARTICIPATION), world.principal("mvp_dealer")
        )

        await relations.participates_in_show_safe(world.show.id)
        await relations.participates_in_show(world.show.id)

        assert ports.calls[EntityType.SHOW_PARTICIPATION] == 0
        assert ports.calls[EntityType.SHOW] == 1

    async def test_dealers_as_comma_separated_text(self, db_session, ports, world):
        show = Show(
            id=new_id(),
            organizer_id=world.users["other_organizer"],
            title="Legacy Show",
            dealers=f"{world.users['outsider']}, someone-else",
        )
        db_session.add(show)
        await db_session.flush()

        relations = resolver(ports, world, "outsider", EntityType.SHOW_PARTICIPATION)
        assert await relations.participates_in_show_safe(show.id)


class TestParticipatesInShow:
    async def test_includes_active_participation(self, ports, world):
        assert await resolver(ports, world, "mvp_dealer").participates_in_show(world.show.id)

    async def test_cancelled_participation_does_not_count(self, ports, world):
        other_show = world.row("other_show").id
        assert not await resolver(ports, world, "outsider").participates_in_show(other_show)

    async def test_skips_protected_source(self, db_session, world):
        ports = CountingPortRegistry.for_session(db_session)
        relations = RelationshipResolver(
            ports.excluding(EntityType.PLANNED_ATTENDANCE), world.principal("attendee")
        )

        # Attendance is the attendee's only link and cannot be used here
        assert not await relations.participates_in_show(world.show.id)
        assert ports.calls[EntityType.PLANNED_ATTENDANCE] == 0

    async def test_has_show_participation_unavailable_when_protected(self, ports, world):
        relations = resolver(ports, world, "mvp_dealer", EntityType.SHOW_PARTICIPATION)
        with pytest.raises(NonRecursionViolation):
            await relations.has_show_participation(world.show.id)


class TestOtherRelationships:
    async def test_conversation_participant(self, ports, world):
        conversation_id = world.row("conversation").id
        assert await resolver(ports, world, "attendee").is_conversation_participant(conversation_id)
        assert not await resolver(ports, world, "organizer").is_conversation_participant(conversation_id)

    async def test_shares_conversation_uses_probe(self, db_session, world):
        ports = CountingPortRegistry.for_session(db_session)
        principal = world.principal("dealer")
        relations = RelationshipResolver(
            ports.excluding(EntityType.CONVERSATION_PARTICIPANT),
            principal,
            membership=ports.self_membership(principal.id),
        )

        assert await relations.shares_conversation(world.row("conversation").id)
        assert ports.calls[EntityType.CONVERSATION_PARTICIPANT] == 1

    async def test_shares_conversation_without_probe_is_refused(self, ports, world):
        relations = resolver(ports, world, "dealer", EntityType.CONVERSATION_PARTICIPANT)
        with pytest.raises(NonRecursionViolation):
            await relations.shares_conversation(world.row("conversation").id)

    async def test_want_list_relationships(self, ports, world):
        want_list = world.row("want_list")
        relations = resolver(ports, world, "attendee", EntityType.SHARED_WANT_LIST)

        assert await relations.owns_want_list(want_list.id)
        assert not await resolver(ports, world, "dealer", EntityType.SHARED_WANT_LIST).owns_want_list(want_list.id)

        relations = resolver(ports, world, "organizer")
        assert await relations.shares_want_list_with_show(want_list.id, world.show.id)
        assert not await relations.shares_want_list_with_show(world.row("private_want_list").id, world.show.id)
        assert await relations.shared_show_ids(want_list.id) == [world.show.id]
        assert await relations.shared_show_ids(world.row("private_want_list").id) == []

    async def test_organizes_series(self, ports, world):
        series_id = world.row("series").id
        assert await resolver(ports, world, "organizer").organizes_series(series_id)
        assert not await resolver(ports, world, "other_organizer").organizes_series(series_id)

    async def test_show_row_is_read_once_per_evaluation(self, db_session, world):
        ports = CountingPortRegistry.for_session(db_session)
        relations = RelationshipResolver(ports.excluding(EntityType.FAVORITE), world.principal("dealer"))

        await relations.organizes_show(world.show.id)
        await relations.listed_as_dealer(world.show.id)
        await relations.participates_in_show(world.show.id)

        assert ports.calls[EntityType.SHOW] == 1


class TestFailClosed:
    async def test_unreachable_store_is_false_and_recorded(self, ports_with_failure, world):
        ports = ports_with_failure(EntityType.PLANNED_ATTENDANCE)
        relations = RelationshipResolver(
            ports.excluding(EntityType.SHOW_PARTICIPATION), world.principal("attendee")
        )

        assert not await relations.participates_in_show_safe(world.show.id)
        assert relations.degraded
        assert relations.faults[0].error_code == "EVALUATION_FAULT"
        assert relations.faults[0].details["relation"] == "planned_attendance.exists"
        assert relations.faults[0].details["protected_entity"] == "show_participation"

    async def test_failed_show_read_is_not_cached(self, ports_with_failure, world):
        ports = ports_with_failure(EntityType.SHOW)
        relations = RelationshipResolver(ports.excluding(EntityType.FAVORITE), world.principal("organizer"))

        assert not await relations.organizes_show(world.show.id)
        assert not await relations.organizes_show(world.show.id)
        assert len(relations.faults) == 2

    async def test_other_lookups_still_succeed(self, ports_with_failure, world, db_session):
        db_session.add(PlannedAttendance(id=new_id(), show_id=world.show.id, user_id=world.users["outsider"]))
        await db_session.flush()

        ports = ports_with_failure(EntityType.SHOW_PARTICIPATION)
        relations = RelationshipResolver(ports.excluding(EntityType.FAVORITE), world.principal("outsider"))

        assert await relations.participates_in_show(world.show.id)
        assert not relations.degraded
