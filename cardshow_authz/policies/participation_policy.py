"""Show participation and planned attendance policies.

ShowParticipation is the table whose read policy used to re-enter itself.
Its checks only use ``participates_in_show_safe``, and the resolver it is
given cannot reach the ShowParticipation port at all.
"""

from cardshow_authz.constants.entities import EntityType

from . import roles
from .base_policy import BasePolicy, PolicyContext, PolicyResult


class ShowParticipationPolicy(BasePolicy):
    """Who can see and manage a dealer/attendee registration for a show."""

    entity_type = EntityType.SHOW_PARTICIPATION

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        # Own registration
        if context.is_self():
            return PolicyResult.allow("Self access")

        show_id = context.field("show_id")

        # Organizer of the show sees every registration
        if await context.relations.organizes_show(show_id):
            return PolicyResult.allow("Show organizer")

        # MVP dealers see registrations for shows they are part of
        if roles.is_mvp_dealer(context.principal):
            if await context.relations.participates_in_show_safe(show_id):
                return PolicyResult.allow("MVP dealer at show")

        return PolicyResult.deny("No relationship to show")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        if context.is_self():
            return PolicyResult.allow("Self access")
        if await context.relations.organizes_show(context.field("show_id")):
            return PolicyResult.allow("Show organizer")
        return PolicyResult.deny("Not the participant or organizer")

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)


class PlannedAttendancePolicy(BasePolicy):
    """An attendee's plan to visit a show."""

    entity_type = EntityType.PLANNED_ATTENDANCE

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        if context.is_self():
            return PolicyResult.allow("Self access")
        if await self._organizes_with_role(context, context.field("show_id")):
            return PolicyResult.allow("Organizer of the show")
        return PolicyResult.deny("Not the organizer of the show")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        # Plans are replaced by delete and insert
        return PolicyResult.deny("Planned attendance is not updatable")

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)
