"""Favorite show and review policies."""

from cardshow_authz.constants.entities import EntityType

from . import roles
from .base_policy import BasePolicy, PolicyContext, PolicyResult


class FavoritePolicy(BasePolicy):
    entity_type = EntityType.FAVORITE

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        if context.is_self():
            return PolicyResult.allow("Self access")
        if await self._organizes_with_role(context, context.field("show_id")):
            return PolicyResult.allow("Organizer of the show")
        return PolicyResult.deny("Not the organizer of the show")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)


class ReviewPolicy(BasePolicy):
    """Reviews are readable by any signed-in user; only attendees may write one."""

    entity_type = EntityType.REVIEW

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        if roles.has_known_role(context.principal):
            return PolicyResult.allow("Signed-in user")
        return PolicyResult.deny("Unknown role")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        if not context.is_self():
            return PolicyResult.deny("Review must be written by the requester")
        if await context.relations.participates_in_show(context.field("show_id")):
            return PolicyResult.allow("Show participant")
        return PolicyResult.deny("Did not take part in show")

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)
