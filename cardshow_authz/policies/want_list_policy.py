"""Want list and shared want list policies."""

from cardshow_authz.constants.entities import EntityType

from . import roles
from .base_policy import BasePolicy, PolicyContext, PolicyResult


class WantListPolicy(BasePolicy):
    """A collector's want list, visible to dealers at shows it is shared with."""

    entity_type = EntityType.WANT_LIST

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        if context.is_self():
            return PolicyResult.allow("Self access")

        principal = context.principal
        if not (roles.is_mvp_dealer(principal) or roles.is_organizer(principal)):
            return PolicyResult.deny("Not the owner")

        for show_id in await context.relations.shared_show_ids(context.field("id", context.resource_id)):
            if await self._sees_shares_at_show(context, show_id):
                return PolicyResult.allow("Shared with a related show")

        return PolicyResult.deny("Not shared with a related show")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)


class SharedWantListPolicy(BasePolicy):
    """Join rows sharing a want list with a show."""

    entity_type = EntityType.SHARED_WANT_LIST

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        owner_check = await self._owner_of_want_list(context)
        if owner_check.allowed:
            return owner_check
        if await self._sees_shares_at_show(context, context.field("show_id")):
            return PolicyResult.allow("Shared with a related show")
        return PolicyResult.deny("No relationship to want list or show")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        return await self._owner_of_want_list(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        # Share rows are never edited in place
        return PolicyResult.deny("Shared want lists are immutable")

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return await self._owner_of_want_list(context)

    async def _owner_of_want_list(self, context: PolicyContext) -> PolicyResult:
        if await context.relations.owns_want_list(context.field("want_list_id")):
            return PolicyResult.allow("Want list owner")
        return PolicyResult.deny("Not the want list owner")
