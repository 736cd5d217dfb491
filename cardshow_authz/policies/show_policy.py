"""Show and show series policies."""

from cardshow_authz.constants.entities import EntityType

from . import roles
from .base_policy import BasePolicy, PolicyContext, PolicyResult


class ShowPolicy(BasePolicy):
    """Shows are public to read; organizers manage their own."""

    entity_type = EntityType.SHOW

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        return PolicyResult.allow("Public show")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        # Organizers can list shows
        if roles.is_organizer(context.principal):
            return PolicyResult.allow("Organizer role")

        # Anyone creating a show they will organize
        if context.is_self("organizer_id"):
            return PolicyResult.allow("Self-organized show")

        return PolicyResult.deny("Not an organizer")

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return self._organizer_of_row(context)

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._organizer_of_row(context)

    def _organizer_of_row(self, context: PolicyContext) -> PolicyResult:
        if context.is_self("organizer_id"):
            return PolicyResult.allow("Show organizer")
        return PolicyResult.deny("Not the show organizer")


class ShowSeriesPolicy(ShowPolicy):
    """Series follow shows, but creating one needs the organizer role."""

    entity_type = EntityType.SHOW_SERIES

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        if not roles.is_organizer(context.principal):
            return PolicyResult.deny("Not an organizer")
        if not context.is_self("organizer_id"):
            return PolicyResult.deny("Series must be organized by the requester")
        return PolicyResult.allow("Organizer creating own series")
