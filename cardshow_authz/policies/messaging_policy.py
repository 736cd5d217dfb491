"""Conversation, participant and message policies."""

from cardshow_authz.constants.entities import EntityType

from . import roles
from .base_policy import BasePolicy, PolicyContext, PolicyResult


class ConversationPolicy(BasePolicy):
    entity_type = EntityType.CONVERSATION

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        return await self._participant(context)

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        # Participants are added after the conversation row exists
        if roles.has_known_role(context.principal):
            return PolicyResult.allow("Signed-in user")
        return PolicyResult.deny("Unknown role")

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return await self._participant(context)

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return await self._participant(context)

    async def _participant(self, context: PolicyContext) -> PolicyResult:
        conversation_id = context.field("id", context.resource_id)
        if await context.relations.is_conversation_participant(conversation_id):
            return PolicyResult.allow("Conversation participant")
        return PolicyResult.deny("Not a participant")


class ConversationParticipantPolicy(BasePolicy):
    """Membership rows.

    Seeing another member's row requires the principal's own membership in
    the same conversation, checked with one point query for that own row.
    """

    entity_type = EntityType.CONVERSATION_PARTICIPANT

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        if context.is_self():
            return PolicyResult.allow("Self access")
        if await context.relations.shares_conversation(context.field("conversation_id")):
            return PolicyResult.allow("Fellow participant")
        return PolicyResult.deny("Not a participant")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return PolicyResult.deny("Membership rows are not updatable")

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context)


class MessagePolicy(BasePolicy):
    entity_type = EntityType.MESSAGE

    async def _check_select(self, context: PolicyContext) -> PolicyResult:
        if await context.relations.is_conversation_participant(context.field("conversation_id")):
            return PolicyResult.allow("Conversation participant")
        return PolicyResult.deny("Not a participant")

    async def _check_insert(self, context: PolicyContext) -> PolicyResult:
        if not context.is_self("sender_id"):
            return PolicyResult.deny("Sender must be the requester")
        return await self._check_select(context)

    async def _check_update(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context, "sender_id")

    async def _check_delete(self, context: PolicyContext) -> PolicyResult:
        return self._self_only(context, "sender_id")
