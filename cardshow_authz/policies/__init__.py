"""Authorization policies system."""

from .base_policy import (
    BasePolicy,
    Decision,
    DecisionOutcome,
    PolicyContext,
    PolicyResult,
    Principal,
)
from .engagement_policy import FavoritePolicy, ReviewPolicy
from .evaluator import PolicyEvaluator
from .guards import POLICY_REGISTRY, can, register_policy, require
from .messaging_policy import ConversationParticipantPolicy, ConversationPolicy, MessagePolicy
from .participation_policy import PlannedAttendancePolicy, ShowParticipationPolicy
from .relationships import RelationshipResolver
from .show_policy import ShowPolicy, ShowSeriesPolicy
from .want_list_policy import SharedWantListPolicy, WantListPolicy

__all__ = [
    "BasePolicy",
    "Decision",
    "DecisionOutcome",
    "PolicyContext",
    "PolicyResult",
    "Principal",
    "PolicyEvaluator",
    "RelationshipResolver",
    "POLICY_REGISTRY",
    "can",
    "require",
    "register_policy",
    "ShowPolicy",
    "ShowSeriesPolicy",
    "ShowParticipationPolicy",
    "PlannedAttendancePolicy",
    "WantListPolicy",
    "SharedWantListPolicy",
    "ConversationPolicy",
    "ConversationParticipantPolicy",
    "MessagePolicy",
    "FavoritePolicy",
    "ReviewPolicy",
]
