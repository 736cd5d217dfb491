"""Role classifier: pure predicates over a resolved principal's role."""

from typing import TYPE_CHECKING

from cardshow_authz.models.profile import Role

if TYPE_CHECKING:
    from .base_policy import Principal


def is_admin(principal: "Principal") -> bool:
    return principal.role == Role.ADMIN


def is_service(principal: "Principal") -> bool:
    return principal.is_service


def has_admin_override(principal: "Principal") -> bool:
    """Admins and the service principal bypass every entity policy."""
    return is_admin(principal) or is_service(principal)


def is_organizer(principal: "Principal") -> bool:
    return principal.role == Role.SHOW_ORGANIZER


def is_mvp_dealer(principal: "Principal") -> bool:
    return principal.role == Role.MVP_DEALER


def is_dealer(principal: "Principal") -> bool:
    return principal.role == Role.DEALER


def is_any_dealer(principal: "Principal") -> bool:
    return principal.role in (Role.DEALER, Role.MVP_DEALER)


def has_known_role(principal: "Principal") -> bool:
    return principal.role != Role.UNKNOWN
