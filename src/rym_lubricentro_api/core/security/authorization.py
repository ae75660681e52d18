"""Endpoint authorization metadata.

``@authorize`` marks an endpoint as requiring an authenticated caller and,
optionally, one of a set of roles. ``@allow_anonymous`` lifts the requirement.
The authorization stage of the pipeline reads this metadata from the endpoint
resolved by the routing stage.
"""

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

AUTHORIZATION_ATTR = "__authorization__"


@dataclass(frozen=True)
class AuthorizationRequirement:
    roles: tuple[str, ...] = ()
    allow_anonymous: bool = False

    def is_satisfied_by_roles(self, roles) -> bool:
        if not self.roles:
            return True
        return any(role in self.roles for role in roles)


ANONYMOUS = AuthorizationRequirement(allow_anonymous=True)


def authorize(*roles: str) -> Callable[[F], F]:
    """Require an authenticated caller (in any of ``roles`` when given)."""

    def decorator(endpoint: F) -> F:
        setattr(endpoint, AUTHORIZATION_ATTR, AuthorizationRequirement(roles=tuple(roles)))
        return endpoint

    return decorator


def allow_anonymous(endpoint: F) -> F:
    setattr(endpoint, AUTHORIZATION_ATTR, ANONYMOUS)
    return endpoint


def get_authorization_requirement(endpoint: Any) -> AuthorizationRequirement | None:
    """Return the endpoint's requirement, or None when it is not protected."""
    if endpoint is None:
        return None
    requirement = getattr(endpoint, AUTHORIZATION_ATTR, None)
    if requirement is None or requirement.allow_anonymous:
        return None
    return requirement
