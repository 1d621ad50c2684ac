"""
Ownership and team-role checks shared by every resource.

Callers look the resource up first (404) and only then authorize (403).
"""
from typing import Optional, Protocol
import uuid

from app.core.errors import AuthorizationError
from app.models.team import Team
from app.models.user import User

MANAGER_ROLES = ("owner", "admin")


class OwnedResource(Protocol):
    user_id: uuid.UUID
    team_id: Optional[uuid.UUID]


def can_mutate(user: User, resource: OwnedResource) -> bool:
    """Only the owner may change or delete a resource."""
    return resource.user_id == user.id


def can_read(user: User, resource: OwnedResource) -> bool:
    """The owner, or anyone on the team the resource is shared with."""
    if resource.user_id == user.id:
        return True
    return resource.team_id is not None and resource.team_id == user.team_id


def ensure_can_mutate(user: User, resource: OwnedResource, noun: str = "resource") -> None:
    if not can_mutate(user, resource):
        raise AuthorizationError(f"Not authorized to modify this {noun}")


def ensure_can_read(user: User, resource: OwnedResource, noun: str = "resource") -> None:
    if not can_read(user, resource):
        raise AuthorizationError(f"Not authorized to access this {noun}")


def member_role(team: Team, user_id: uuid.UUID) -> Optional[str]:
    """Role of ``user_id`` in the team, or None for non-members."""
    membership = team.membership(user_id)
    return membership.role if membership else None


def ensure_team_member(team: Team, user: User) -> None:
    if member_role(team, user.id) is None:
        raise AuthorizationError("Not authorized to access this team")


def ensure_team_manager(team: Team, user: User) -> None:
    """Owner or admin: may add and remove members."""
    if member_role(team, user.id) not in MANAGER_ROLES:
        raise AuthorizationError("Not authorized to manage team members")


def ensure_team_owner(team: Team, user: User, action: str = "perform this action") -> None:
    """Only the owner may rename or delete the team or change roles."""
    if team.owner_id != user.id:
        raise AuthorizationError(f"Only the team owner can {action}")
