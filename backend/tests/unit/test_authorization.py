"""
Unit tests for ownership and team-role checks.
"""

import uuid
from types import SimpleNamespace

import pytest

import app.models  # noqa: F401
from app.core.errors import AuthorizationError
from app.models.team import Team, TeamMember
from app.services.authorization import (
    can_mutate,
    can_read,
    ensure_can_mutate,
    ensure_can_read,
    ensure_team_manager,
    ensure_team_member,
    ensure_team_owner,
    member_role,
)


def _user(team_id=None):
    return SimpleNamespace(id=uuid.uuid4(), team_id=team_id)


@pytest.fixture
def team():
    """A team with an owner, an admin and a member."""
    owner, admin, member = _user(), _user(), _user()
    team = Team(id=uuid.uuid4(), name="Crew", owner_id=owner.id)
    team.members = [
        TeamMember(user_id=owner.id, role="owner", position=0),
        TeamMember(user_id=admin.id, role="admin", position=1),
        TeamMember(user_id=member.id, role="member", position=2),
    ]
    for user in (owner, admin, member):
        user.team_id = team.id
    return SimpleNamespace(team=team, owner=owner, admin=admin, member=member)


class TestResourceAccess:

    def test_owner_reads_and_mutates(self):
        owner = _user()
        resource = SimpleNamespace(user_id=owner.id, team_id=None)

        assert can_read(owner, resource)
        assert can_mutate(owner, resource)

    def test_teammate_reads_only(self):
        team_id = uuid.uuid4()
        owner, teammate = _user(team_id), _user(team_id)
        resource = SimpleNamespace(user_id=owner.id, team_id=team_id)

        assert can_read(teammate, resource)
        assert not can_mutate(teammate, resource)

    def test_unshared_resource_hidden_from_teammate(self):
        team_id = uuid.uuid4()
        owner, teammate = _user(team_id), _user(team_id)
        resource = SimpleNamespace(user_id=owner.id, team_id=None)

        assert not can_read(teammate, resource)

    def test_teamless_users_never_match_on_team(self):
        owner, stranger = _user(), _user()
        resource = SimpleNamespace(user_id=owner.id, team_id=None)

        assert not can_read(stranger, resource)

    def test_ensure_messages_name_the_resource(self):
        resource = SimpleNamespace(user_id=uuid.uuid4(), team_id=None)

        with pytest.raises(AuthorizationError, match="access this document"):
            ensure_can_read(_user(), resource, "document")
        with pytest.raises(AuthorizationError, match="modify this model"):
            ensure_can_mutate(_user(), resource, "model")


class TestTeamRoles:

    def test_member_roles(self, team):
        assert member_role(team.team, team.owner.id) == "owner"
        assert member_role(team.team, team.admin.id) == "admin"
        assert member_role(team.team, team.member.id) == "member"
        assert member_role(team.team, uuid.uuid4()) is None

    def test_membership_required(self, team):
        ensure_team_member(team.team, team.member)

        with pytest.raises(AuthorizationError):
            ensure_team_member(team.team, _user())

    def test_owner_and_admin_manage(self, team):
        ensure_team_manager(team.team, team.owner)
        ensure_team_manager(team.team, team.admin)

        with pytest.raises(AuthorizationError):
            ensure_team_manager(team.team, team.member)

    def test_only_owner_owns(self, team):
        ensure_team_owner(team.team, team.owner)

        with pytest.raises(AuthorizationError, match="Only the team owner can delete the team"):
            ensure_team_owner(team.team, team.admin, "delete the team")
