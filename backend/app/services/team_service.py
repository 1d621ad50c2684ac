"""
Team management: creation, membership and roles.
"""
import logging
from typing import List, Optional
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import AuthorizationError, NotFoundError, PlanLimitError, ValidationError
from app.models.team import Team, TeamMember, ASSIGNABLE_ROLES
from app.models.user import User
from app.schemas.team import TeamCreate, TeamUpdate
from app.services import authorization
from app.services.plans import within_limit
from app.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)


def _validate_role(role: Optional[str]) -> str:
    if role not in ASSIGNABLE_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ASSIGNABLE_ROLES)}")
    return role


class TeamService:
    """Service for team operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_team(self, team_id: uuid.UUID) -> Team:
        result = await self.db.execute(select(Team).where(Team.id == team_id))
        team = result.scalar_one_or_none()
        if not team:
            raise NotFoundError("Team not found")
        return team

    async def _reload(self, team_id: uuid.UUID) -> Team:
        """Fresh copy of the team with members and their users loaded."""
        result = await self.db.execute(
            select(Team)
            .where(Team.id == team_id)
            .options(selectinload(Team.members).selectinload(TeamMember.user))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def list_for_user(self, user: User) -> List[Team]:
        result = await self.db.execute(
            select(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .where(TeamMember.user_id == user.id)
            .order_by(Team.created_at.desc())
        )
        return list(result.scalars().unique().all())

    async def get_for_member(self, team_id: uuid.UUID, user: User) -> Team:
        team = await self.get_team(team_id)
        authorization.ensure_team_member(team, user)
        return team

    async def create_team(self, owner: User, data: TeamCreate) -> Team:
        """
        Create a team with the caller as owner and first member.

        Raises:
            AuthorizationError: For individual accounts
        """
        if not owner.is_business:
            raise AuthorizationError("Only business accounts can create teams")

        name = data.name.strip()
        if not name:
            raise ValidationError("Please add a team name")

        team = Team(name=name, description=data.description, owner_id=owner.id)
        team.members.append(TeamMember(user_id=owner.id, user=owner, role="owner", position=0))
        self.db.add(team)
        await self.db.flush()

        owner.team_id = team.id
        owner.is_team_member = True
        await self.db.commit()
        team = await self._reload(team.id)

        logger.info(f"Team {team.id} created by {owner.id}")
        return team

    async def update_team(self, team_id: uuid.UUID, user: User, data: TeamUpdate) -> Team:
        team = await self.get_team(team_id)
        authorization.ensure_team_owner(team, user, "update the team")

        updates = data.model_dump(exclude_unset=True)
        if updates.get("name"):
            team.name = updates["name"].strip()
        if "description" in updates:
            team.description = updates["description"]

        await self.db.commit()
        return await self._reload(team.id)

    async def delete_team(self, team_id: uuid.UUID, user: User) -> None:
        team = await self.get_team(team_id)
        authorization.ensure_team_owner(team, user, "delete the team")

        await self.db.execute(
            update(User)
            .where(User.team_id == team.id)
            .values(team_id=None, is_team_member=False)
        )
        await self.db.delete(team)
        await self.db.commit()
        logger.info(f"Team {team_id} deleted by {user.id}")

    # ==================== Membership ====================

    async def add_member(self, team_id: uuid.UUID, user: User, email: str, role: Optional[str]) -> Team:
        role = _validate_role(role or "member")
        team = await self.get_team(team_id)
        authorization.ensure_team_manager(team, user)

        result = await self.db.execute(select(User).where(User.email == email.lower()))
        new_member = result.scalar_one_or_none()
        if not new_member:
            raise NotFoundError("User not found")

        if team.membership(new_member.id):
            raise ValidationError("User is already a member of this team")

        owner = await self.db.get(User, team.owner_id)
        limits = await SubscriptionService(self.db).resolve_limits(owner)
        if not within_limit(limits.max_team_members, len(team.members)):
            raise PlanLimitError("Team member limit reached for your plan. Please upgrade.")

        position = max((m.position for m in team.members), default=-1) + 1
        team.members.append(TeamMember(user_id=new_member.id, user=new_member, role=role, position=position))
        new_member.team_id = team.id
        new_member.is_team_member = True

        await self.db.commit()
        team = await self._reload(team.id)
        logger.info(f"User {new_member.id} added to team {team.id} as {role}")
        return team

    async def remove_member(self, team_id: uuid.UUID, user: User, member_id: uuid.UUID) -> Team:
        """
        Remove a member.

        The owner entry is rejected before the caller's own role is checked,
        so no caller can ever remove it.
        """
        team = await self.get_team(team_id)

        if member_id == team.owner_id:
            raise ValidationError("Cannot remove the team owner")

        authorization.ensure_team_manager(team, user)

        membership = team.membership(member_id)
        if not membership:
            raise NotFoundError("User is not a member of this team")

        team.members.remove(membership)
        await self.db.execute(
            update(User)
            .where(User.id == member_id, User.team_id == team.id)
            .values(team_id=None, is_team_member=False)
        )

        await self.db.commit()
        team = await self._reload(team.id)
        logger.info(f"User {member_id} removed from team {team.id}")
        return team

    async def update_member_role(
        self, team_id: uuid.UUID, user: User, member_id: uuid.UUID, role: Optional[str]
    ) -> Team:
        role = _validate_role(role)
        team = await self.get_team(team_id)
        authorization.ensure_team_owner(team, user, "change member roles")

        if member_id == team.owner_id:
            raise ValidationError("Cannot change the role of the team owner")

        membership = team.membership(member_id)
        if not membership:
            raise NotFoundError("User is not a member of this team")

        membership.role = role
        await self.db.commit()
        logger.info(f"User {member_id} is now {role} in team {team.id}")
        return await self._reload(team.id)
