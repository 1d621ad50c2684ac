"""
Team API

Business accounts create teams; owners and admins manage membership; only
the owner renames, deletes or changes roles.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from app.db.session import get_db
from app.api.deps import get_current_active_user
from app.models.user import User
from app.schemas.common import ApiResponse, ListResponse
from app.schemas.team import MemberAdd, MemberRoleUpdate, TeamCreate, TeamResponse, TeamUpdate
from app.services.team_service import TeamService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


def _out(team) -> TeamResponse:
    return TeamResponse.model_validate(team)


@router.post("", response_model=ApiResponse[TeamResponse], status_code=status.HTTP_201_CREATED)
async def create_team(
    data: TeamCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    team = await TeamService(db).create_team(current_user, data)
    return ApiResponse(data=_out(team))


@router.get("", response_model=ListResponse[TeamResponse])
async def list_teams(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Teams the caller belongs to."""
    teams = await TeamService(db).list_for_user(current_user)
    return ListResponse.of([_out(t) for t in teams])


@router.get("/{team_id}", response_model=ApiResponse[TeamResponse])
async def get_team(
    team_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    team = await TeamService(db).get_for_member(team_id, current_user)
    return ApiResponse(data=_out(team))


@router.put("/{team_id}", response_model=ApiResponse[TeamResponse])
async def update_team(
    team_id: uuid.UUID,
    data: TeamUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    team = await TeamService(db).update_team(team_id, current_user, data)
    return ApiResponse(data=_out(team))


@router.delete("/{team_id}", response_model=ApiResponse[dict])
async def delete_team(
    team_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    await TeamService(db).delete_team(team_id, current_user)
    return ApiResponse(data={})


@router.post("/{team_id}/members", response_model=ApiResponse[TeamResponse])
async def add_member(
    team_id: uuid.UUID,
    data: MemberAdd,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    team = await TeamService(db).add_member(team_id, current_user, data.email, data.role)
    return ApiResponse(data=_out(team))


@router.delete("/{team_id}/members/{user_id}", response_model=ApiResponse[TeamResponse])
async def remove_member(
    team_id: uuid.UUID,
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    team = await TeamService(db).remove_member(team_id, current_user, user_id)
    return ApiResponse(data=_out(team))


@router.put("/{team_id}/members/{user_id}", response_model=ApiResponse[TeamResponse])
async def update_member_role(
    team_id: uuid.UUID,
    user_id: uuid.UUID,
    data: MemberRoleUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    team = await TeamService(db).update_member_role(team_id, current_user, user_id, data.role)
    return ApiResponse(data=_out(team))
