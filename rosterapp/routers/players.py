from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.database import get_db
from rosterapp.dependencies import get_current_admin
from rosterapp.models.user import User
from rosterapp.schemas.auth import PlayerResponse, UserResponse
from rosterapp.services.auth_service import list_users

router = APIRouter(tags=["players"])


@router.get("/players", response_model=list[PlayerResponse])
async def get_players(db: AsyncSession = Depends(get_db)):
    """Public id/name list used to label roster slots."""
    return await list_users(db)


@router.get("/users", response_model=list[UserResponse])
async def get_users(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return await list_users(db)
