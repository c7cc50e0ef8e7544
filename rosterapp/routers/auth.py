import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.database import get_db
from rosterapp.dependencies import get_bearer_token, get_current_user
from rosterapp.models.user import User
from rosterapp.schemas.auth import ChangePassword, TokenResponse, UserLogin, UserRegister, UserResponse
from rosterapp.services.auth_service import (
    authenticate_user,
    change_password,
    create_access_token,
    create_session,
    create_user,
    delete_session,
    get_user_by_email,
    get_user_by_name,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister, db: AsyncSession = Depends(get_db)):
    if await get_user_by_email(db, body.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if await get_user_by_name(db, body.name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Name already taken")
    user = await create_user(db, email=body.email, name=body.name, password=body.password)
    return user


@router.post("/login", response_model=TokenResponse)
async def login(body: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await authenticate_user(db, email=body.email, password=body.password)
    if user is None:
        logger.info("Login failed for %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token(user)
    await create_session(db, user, token)
    logger.info("Login success for user %s", user.id)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: str = Depends(get_bearer_token),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    count = await delete_session(db, token)
    logger.info("Logout for user %s: deleted %d session(s)", current_user.id, count)
    return None


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_user_password(
    body: ChangePassword,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        await change_password(db, current_user, body.current_password, body.new_password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return None
