import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.config import settings
from rosterapp.models.user import User, UserRole, UserSession
from rosterapp.services.roster import Player

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    # jti makes each token unique; user_sessions.token is a unique column
    payload = {"sub": str(user.id), "role": user.role.value, "exp": expire, "jti": secrets.token_urlsafe(8)}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> int | None:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return int(user_id)
    except (JWTError, ValueError):
        return None


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_name(db: AsyncSession, name: str) -> User | None:
    result = await db.execute(select(User).where(User.name == name))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.name))
    return list(result.scalars().all())


async def list_players(db: AsyncSession) -> list[Player]:
    """Every user as a roster Player, ordered by name."""
    return [Player(id=str(user.id), name=user.name) for user in await list_users(db)]


async def create_user(
    db: AsyncSession,
    email: str,
    name: str,
    password: str,
    role: UserRole = UserRole.player,
) -> User:
    user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if user is None:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def change_password(db: AsyncSession, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise ValueError("Current password is incorrect")
    user.hashed_password = hash_password(new_password)
    await db.commit()
    logger.info("Password changed for user %s", user.id)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


async def prune_expired_sessions(db: AsyncSession) -> int:
    """Delete every session past its expiry; the caller commits."""
    result = await db.execute(
        delete(UserSession).where(UserSession.expires_at <= datetime.now(timezone.utc))
    )
    if result.rowcount:
        logger.info("Pruned %d expired session(s)", result.rowcount)
    return result.rowcount


async def create_session(db: AsyncSession, user: User, token: str) -> UserSession:
    await prune_expired_sessions(db)
    session = UserSession(
        user_id=user.id,
        token=token,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes),
    )
    db.add(session)
    await db.commit()
    return session


async def get_session(db: AsyncSession, token: str) -> UserSession | None:
    """The live session for a token; expired rows count as missing."""
    result = await db.execute(
        select(UserSession).where(
            UserSession.token == token,
            UserSession.expires_at > datetime.now(timezone.utc),
        )
    )
    return result.scalar_one_or_none()


async def delete_session(db: AsyncSession, token: str) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.token == token))
    await db.commit()
    return result.rowcount
