import logging
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from rosterapp.config import settings
from rosterapp.models import Base  # noqa: F401 - registers every table on Base.metadata

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> AsyncEngine:
    """Async engine for Postgres in production or SQLite for local runs."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return create_async_engine(
            database_url,
            echo=settings.database_echo,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=settings.database_echo, pool_pre_ping=True)


engine = build_engine(settings.database_url)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)
logger.debug("Database engine ready for %s", engine.url.render_as_string(hide_password=True))


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
