import os
import tempfile

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rosterapp.database import build_engine, get_db
from rosterapp.main import app
from rosterapp.models.base import Base
from rosterapp.models.user import UserRole
from rosterapp.services.auth_service import create_user
from rosterapp.services.roster import Assignment, MapSnapshot, Player, PlayerAssignment, RectZone


@pytest.fixture
async def db_engine():
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)
    test_db_url = f"sqlite+aiosqlite:///{db_path}"
    engine = build_engine(test_db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
async def db_session(db_engine) -> AsyncSession:
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client() -> AsyncClient:
    """HTTP client that does NOT override the DB (for endpoints that don't need DB)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_client(db_session: AsyncSession) -> AsyncClient:
    """HTTP client with DB dependency overridden to use the test SQLite DB."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _login(client: AsyncClient, email: str, password: str) -> dict:
    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def admin_user(db_session: AsyncSession):
    return await create_user(
        db_session, email="admin@example.com", name="Sib", password="adminpass1", role=UserRole.admin
    )


@pytest.fixture
async def admin_headers(db_client: AsyncClient, admin_user) -> dict:
    return await _login(db_client, "admin@example.com", "adminpass1")


@pytest.fixture
async def player_user(db_session: AsyncSession):
    return await create_user(db_session, email="nyork@example.com", name="Nyork", password="playerpass1")


@pytest.fixture
async def player_headers(db_client: AsyncClient, player_user) -> dict:
    return await _login(db_client, "nyork@example.com", "playerpass1")


@pytest.fixture
async def team(db_session: AsyncSession, admin_user, player_user) -> list:
    """Sib, Nyork, Kazuya, Shadow, Phoenix in that order."""
    others = [
        await create_user(db_session, email=f"{name.lower()}@example.com", name=name, password="teampass1")
        for name in ("Kazuya", "Shadow", "Phoenix")
    ]
    return [admin_user, player_user, *others]


# ---------------------------------------------------------------------------
# Pure roster fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_players() -> list[Player]:
    return [
        Player(id="player-1", name="Sib"),
        Player(id="player-2", name="Nyork"),
        Player(id="player-3", name="Kazuya"),
        Player(id="player-4", name="Shadow"),
        Player(id="player-5", name="Phoenix"),
    ]


@pytest.fixture
def balanced_map() -> MapSnapshot:
    """4 posts, 5 players, every post covered twice or more, no shared pair."""
    return MapSnapshot(
        id="balanced-map",
        name="Balanced Map",
        assignments=(
            Assignment(id=1, name="Front", x=25, y=25, zone=RectZone(20, 20, 30, 30)),
            Assignment(id=2, name="Back", x=75, y=25, zone=RectZone(70, 20, 80, 30)),
            Assignment(id=3, name="Left", x=25, y=75, zone=RectZone(20, 70, 30, 80)),
            Assignment(id=4, name="Right", x=75, y=75, zone=RectZone(70, 70, 80, 80)),
        ),
        players=(
            PlayerAssignment("player-1", (1, 2)),
            PlayerAssignment("player-2", (2, 3)),
            PlayerAssignment("player-3", (3, 4)),
            PlayerAssignment("player-4", (4, 1)),
            PlayerAssignment("player-5", (1, 3)),
        ),
    )
