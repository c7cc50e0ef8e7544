from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy import select, update

from rosterapp.main import app
from rosterapp.models.user import UserSession
from rosterapp.services.auth_service import create_session, get_session


async def register_user(client: AsyncClient, email="alice@example.com", name="Alice", password="secret123"):
    return await client.post("/auth/register", json={"email": email, "name": name, "password": password})


async def login_user(client: AsyncClient, email="alice@example.com", password="secret123"):
    return await client.post("/auth/login", json={"email": email, "password": password})


async def login_headers(client: AsyncClient, **kwargs) -> dict:
    resp = await login_user(client, **kwargs)
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


class TestRegister:
    async def test_register_success(self, db_client: AsyncClient):
        resp = await register_user(db_client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["email"] == "alice@example.com"
        assert data["name"] == "Alice"
        assert data["role"] == "player"
        assert "id" in data
        assert "hashed_password" not in data

    async def test_register_duplicate_email(self, db_client: AsyncClient):
        await register_user(db_client)
        resp = await register_user(db_client, name="Other")
        assert resp.status_code == 409
        assert "Email" in resp.json()["detail"]

    async def test_register_duplicate_name(self, db_client: AsyncClient):
        await register_user(db_client, email="alice@example.com", name="Alice")
        resp = await register_user(db_client, email="other@example.com", name="Alice")
        assert resp.status_code == 409
        assert "Name" in resp.json()["detail"]

    async def test_register_invalid_email(self, db_client: AsyncClient):
        resp = await db_client.post(
            "/auth/register", json={"email": "not-an-email", "name": "Bob", "password": "password1"}
        )
        assert resp.status_code == 422

    async def test_register_short_password(self, db_client: AsyncClient):
        resp = await register_user(db_client, password="short")
        assert resp.status_code == 422


class TestLogin:
    async def test_login_success(self, db_client: AsyncClient):
        await register_user(db_client)
        resp = await login_user(db_client)
        assert resp.status_code == 200
        data = resp.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["name"] == "Alice"

    async def test_two_logins_get_distinct_tokens(self, db_client: AsyncClient):
        await register_user(db_client)
        first = (await login_user(db_client)).json()["access_token"]
        second = (await login_user(db_client)).json()["access_token"]
        assert first != second

    async def test_login_wrong_password(self, db_client: AsyncClient):
        await register_user(db_client)
        resp = await login_user(db_client, password="wrongpassword")
        assert resp.status_code == 401

    async def test_login_unknown_email(self, db_client: AsyncClient):
        resp = await login_user(db_client, email="nobody@example.com")
        assert resp.status_code == 401


class TestMe:
    async def test_me_success(self, db_client: AsyncClient):
        await register_user(db_client)
        headers = await login_headers(db_client)

        resp = await db_client.get("/auth/me", headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["email"] == "alice@example.com"
        assert data["name"] == "Alice"

    async def test_me_no_token(self, db_client: AsyncClient):
        resp = await db_client.get("/auth/me")
        assert resp.status_code == 401

    async def test_me_invalid_token(self, db_client: AsyncClient):
        resp = await db_client.get("/auth/me", headers={"Authorization": "Bearer invalidtoken"})
        assert resp.status_code == 401


class TestLogout:
    async def test_logout_success(self, db_client: AsyncClient):
        await register_user(db_client)
        headers = await login_headers(db_client)

        resp = await db_client.post("/auth/logout", headers=headers)
        assert resp.status_code == 204

    async def test_token_rejected_after_logout(self, db_client: AsyncClient):
        await register_user(db_client)
        headers = await login_headers(db_client)
        await db_client.post("/auth/logout", headers=headers)

        resp = await db_client.get("/auth/me", headers=headers)
        assert resp.status_code == 401

    async def test_logout_no_token(self, db_client: AsyncClient):
        resp = await db_client.post("/auth/logout")
        assert resp.status_code == 401


class TestSessionExpiry:
    async def test_expired_session_rejected(self, db_client: AsyncClient, db_session, player_user):
        resp = await db_client.post("/auth/login", json={"email": "nyork@example.com", "password": "playerpass1"})
        token = resp.json()["access_token"]
        await db_session.execute(
            update(UserSession)
            .where(UserSession.token == token)
            .values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        )
        await db_session.commit()

        assert await get_session(db_session, token) is None
        resp = await db_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    async def test_new_session_prunes_expired_rows(self, db_session, player_user):
        db_session.add(
            UserSession(
                user_id=player_user.id,
                token="stale-token",
                expires_at=datetime.now(timezone.utc) - timedelta(days=1),
            )
        )
        await db_session.commit()

        await create_session(db_session, player_user, "fresh-token")

        result = await db_session.execute(select(UserSession.token))
        assert result.scalars().all() == ["fresh-token"]


class TestChangePassword:
    async def test_change_password(self, db_client: AsyncClient):
        await register_user(db_client)
        headers = await login_headers(db_client)

        resp = await db_client.post(
            "/auth/change-password",
            json={"current_password": "secret123", "new_password": "newsecret456"},
            headers=headers,
        )
        assert resp.status_code == 204
        assert (await login_user(db_client, password="newsecret456")).status_code == 200
        assert (await login_user(db_client)).status_code == 401

    async def test_change_password_wrong_current(self, db_client: AsyncClient):
        await register_user(db_client)
        headers = await login_headers(db_client)

        resp = await db_client.post(
            "/auth/change-password",
            json={"current_password": "nope-nope", "new_password": "newsecret456"},
            headers=headers,
        )
        assert resp.status_code == 401


class TestPlayers:
    async def test_players_public_and_sorted(self, db_client: AsyncClient):
        await register_user(db_client, email="z@example.com", name="Zed")
        await register_user(db_client, email="a@example.com", name="Anna")

        resp = await db_client.get("/players")
        assert resp.status_code == 200
        assert [p["name"] for p in resp.json()] == ["Anna", "Zed"]
        assert set(resp.json()[0]) == {"id", "name"}

    async def test_users_requires_admin(self, db_client: AsyncClient, player_headers):
        resp = await db_client.get("/users", headers=player_headers)
        assert resp.status_code == 403

    async def test_users_as_admin(self, db_client: AsyncClient, admin_headers, player_user):
        resp = await db_client.get("/users", headers=admin_headers)
        assert resp.status_code == 200
        assert {u["email"] for u in resp.json()} == {"admin@example.com", "nyork@example.com"}


class TestHealth:
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_only_api_routes_mounted(self):
        assert not any(getattr(route, "path", None) == "/static" for route in app.routes)
