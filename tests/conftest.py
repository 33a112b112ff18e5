"""
Pytest fixtures for the cafeteria API.

Every test gets its own SQLite file, a fully started application (lifespan
entered) and an httpx client speaking ASGI to it.
"""
from decimal import Decimal
from typing import Any

import httpx
import pytest

from app.core.config import Settings
from app.core.security import hash_password
from app.main import create_app
from app.models import MenuItem, User, UserRole
from app.services.notifications import Subscriber

PASSWORD = "s3cret-pass"


class RecordingSubscriber(Subscriber):
    """Subscriber that keeps every event it receives."""

    def __init__(self, connection_id: str):
        self._connection_id = connection_id
        self.events: list[tuple[str, Any]] = []

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send(self, event: str, payload: Any) -> None:
        self.events.append((event, payload))

    def of(self, event: str) -> list[Any]:
        return [payload for name, payload in self.events if name == event]


class FailingSubscriber(Subscriber):
    """Subscriber whose connection is already gone."""

    def __init__(self, connection_id: str):
        self._connection_id = connection_id

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send(self, event: str, payload: Any) -> None:
        raise ConnectionError("socket closed")


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Development settings pointing at a throwaway SQLite database."""
    return Settings(
        _env_file=None,
        env_mode="development",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'cafeteria.db'}",
        jwt_secret="test-secret",
        cors_origin="*",
    )


@pytest.fixture
async def app(settings):
    """Application with its lifespan running."""
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def session(app):
    async with app.state.session_maker() as s:
        yield s


@pytest.fixture
def hub(app):
    return app.state.hub


@pytest.fixture
def listener(hub) -> RecordingSubscriber:
    """A connected subscriber recording every broadcast."""
    subscriber = RecordingSubscriber("listener")
    hub.connect(subscriber)
    return subscriber


# =============================================================================
# USERS
# =============================================================================

async def register(client, email: str, role: str = "student", name: str = "Test User") -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": PASSWORD, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def login(client, email: str, password: str = PASSWORD) -> str:
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]["token"]


async def create_user_row(app, email: str, role: UserRole, name: str = "Kitchen") -> User:
    """Insert a user directly; registration never grants kitchen roles."""
    async with app.state.session_maker() as s:
        user = User(name=name, email=email, password_hash=hash_password(PASSWORD), role=role)
        s.add(user)
        await s.commit()
        await s.refresh(user)
        return user


@pytest.fixture
async def student_token(client):
    await register(client, "student@campus.edu", "student", name="Sam Student")
    return await login(client, "student@campus.edu")


@pytest.fixture
async def faculty_token(client):
    await register(client, "faculty@campus.edu", "faculty", name="Fran Faculty")
    return await login(client, "faculty@campus.edu")


@pytest.fixture
async def staff_token(app, client):
    await create_user_row(app, "staff@campus.edu", UserRole.STAFF, name="Kim Kitchen")
    return await login(client, "staff@campus.edu")


@pytest.fixture
async def admin_token(app, client):
    await create_user_row(app, "admin@campus.edu", UserRole.ADMIN, name="Ada Admin")
    return await login(client, "admin@campus.edu")


# =============================================================================
# MENU
# =============================================================================

@pytest.fixture
async def menu(app) -> dict[str, MenuItem]:
    """A small catalog keyed by dish name."""
    dishes = [
        ("Tomato Soup", "Roasted tomatoes", "5.50", "Soups"),
        ("Lentil Soup", "Red lentils, cumin", "6.00", "Soups"),
        ("Miso Bowl", "Light soup with tofu", "7.25", "Soups"),
        ("Caesar Salad", "Romaine, parmesan, croutons", "9.00", "Salads"),
        ("Greek Salad", "Feta, olives", "8.50", "Salads"),
        ("Veggie Burger", "Black bean patty", "11.00", "Mains"),
    ]
    async with app.state.session_maker() as s:
        items = [
            MenuItem(name=name, description=desc, price=Decimal(price), category=category)
            for name, desc, price, category in dishes
        ]
        s.add_all(items)
        await s.commit()
        for item in items:
            await s.refresh(item)
    return {item.name: item for item in items}


def line(item: MenuItem) -> dict:
    """Line item as a client would submit it."""
    return {"id": item.id, "name": item.name, "price": float(item.price)}
