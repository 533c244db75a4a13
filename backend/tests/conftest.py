"""
tests/conftest.py
=================
Shared fixtures: a fresh in-memory SQLite database per test, the real FastAPI
app behind httpx's ASGI transport, and a mailer that never leaves the process.
"""
from typing import List, Tuple

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.client.api import BackofficeClient
from app.core.deps import get_db, get_mailer
from app.db.base import Base
from app.db.session import build_engine
from app.main import app
from app.services.mailer import MailerError


class FakeMailer:
    """Records mails instead of talking SMTP"""

    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []
        self.fail_with = None

    @property
    def configured(self) -> bool:
        return True

    def send(self, to_email: str, subject: str, body: str) -> None:
        if self.fail_with:
            raise MailerError(self.fail_with)
        self.sent.append((to_email, subject, body))


@pytest.fixture
async def engine():
    test_engine = build_engine(
        "sqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db(session_factory):
    """Session for tests that drive services directly"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
async def client(session_factory, mailer):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def api(client):
    """BackofficeClient talking to the in-process app"""
    return BackofficeClient(http=client)


# ─── Data helpers ─────────────────────────────────────────────────────────────

@pytest.fixture
def make_vendor(client):
    async def _make(name="Tokyo Auto Transport", category="TRANSPORT_VENDOR", **extra):
        response = await client.post("/api/vendors", json={"name": name, "category": category, **extra})
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_customer(client):
    async def _make(name="Kamau Motors", **extra):
        response = await client.post("/api/customers", json={"name": name, **extra})
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_vehicle(client):
    async def _make(vin="JTDBR32E720012345", **extra):
        payload = {"vin": vin, "make": "Toyota", "model": "Prius", "year": 2019, **extra}
        response = await client.post("/api/vehicles", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_inquiry(client):
    async def _make(**extra):
        payload = {"source": "WEB", "customerName": "Amina Otieno", "email": "amina@example.com", **extra}
        response = await client.post("/api/inquiries", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make
