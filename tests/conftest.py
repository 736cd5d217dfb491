"""Test configuration and fixtures."""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardshow_authz.audit.emitter import AuditEmitter, reset_audit_emitter
from cardshow_authz.audit.sinks import InMemoryAuditSink
from cardshow_authz.config.settings import settings
from cardshow_authz.constants.entities import EntityType

# Import all models to register them with Base.metadata
from cardshow_authz.models import *  # noqa: F403, F401
from cardshow_authz.models import ENTITY_MODELS
from cardshow_authz.models.base import Base
from cardshow_authz.models.profile import Role
from cardshow_authz.policies.base_policy import Principal
from cardshow_authz.policies.evaluator import PolicyEvaluator
from cardshow_authz.ports.registry import PortRegistry
from cardshow_authz.ports.sqlalchemy_port import SQLAlchemyEntityPort
from cardshow_authz.testing.world import World, seed_world
from cardshow_authz.utils.exceptions import PortUnavailableError


# Test settings
@pytest.fixture(scope="session", autouse=True)
def setup_test_settings():
    """Setup test settings configuration."""
    settings.TESTING = True
    settings.AUDIT_SINK = "memory"
    settings.AUDIT_ADMIN_OVERRIDES = True

    from cardshow_authz.config.database import reset_engines

    reset_engines()
    reset_audit_emitter()

    yield


# One database file per test
@pytest_asyncio.fixture
async def engine(tmp_path):
    """Create an engine on a fresh SQLite file with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory that keeps rows loaded after commit."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Database session for a test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def world(db_session) -> World:
    """Seeded marketplace with cross-referencing show membership."""
    return await seed_world(db_session)


# Audit
@pytest.fixture
def audit_sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest_asyncio.fixture
async def audit(audit_sink) -> AsyncGenerator[AuditEmitter, None]:
    """Audit emitter writing to the in-memory sink."""
    emitter = AuditEmitter(audit_sink, maxsize=1000)
    yield emitter
    await emitter.stop()


# Evaluation
@pytest.fixture
def ports(db_session) -> PortRegistry:
    return PortRegistry.for_session(db_session)


@pytest.fixture
def evaluator(ports, audit) -> PolicyEvaluator:
    return PolicyEvaluator(ports, audit=audit, audit_admin_overrides=True)


class FailingPort:
    """Port whose store cannot be reached."""

    def __init__(self, entity_type: EntityType):
        self.entity_type = entity_type

    def _fail(self):
        raise PortUnavailableError(f"{self.entity_type.value} store unreachable")

    async def get(self, entity_id, for_update=False):
        self._fail()

    async def exists(self, **filters):
        self._fail()

    async def list(self, **filters):
        self._fail()

    async def insert(self, values):
        self._fail()

    async def update(self, entity_id, values):
        self._fail()

    async def delete(self, entity_id):
        self._fail()


@pytest.fixture
def ports_with_failure(db_session):
    """Build a registry where the given entity types' stores are unreachable."""

    def build(*failing: EntityType) -> PortRegistry:
        ports = {
            entity_type: SQLAlchemyEntityPort(db_session, model, entity_type)
            for entity_type, model in ENTITY_MODELS.items()
        }
        for entity_type in failing:
            ports[entity_type] = FailingPort(entity_type)
        return PortRegistry(ports)

    return build


# Principals
@pytest.fixture
def make_principal():
    """Factory for principals not backed by seeded data."""

    def make(role: Role = Role.ATTENDEE, principal_id: str | None = None, is_service: bool = False) -> Principal:
        return Principal(id=principal_id or str(uuid.uuid4()), role=role, is_service=is_service)

    return make


@pytest.fixture
def make_token():
    """Factory for bearer tokens as the identity provider would issue them."""

    def make(subject: str, role: str = "authenticated", expires_in: int = 3600, **claims) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "role": role,
            "aud": settings.JWT_AUDIENCE,
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
            **claims,
        }
        return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    return make


@pytest.fixture
def auth_headers(make_token):
    """Authorization headers for a subject id."""

    def headers(subject: str, **kwargs) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(subject, **kwargs)}"}

    return headers


# Async test client
@pytest_asyncio.fixture
async def async_client(session_factory, audit) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, bound to the test database and audit sink."""
    from cardshow_authz.dependencies.database import get_db
    from cardshow_authz.dependencies.services import get_audit_emitter
    from cardshow_authz.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_audit_emitter] = lambda: audit

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
