import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

# Settings are read from the environment at import time of the app module.
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("AUTO_SEED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from contentkosh_api.api.main import app
from contentkosh_api.core.security import create_access_token, get_password_hash
from contentkosh_api.db.base import Base
from contentkosh_api.db.models import (
    Batch,
    BatchUser,
    Business,
    Course,
    Exam,
    Permission,
    User,
    UserRole,
)
from contentkosh_api.db.seed import PERMISSIONS
from contentkosh_api.db.session import get_async_session

PASSWORD = "Secret123!"
_PASSWORD_HASH = get_password_hash(PASSWORD)


@dataclass
class World:
    """Two tenants with one user per role, plus a small catalogue in tenant A."""

    session_factory: async_sessionmaker[AsyncSession]
    business_a: int
    business_b: int
    users: dict[str, int]
    emails: dict[str, str]
    exam_a: int
    course_a: int
    batch_a: int
    tokens: dict[str, str] = field(default_factory=dict)
    password: str = PASSWORD

    def header(self, name: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.tokens[name]}"}


_USERS = [
    # name, role, tenant
    ("superadmin", UserRole.SUPERADMIN, None),
    ("admin_a", UserRole.ADMIN, "a"),
    ("teacher_a", UserRole.TEACHER, "a"),
    ("student_a", UserRole.STUDENT, "a"),
    ("outsider_a", UserRole.STUDENT, "a"),
    ("admin_b", UserRole.ADMIN, "b"),
    ("student_b", UserRole.STUDENT, "b"),
]


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def world(session_factory) -> World:
    now = datetime.now(tz=timezone.utc)
    async with session_factory() as session:
        business_a = Business(institute_name="Alpha Academy", slug="alpha-academy")
        business_b = Business(institute_name="Beta Classes", slug="beta-classes")
        session.add_all([business_a, business_b])
        await session.flush()
        tenants = {"a": business_a.id, "b": business_b.id}

        users: dict[str, User] = {}
        for name, role, tenant in _USERS:
            user = User(
                email=f"{name.replace('_', '.')}@example.com",
                password=_PASSWORD_HASH,
                name=name.replace("_", " ").title(),
                role=role,
                business_id=tenants[tenant] if tenant else None,
            )
            session.add(user)
            users[name] = user
        session.add_all(
            Permission(code=code, description=description) for code, description in PERMISSIONS.items()
        )
        await session.flush()

        exam = Exam(name="JEE Main", business_id=business_a.id, created_by=users["admin_a"].id)
        session.add(exam)
        await session.flush()
        course = Course(name="JEE Foundation", exam_id=exam.id)
        session.add(course)
        await session.flush()
        batch = Batch(
            code_name="JEE-2026-A",
            display_name="JEE 2026 Morning",
            start_date=now,
            end_date=now + timedelta(days=180),
            course_id=course.id,
            created_by=users["admin_a"].id,
        )
        session.add(batch)
        await session.flush()
        session.add_all(
            [
                BatchUser(batch_id=batch.id, user_id=users["teacher_a"].id),
                BatchUser(batch_id=batch.id, user_id=users["student_a"].id),
            ]
        )
        await session.commit()

        result = World(
            session_factory=session_factory,
            business_a=business_a.id,
            business_b=business_b.id,
            users={name: user.id for name, user in users.items()},
            emails={name: user.email for name, user in users.items()},
            exam_a=exam.id,
            course_a=course.id,
            batch_a=batch.id,
        )
        for name, user in users.items():
            result.tokens[name] = create_access_token(
                user_id=user.id,
                business_id=user.business_id,
                role=user.role.value,
                email=user.email,
            )
    return result


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(target))
    return target


@pytest.fixture
async def client(session_factory, upload_dir):
    async def _session_override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session_override
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()
