"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite database per test, seeded with the vaccine catalog
- Users for each role and JWT token minting
- HTTPX AsyncClient with auth header and CSRF header
"""
import os
import uuid
from dataclasses import dataclass
from datetime import date
from typing import AsyncGenerator, Generator

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ["TESTING"] = "1"
os.environ["AI_API_KEY"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.deps import get_db
from app.core.security import create_session_token
from app.db.base import Base
from app.db.enums import DoctorStatus, Role
from app.db.models import Doctor, User
from app.main import app
from app.services import child_service, vaccination_service


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session on a private in-memory database.

    App code may commit or roll back freely; the database is discarded
    after the test.
    """
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()

    vaccination_service.seed_catalog(session)
    session.commit()

    yield session

    session.close()
    engine.dispose()


def _make_user(db: Session, role: Role, name: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{name.lower()}-{uuid.uuid4().hex[:8]}@test.com",
        display_name=name,
        role=role.value,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture(scope="function")
def parent_user(db: Session) -> User:
    return _make_user(db, Role.PARENT, "Parent")


@pytest.fixture(scope="function")
def other_parent(db: Session) -> User:
    return _make_user(db, Role.PARENT, "Other")


@pytest.fixture(scope="function")
def doctor_user(db: Session) -> User:
    return _make_user(db, Role.DOCTOR, "Doctor")


@pytest.fixture(scope="function")
def admin_user(db: Session) -> User:
    return _make_user(db, Role.ADMIN, "Admin")


@pytest.fixture(scope="function")
def active_doctor(db: Session, doctor_user: User) -> Doctor:
    """Approved doctor profile for doctor_user."""
    doctor = Doctor(
        user_id=doctor_user.id,
        specialization="Pediatrician",
        qualification="MBBS, MD",
        location="Bengaluru, Karnataka",
        experience_years=8,
        status=DoctorStatus.ACTIVE.value,
    )
    db.add(doctor)
    db.commit()
    return doctor


@pytest.fixture(scope="function")
def child(db: Session, parent_user: User):
    """Child born 2024-01-01 with all vaccination records created."""
    created = child_service.create_child(
        db=db,
        parent_id=parent_user.id,
        name="Aarav",
        date_of_birth=date(2024, 1, 1),
        gender="Male",
        today=date(2025, 5, 10),
        birth_health_issues=["Jaundice"],
    )
    db.commit()
    return created


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def _auth(user: User) -> TestAuth:
    return TestAuth(
        user=user,
        token=create_session_token(
            user_id=user.id,
            role=user.role,
            token_version=user.token_version,
        ),
    )


@pytest.fixture(scope="function")
def parent_auth(parent_user: User) -> TestAuth:
    return _auth(parent_user)


@pytest.fixture(scope="function")
def other_parent_auth(other_parent: User) -> TestAuth:
    return _auth(other_parent)


@pytest.fixture(scope="function")
def doctor_auth(doctor_user: User) -> TestAuth:
    return _auth(doctor_user)


@pytest.fixture(scope="function")
def admin_auth(admin_user: User) -> TestAuth:
    return _auth(admin_user)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Unauthenticated AsyncClient. Pass auth headers per request.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def parent_client(client: AsyncClient, parent_auth: TestAuth) -> AsyncClient:
    client.headers.update(parent_auth.headers)
    return client
