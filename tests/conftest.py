"""Pytest configuration and fixtures."""

import os

# Set test environment variables before importing settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.database import Base, get_db
from app.main import app
from app.models import Organization, Project, ProjectMember, User
from app.utils.security import create_access_token, hash_password

TEST_PASSWORD = "Secret123!"


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the test database."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, user_id: str, email: str, name: str) -> User:
    user = User(
        id=user_id,
        email=email,
        name=name,
        password_hash=hash_password(TEST_PASSWORD),
        active=True,
    )
    db.add(user)
    return user


@pytest.fixture
def organization(db):
    org = Organization(id="org-1", name="Test Agency", slug="test-agency")
    db.add(org)
    db.commit()
    return org


@pytest.fixture
def owner(db):
    user = _make_user(db, "user-owner", "owner@example.com", "Project Owner")
    db.commit()
    return user


@pytest.fixture
def member(db):
    user = _make_user(db, "user-member", "member@example.com", "Team Member")
    db.commit()
    return user


@pytest.fixture
def outsider(db):
    user = _make_user(db, "user-outsider", "outsider@example.com", "Outsider")
    db.commit()
    return user


@pytest.fixture
def project(db, organization, owner, member):
    """Active project owned by ``owner`` with ``member`` as a plain member."""
    project = Project(
        id="proj-1",
        name="Spring Launch",
        slug="spring-launch",
        status="active",
        organization_id=organization.id,
        owner_id=owner.id,
    )
    db.add(project)
    db.flush()
    db.add_all([
        ProjectMember(id="pm-owner", project_id=project.id, user_id=owner.id, role="owner"),
        ProjectMember(id="pm-member", project_id=project.id, user_id=member.id, role="member"),
    ])
    db.commit()
    return project


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture
def member_headers(member):
    return auth_headers(member)


@pytest.fixture
def outsider_headers(outsider):
    return auth_headers(outsider)
