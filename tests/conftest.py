import pytest
import os
import uuid
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"

import app.models  # noqa: E402,F401  registers every table on Base.metadata
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

PASSWORD = "Password123!"

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once."""
    from app.services import auth as auth_service
    return auth_service.get_password_hash(PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def make_user(db_session, password_hash):
    """Factory creating persisted users: make_user(UserRole.LEADER, team=team)."""
    from app.models.user import User, UserRole

    def _make_user(role=UserRole.MEMBER, team=None, branch=None, email=None, is_active=True, **fields):
        suffix = uuid.uuid4().hex[:8]
        user = User(
            email=email or f"{role.value.lower()}-{suffix}@example.com",
            hashed_password=password_hash,
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", suffix),
            display_name=fields.pop("display_name", f"Test {suffix}"),
            role=role,
            is_active=is_active,
            team_id=team.id if team else None,
            branch_id=branch.id if branch else (team.branch_id if team else None),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture(scope="function")
def branch(db_session):
    from app.models.branch import Branch
    branch = Branch(name=f"Branch {uuid.uuid4().hex[:6]}", location="Amsterdam")
    db_session.add(branch)
    db_session.commit()
    return branch


@pytest.fixture(scope="function")
def make_team(db_session, branch):
    from app.models.team import Team

    def _make_team(name=None, leader=None):
        team = Team(name=name or f"Team {uuid.uuid4().hex[:6]}", branch_id=branch.id)
        db_session.add(team)
        db_session.commit()
        if leader is not None:
            team.leader_id = leader.id
            leader.team_id = team.id
            db_session.commit()
        return team
    return _make_team


@pytest.fixture(scope="function")
def super_admin(make_user):
    from app.models.user import UserRole
    return make_user(UserRole.SUPER_ADMIN, email="owner@example.com")


@pytest.fixture(scope="function")
def admin_user(make_user):
    from app.models.user import UserRole
    return make_user(UserRole.ADMIN, email="admin@example.com")


@pytest.fixture(scope="function")
def member(make_user):
    return make_user(email="member@example.com")


@pytest.fixture(scope="function")
def auth_headers():
    """Bearer headers for a user: auth_headers(user)."""
    from app.services.auth import create_access_token

    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _auth_headers


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
