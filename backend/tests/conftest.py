import os
import sys
import tempfile
from pathlib import Path

# Add backend directory to Python path FIRST
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read once at import time, so the test environment goes in first
_test_data_dir = tempfile.mkdtemp(prefix="church-tests-")
os.environ["CHURCH_DATA_DIR"] = _test_data_dir
os.environ["CHURCH_DB_URL"] = "sqlite://"
os.environ["CHURCH_SEED_DEFAULTS"] = "false"
os.environ["CHURCH_JWT_SECRET"] = "test-access-secret"
os.environ["CHURCH_JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["CHURCH_LOG_LEVEL"] = "DEBUG"

# Now import after path and environment are set
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from constants import Authority, DayOfWeek
from database import Base, get_db
from models import Category, Group, User
from services.auth_service import hash_password
from utils.jwt_util import JwtUtil

DEFAULT_PASSWORD = "secret-pass"


@pytest.fixture
def engine():
    """In-memory database shared by every session of one test"""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create in-memory database for testing"""
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    def factory(username, authority=Authority.MEMBER, password=DEFAULT_PASSWORD, enabled=True, **fields):
        user = User(
            username=username,
            password=hash_password(password),
            enabled=enabled,
            **fields
        )
        user.set_authorities([authority])
        db_session.add(user)
        db_session.commit()
        return user
    return factory


@pytest.fixture
def make_category(db_session):
    def factory(name):
        category = Category(name_category=name)
        db_session.add(category)
        db_session.commit()
        return category
    return factory


@pytest.fixture
def make_group(db_session):
    def factory(name, day_of_week=DayOfWeek.MONDAY, **fields):
        group = Group(name=name, day_of_week=day_of_week, **fields)
        db_session.add(group)
        db_session.commit()
        return group
    return factory


@pytest.fixture
def admin(make_user):
    return make_user("admin@church.test", Authority.ADMIN)


@pytest.fixture
def member(make_user):
    return make_user("member@church.test", Authority.MEMBER)


@pytest.fixture
def instructor(make_user):
    return make_user("instructor@church.test", Authority.INSTRUCTOR)


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user"""
    jwt_util = JwtUtil()

    def factory(user):
        token = jwt_util.create_access_token(user.username, [a.value for a in user.authorities])
        return {"Authorization": f"Bearer {token}"}
    return factory


@pytest.fixture
def client(engine):
    """Application client whose requests use the test database"""
    from main import create_app

    app = create_app(use_lifespan=False)
    TestingSession = sessionmaker(bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
