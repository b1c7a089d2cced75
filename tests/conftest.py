"""
Pytest configuration and fixtures for testing.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database.session import Base, get_db
from app.seed.seed_rbac import seed_rbac
from app.services.rbac_service import rbac_service
from app.schemas.iam import MenuCreate, PermissionCreate, RoleCreate
from common_utils.auth.utils import create_access_token
from main import app


# Test database URL - using in-memory SQLite for tests
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def test_db():
    """
    Create a fresh test database for each test function.
    """
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(test_db):
    """
    Test client bound to the in-memory database. The lifespan hook is not
    entered, so nothing touches the configured PostgreSQL server.
    """
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_user_id(test_db):
    """A user holding the seeded super-admin role"""
    user_id = uuid.uuid4()
    seed_rbac(test_db, super_admin_user_id=str(user_id))
    return user_id


@pytest.fixture(scope="function")
def admin_token(admin_user_id):
    return f"Bearer {create_access_token(user_id=str(admin_user_id))}"


@pytest.fixture(scope="function")
def plain_user_id():
    """A user with no roles at all"""
    return uuid.uuid4()


@pytest.fixture(scope="function")
def user_token(plain_user_id):
    return f"Bearer {create_access_token(user_id=str(plain_user_id))}"


@pytest.fixture
def make_role(test_db):
    def _make(slug="teacher", name=None, is_active=True, **extra):
        created = rbac_service.create_role(
            test_db,
            RoleCreate(name=name or slug.title(), slug=slug, is_active=is_active, **extra),
        )
        return created.id
    return _make


@pytest.fixture
def make_permission(test_db):
    def _make(resource="students", action="view", slug=None, is_active=True):
        created = rbac_service.create_permission(
            test_db,
            PermissionCreate(
                name=f"{action} {resource}",
                slug=slug or f"{resource}.{action}",
                resource=resource,
                action=action,
                is_active=is_active,
            ),
        )
        return created.id
    return _make


@pytest.fixture
def make_menu(test_db):
    def _make(slug, name=None, parent_id=None, sort_order=0, is_active=True):
        created = rbac_service.create_menu(
            test_db,
            MenuCreate(
                name=name or slug.title(),
                slug=slug,
                url=f"/{slug}",
                parent_id=parent_id,
                sort_order=sort_order,
                is_active=is_active,
            ),
        )
        return created.id
    return _make
