"""Shared fixtures: in-memory SQLite app and pre-seeded users"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from woodyard.core.auth import create_session
from woodyard.database import Base, get_db
from woodyard.main import app
from woodyard.models import Customer, User
from woodyard.models.user import Role

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _user(db, username: str, role: Role, display_name: str | None = None) -> User:
    # password login is exercised separately; these users log in via a stored session
    user = User(username=username, password_hash="!", role=role, display_name=display_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _user(db, "admin", Role.ADMIN, "Administrator")


@pytest.fixture
def driver(db):
    return _user(db, "dave", Role.DRIVER, "Dave")


@pytest.fixture
def other_driver(db):
    return _user(db, "olga", Role.DRIVER, "Olga")


@pytest.fixture
def customer(db):
    c = Customer(name="Maple Farm", phone="555-0100", street_address="12 Orchard Rd", city="Hudson", state="NY")
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def login_as(client: TestClient, db, user: User) -> TestClient:
    client.cookies.set("woodyard_session", create_session(db, user))
    return client


@pytest.fixture
def admin_client(client, db, admin):
    return login_as(client, db, admin)


@pytest.fixture
def driver_client(client, db, driver):
    return login_as(client, db, driver)
