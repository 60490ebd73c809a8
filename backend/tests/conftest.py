from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models.users, models.log, models.menu, models.dining_session  # noqa: F401
import models.cart, models.split, models.payment, models.discount  # noqa: F401
from config import get_retry_attempts, get_vat_rate
from database import Base, get_db
from main import app
from models.menu import MenuItem
from models.users import User
from services import sessions
from utils.tokenJWT import create_access_token

VAT_RATE = Decimal("0.14")

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_vat_rate] = lambda: VAT_RATE
    app.dependency_overrides[get_retry_attempts] = lambda: 3
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def staff(db):
    user = User(email="staff@test.local", role="STAFF", first_name="Sam", last_name="Server")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def staff_headers(staff):
    token = create_access_token({"sub": "staff@test.local"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def menu(db):
    items = {
        "platter": MenuItem(name="Mixed Grill Platter", category="Sharing", price=Decimal("100.00")),
        "pizza": MenuItem(name="Margherita", category="Pizza", price=Decimal("32.00")),
        "lemonade": MenuItem(name="Lemon Mint", category="Drinks", price=Decimal("12.00")),
        "soup": MenuItem(name="Lentil Soup", category="Starters", price=Decimal("18.00"), is_available=False),
    }
    db.add_all(items.values())
    db.commit()
    return {key: item.id for key, item in items.items()}


@pytest.fixture
def table(db):
    """Active session at table 7 with four seated diners; returns its id."""
    session = sessions.open_session(db, 7, "Alice")
    for name in ("Alice", "Bob", "Carol", "Dave"):
        sessions.join_session(db, session.id, name)
    db.commit()
    return session.id
