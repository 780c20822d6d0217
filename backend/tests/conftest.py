import os

# Settings are read at import time
os.environ["SECRET_KEY"] = "test-secret-key-for-identity-tokens-0123456789"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["TIMEZONE"] = "Asia/Beirut"

import time

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from api.deps import get_sms_service
from core.config import settings
from db.session import get_db
from main import app
from models import AllowedEmail, Floor, FloorType, Restaurant, User, UserRole
from services.sms import SmsService


def make_token(uid: str, email: str | None = None, admin: bool = False, expires_in: int = 3600, **claims) -> str:
    """Sign an identity token the way the provider would."""
    payload = {"sub": uid, "exp": int(time.time()) + expires_in, **claims}
    if email:
        payload["email"] = email
    if admin:
        payload["admin"] = True
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {make_token(user.external_uid, user.email, admin=user.is_admin)}"}


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="db")
def db_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="sms_requests")
def sms_requests_fixture() -> list[httpx.Request]:
    return []


@pytest.fixture(name="sms_reply")
def sms_reply_fixture() -> dict:
    """Mutable gateway reply; tests may change ``text`` or ``status``."""
    return {"text": "SMS sent successfully", "status": 200}


@pytest.fixture(name="sms_service")
def sms_service_fixture(sms_requests, sms_reply) -> SmsService:
    def handler(request: httpx.Request) -> httpx.Response:
        sms_requests.append(request)
        return httpx.Response(sms_reply["status"], text=sms_reply["text"])

    return SmsService(
        base_url="http://sms.test/http.php",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(name="client")
def client_fixture(db, sms_service):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_sms_service] = lambda: sms_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def _user(db: Session, uid: str, email: str, role: UserRole = UserRole.USER, allowed: bool = True) -> User:
    user = User(external_uid=uid, email=email, name=uid.title(), role=role)
    db.add(user)
    if allowed:
        db.add(AllowedEmail(email=email, created_by="tests"))
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(name="owner")
def owner_fixture(db) -> User:
    return _user(db, "owner-uid", "owner@example.com")


@pytest.fixture(name="other_user")
def other_user_fixture(db) -> User:
    return _user(db, "other-uid", "other@example.com")


@pytest.fixture(name="admin")
def admin_fixture(db) -> User:
    return _user(db, "admin-uid", "admin@example.com", role=UserRole.ADMIN, allowed=False)


@pytest.fixture(name="restaurant")
def restaurant_fixture(db, owner) -> Restaurant:
    restaurant = Restaurant(
        name="Chez Test",
        address="1 Test Street",
        phone="+96170000000",
        email="chez@example.com",
        owner_id=owner.id,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


@pytest.fixture(name="other_restaurant")
def other_restaurant_fixture(db, other_user) -> Restaurant:
    restaurant = Restaurant(
        name="Elsewhere",
        address="2 Other Street",
        phone="+96170000001",
        email="elsewhere@example.com",
        owner_id=other_user.id,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


@pytest.fixture(name="floor")
def floor_fixture(db, restaurant) -> Floor:
    floor = Floor(name="Main", type=FloorType.INDOOR, restaurant_id=restaurant.id)
    db.add(floor)
    db.commit()
    db.refresh(floor)
    return floor
