import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_SEND_IMMEDIATELY"] = "false"

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.security import Identity, create_access_token, hash_password
from app.db.gateway import DataService
from app.db.session import Base, SessionLocal, engine
from app.main import app
from app.models.audit_log import AuditLog  # noqa: F401
from app.models.email_log import EmailLog  # noqa: F401
from app.models.package import Package
from app.models.package_date import PackageAvailableDate
from app.models.profile import Profile


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    s = SessionLocal()
    yield s
    s.close()


@pytest.fixture
def data(db):
    return DataService(db)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_profile(data: DataService, role: str = "user", email: str | None = None, password: str = "Secret123") -> Profile:
    now = datetime.now(timezone.utc)
    profile = Profile(
        id=str(uuid.uuid4()),
        email=email or f"{uuid.uuid4().hex[:8]}@example.com",
        username=f"{role}_{uuid.uuid4().hex[:6]}",
        phone="+91 9876543210",
        role=role,
        password_hash=hash_password(password),
        created_at=now,
        updated_at=now,
    )
    data.insert(profile)
    return profile


def make_package(data: DataService, title: str = "Chembra Peak", is_active: bool = True,
                 created_at: datetime | None = None, **extra) -> Package:
    now = created_at or datetime.now(timezone.utc)
    fields = {
        "destination": "Wayanad",
        "price_per_head": 4500,
        "advance_payment": 1000,
        "duration_days": 2,
        "max_capacity": 20,
    }
    fields.update(extra)
    pkg = Package(id=str(uuid.uuid4()), title=title, is_active=is_active, created_at=now, updated_at=now, **fields)
    data.insert(pkg)
    return pkg


def make_date(data: DataService, package_id: str, when: date, is_available: bool = True,
              row_id: str | None = None) -> PackageAvailableDate:
    row = PackageAvailableDate(
        id=row_id or str(uuid.uuid4()),
        package_id=package_id,
        available_date=when,
        max_bookings=10,
        current_bookings=0,
        is_available=is_available,
    )
    data.insert(row)
    return row


def identity_of(profile: Profile) -> Identity:
    return Identity(user_id=profile.id, role=profile.role)


def auth_headers(profile: Profile) -> dict:
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.role)}"}


def future(days: int) -> date:
    return date.today() + timedelta(days=days)
