import logging
import uuid
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError

from app.db.session import SessionLocal
from app.core.config import settings
from app.core.security import hash_password
from app.models.profile import Profile
from app.models.package import Package
from app.models.package_date import PackageAvailableDate

logger = logging.getLogger(__name__)

SAMPLE_PACKAGE = {
    "title": "Chembra Peak Sunrise Trek",
    "description": "Two-day guided trek to the heart-shaped lake and Chembra summit.",
    "destination": "Wayanad, Kerala",
    "price_per_head": 4500,
    "advance_payment": 1000,
    "duration_days": 2,
    "max_capacity": 20,
    "inclusions": [
        {"icon": "tent", "text": "Camping gear"},
        {"icon": "utensils", "text": "All meals"},
        {"icon": "user", "text": "Certified trek leader"},
    ],
    "facilities": [{"icon": "car", "text": "Pickup from Kalpetta"}],
    "itinerary": [
        {"day": 1, "title": "Base camp", "activities": [
            {"time": "14:00", "activity": "Check-in at base camp"},
            {"time": "19:00", "activity": "Campfire and dinner"},
        ]},
        {"day": 2, "title": "Summit", "activities": [
            {"time": "04:30", "activity": "Summit push"},
            {"time": "11:00", "activity": "Descent and drop-off"},
        ]},
    ],
    "contact_info": {"note": "Call for group discounts", "phone": "+91 81294 64465"},
}


def ensure_admin(db: Session, email: str, password: str, username: str = "admin"):
    if db.query(Profile).filter(Profile.email == email).first():
        return
    now = datetime.now(timezone.utc)
    db.add(Profile(
        id=str(uuid.uuid4()),
        email=email,
        username=username,
        phone="",
        role="admin",
        password_hash=hash_password(password),
        created_at=now,
        updated_at=now,
    ))
    db.commit()
    logger.info("[seed] admin profile %s created", email)


def ensure_sample_package(db: Session, weeks: int = 4):
    if db.query(Package).first():
        return
    now = datetime.now(timezone.utc)
    pkg = Package(id=str(uuid.uuid4()), created_at=now, updated_at=now, is_active=True, **SAMPLE_PACKAGE)
    db.add(pkg)
    # one departure every Saturday
    d = date.today()
    d += timedelta(days=(5 - d.weekday()) % 7)
    for i in range(weeks):
        db.add(PackageAvailableDate(
            id=str(uuid.uuid4()),
            package_id=pkg.id,
            available_date=d + timedelta(weeks=i),
            max_bookings=pkg.max_capacity,
            current_bookings=0,
            is_available=True,
        ))
    db.commit()
    logger.info("[seed] sample package %s created", pkg.title)


def run(db=None):
    if db is None:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM profiles LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            logger.warning("[seed] profiles table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        ensure_admin(db, settings.SEED_ADMIN_EMAIL, settings.SEED_ADMIN_PASSWORD)
        ensure_sample_package(db)
    finally:
        db.close()
