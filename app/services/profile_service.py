import uuid
import logging
from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError
from app.core.errors import Forbidden, NotAuthenticated, RemoteQueryError, TrekbookError
from app.core.security import hash_password, verify_password
from app.db.gateway import DataService
from app.models.profile import Profile

logger = logging.getLogger(__name__)


class EmailTaken(TrekbookError):
    status_code = 409

    def __init__(self, message: str = "email already registered"):
        super().__init__(message)


def get_profile(data: DataService, profile_id: str) -> Profile | None:
    return data.select_one(Profile, Profile.id == profile_id)


def get_profile_by_email(data: DataService, email: str) -> Profile | None:
    return data.select_one(Profile, Profile.email == email.strip().lower())


def list_profiles(data: DataService) -> list[Profile]:
    return data.select(Profile, order_by=[Profile.created_at.desc()])


def sign_up(data: DataService, email: str, password: str, username: str, phone: str, role: str = "user") -> Profile:
    if get_profile_by_email(data, email):
        raise EmailTaken()
    now = datetime.now(timezone.utc)
    profile = Profile(
        id=str(uuid.uuid4()),
        email=email.strip().lower(),
        username=username,
        phone=phone,
        role=role,
        password_hash=hash_password(password),
        created_at=now,
        updated_at=now,
    )
    try:
        data.insert(profile)
    except RemoteQueryError as e:
        # a concurrent sign-up won the unique email index
        if isinstance(e.__cause__, IntegrityError) and get_profile_by_email(data, email):
            raise EmailTaken() from e
        raise
    logger.info("profile %s signed up (%s)", profile.id, role)
    return profile


def authenticate(data: DataService, email: str, password: str) -> Profile:
    profile = get_profile_by_email(data, email)
    if not profile or not verify_password(password, profile.password_hash):
        raise NotAuthenticated("Invalid credentials")
    return profile


def authenticate_admin(data: DataService, email: str, password: str) -> Profile:
    profile = authenticate(data, email, password)
    if profile.role != "admin":
        raise Forbidden("You do not have admin privileges")
    return profile
