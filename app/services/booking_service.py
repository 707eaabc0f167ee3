import uuid
import logging
from datetime import date, datetime, timezone
from sqlalchemy.orm import selectinload
from app.core.errors import InvalidStatusTransition, InvalidValue, NotAuthenticated, NotFound
from app.core.security import Identity
from app.db.gateway import DataService
from app.models.booking import Booking, BOOKING_STATUSES, PAYMENT_STATUSES
from app.models.booking_member import BookingMember
from app.models.package_date import PackageAvailableDate
from app.models.profile import Profile
from app.services.audit_service import log_audit
from app.services.email_service import booking_confirmation_email, queue_email

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_NOTE = "Cancelled by admin"

# pending may move anywhere; confirmed and cancelled are terminal (re-setting the same
# status is allowed so notes and the conversation link can still be edited)
ALLOWED_TRANSITIONS = {
    "pending": {"pending", "confirmed", "cancelled"},
    "confirmed": {"confirmed"},
    "cancelled": {"cancelled"},
}

_WITH_RELATIONS = (selectinload(Booking.package), selectinload(Booking.members))


def validate_transition(current: str, target: str) -> None:
    if target not in BOOKING_STATUSES:
        raise InvalidStatusTransition(f"unknown booking status: {target}")
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransition(f"cannot change booking status from {current} to {target}")


def create_booking(data: DataService, identity: Identity | None, *, package_id: str, booking_date: date,
                   travel_group_name: str, number_of_members: int, total_price: int, advance_paid: int,
                   members: list[dict]) -> Booking:
    """Insert the booking, its member rows and bump the capacity counter as one unit.

    Price and headcount are stored as given. If any step fails the whole
    sequence is rolled back and the error propagates.
    """
    if identity is None:
        raise NotAuthenticated()

    booking_id = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    step = "insert booking"
    try:
        with data.transaction():
            data.insert(Booking(
                id=booking_id,
                user_id=identity.user_id,
                package_id=package_id,
                booking_date=booking_date,
                travel_group_name=travel_group_name,
                number_of_members=number_of_members,
                total_price=total_price,
                advance_paid=advance_paid,
                status="pending",
                payment_status="advance_paid",
                created_at=now,
                updated_at=now,
            ))

            step = "insert members"
            rows = [
                BookingMember(
                    id=str(uuid.uuid4()),
                    booking_id=booking_id,
                    member_name=m.get("name", ""),
                    member_phone=m.get("phone", "") or "",
                )
                for m in members
            ]
            if rows:
                data.insert(rows)

            # The counter procedure is keyed by the package id, not by the
            # available-date row of booking_date.
            step = "increment counter"
            touched = data.increment(PackageAvailableDate, package_id, "current_bookings", 1)
    except Exception as e:
        if step == "insert booking":
            logger.error("booking create failed for user %s: %s", identity.user_id, e)
        else:
            logger.error("booking %s rolled back, step '%s' failed: %s", booking_id, step, e)
        raise

    if not touched:
        logger.warning("capacity counter for package %s matched no row; booking %s not counted", package_id, booking_id)
    logger.info("booking %s created by %s (%d members)", booking_id, identity.user_id, len(members))
    return get_booking(data, booking_id)


def get_booking(data: DataService, booking_id: str) -> Booking | None:
    return data.select_one(Booking, Booking.id == booking_id, options=_WITH_RELATIONS)


def list_my_bookings(data: DataService, identity: Identity | None) -> list[Booking]:
    if identity is None:
        raise NotAuthenticated()
    return list_user_bookings(data, identity.user_id)


def list_user_bookings(data: DataService, user_id: str) -> list[Booking]:
    return data.select(Booking, Booking.user_id == user_id, order_by=[Booking.created_at.desc()], options=_WITH_RELATIONS)


def list_all_bookings(data: DataService) -> list[Booking]:
    # admin-only; the gate is on the route
    return data.select(Booking, order_by=[Booking.created_at.desc()], options=_WITH_RELATIONS)


def update_booking_status(data: DataService, booking_id: str, status: str, admin_notes: str | None = None,
                          conversation_link: str | None = None, actor: Identity | None = None) -> Booking:
    booking = get_booking(data, booking_id)
    if not booking:
        raise NotFound("Booking not found")
    previous = booking.status
    validate_transition(previous, status)

    patch = {"status": status, "updated_at": datetime.now(timezone.utc)}
    if admin_notes is not None:
        patch["admin_notes"] = admin_notes
    elif status == "cancelled" and previous != "cancelled" and not booking.admin_notes:
        patch["admin_notes"] = DEFAULT_CANCEL_NOTE
    if conversation_link is not None:
        patch["whatsapp_conversation_link"] = conversation_link

    with data.transaction():
        if not data.update(Booking, patch, Booking.id == booking_id):
            raise NotFound("Booking not found")
        if actor is not None:
            log_audit(data, actor.user_id, "booking.status_changed", "booking", booking_id,
                      {"from": previous, "to": status, "adminNotes": patch.get("admin_notes")})
    updated = get_booking(data, booking_id)

    if status == "confirmed" and previous != "confirmed":
        send_confirmation(data, updated)
    return updated


def update_payment_status(data: DataService, booking_id: str, payment_status: str,
                          actor: Identity | None = None) -> Booking:
    if payment_status not in PAYMENT_STATUSES:
        raise InvalidValue(f"unknown payment status: {payment_status}")
    patch = {"payment_status": payment_status, "updated_at": datetime.now(timezone.utc)}
    with data.transaction():
        if not data.update(Booking, patch, Booking.id == booking_id):
            raise NotFound("Booking not found")
        if actor is not None:
            log_audit(data, actor.user_id, "booking.payment_changed", "booking", booking_id,
                      {"paymentStatus": payment_status})
    return get_booking(data, booking_id)


def send_confirmation(data: DataService, booking: Booking) -> str | None:
    profile = data.select_one(Profile, Profile.id == booking.user_id)
    if not profile or not profile.email:
        logger.warning("booking %s confirmed but booker has no email on file", booking.id)
        return None
    title = booking.package.title if booking.package else ""
    subject, text, body = booking_confirmation_email(booking, title, profile.username or booking.travel_group_name)
    return queue_email(data.db, profile.email, subject, text, body, booking_id=booking.id)
