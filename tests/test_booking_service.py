from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.errors import InvalidStatusTransition, InvalidValue, NotAuthenticated, NotFound, RemoteQueryError
from app.db.gateway import DataService
from app.models.audit_log import AuditLog
from app.models.booking import Booking
from app.models.booking_member import BookingMember
from app.models.email_log import EmailLog
from app.models.package_date import PackageAvailableDate
from app.services import booking_service
from conftest import identity_of, make_date, make_package, make_profile

TRAVEL_DATE = date(2026, 12, 5)


def _book(data, identity, pkg, members=None, **overrides):
    members = members if members is not None else [
        {"name": "Asha", "phone": "9876543210"},
        {"name": "Ravi", "phone": "9876500000"},
    ]
    kwargs = {
        "package_id": pkg.id,
        "booking_date": TRAVEL_DATE,
        "travel_group_name": "Asha & Ravi",
        "number_of_members": len(members),
        "total_price": pkg.price_per_head * len(members),
        "advance_paid": pkg.advance_payment * len(members),
        "members": members,
    }
    kwargs.update(overrides)
    return booking_service.create_booking(data, identity, **kwargs)


def test_create_writes_one_booking_and_n_members(data):
    user = make_profile(data)
    pkg = make_package(data)
    members = [{"name": f"Trekker {i}", "phone": f"98765000{i:02d}"} for i in range(4)]

    booking = _book(data, identity_of(user), pkg, members=members)

    assert booking.status == "pending"
    assert booking.user_id == user.id
    assert booking.total_price == 18000
    assert len(data.select(Booking)) == 1
    rows = data.select(BookingMember)
    assert len(rows) == 4
    assert {r.booking_id for r in rows} == {booking.id}
    assert sorted(m.member_name for m in booking.members) == [f"Trekker {i}" for i in range(4)]


def test_create_without_session_writes_nothing(data):
    pkg = make_package(data)
    with pytest.raises(NotAuthenticated):
        _book(data, None, pkg)
    assert data.select(Booking) == []
    assert data.select(BookingMember) == []


def test_client_supplied_price_is_stored_as_is(data):
    user = make_profile(data)
    pkg = make_package(data)
    booking = _book(data, identity_of(user), pkg, total_price=1, number_of_members=9)
    assert booking.total_price == 1
    assert booking.number_of_members == 9


def test_counter_increment_targets_row_keyed_by_package_id(data):
    user = make_profile(data)
    pkg = make_package(data)
    date_row = make_date(data, pkg.id, TRAVEL_DATE)
    # a row whose own id equals the package id is the one the procedure hits
    keyed_row = make_date(data, pkg.id, TRAVEL_DATE + timedelta(days=7), row_id=pkg.id)

    _book(data, identity_of(user), pkg)

    counts = {r.id: r.current_bookings for r in data.select(PackageAvailableDate)}
    assert counts[date_row.id] == 0
    assert counts[keyed_row.id] == 1


def test_counter_with_no_matching_row_is_not_an_error(data):
    user = make_profile(data)
    pkg = make_package(data)
    date_row = make_date(data, pkg.id, TRAVEL_DATE)

    booking = _book(data, identity_of(user), pkg)

    assert booking.id
    assert data.select_one(PackageAvailableDate, PackageAvailableDate.id == date_row.id).current_bookings == 0


def test_counter_failure_rolls_back_booking_and_members(data, monkeypatch):
    user = make_profile(data)
    pkg = make_package(data)

    def boom(self, *args, **kwargs):
        raise RemoteQueryError("increment_booking_count failed")

    monkeypatch.setattr(DataService, "increment", boom)
    with pytest.raises(RemoteQueryError, match="increment_booking_count failed"):
        _book(data, identity_of(user), pkg)

    assert data.select(Booking) == []
    assert data.select(BookingMember) == []


def test_member_insert_failure_leaves_no_stranded_booking(data):
    user = make_profile(data)
    pkg = make_package(data)

    with pytest.raises(RemoteQueryError):
        _book(data, identity_of(user), pkg, members=[{"name": None, "phone": "9876543210"}])

    assert data.select(Booking) == []
    assert data.select(BookingMember) == []


def test_repeated_create_makes_independent_bookings(data):
    user = make_profile(data)
    pkg = make_package(data)
    a = _book(data, identity_of(user), pkg)
    b = _book(data, identity_of(user), pkg)
    assert a.id != b.id
    assert len(data.select(Booking)) == 2
    assert len(data.select(BookingMember)) == 4


def test_my_bookings_only_mine_newest_first_with_relations(data):
    me = make_profile(data)
    other = make_profile(data)
    pkg = make_package(data)
    first = _book(data, identity_of(me), pkg)
    second = _book(data, identity_of(me), pkg)
    _book(data, identity_of(other), pkg)
    data.update(Booking, {"created_at": datetime(2000, 1, 1, tzinfo=timezone.utc)}, Booking.id == first.id)

    mine = booking_service.list_my_bookings(data, identity_of(me))

    assert [b.id for b in mine] == [second.id, first.id]
    assert mine[0].package.title == pkg.title
    assert len(mine[0].members) == 2


def test_my_bookings_requires_session(data):
    with pytest.raises(NotAuthenticated):
        booking_service.list_my_bookings(data, None)


def test_all_bookings_unfiltered(data):
    pkg = make_package(data)
    for _ in range(3):
        _book(data, identity_of(make_profile(data)), pkg)
    assert len(booking_service.list_all_bookings(data)) == 3


def test_confirm_updates_fields_and_queues_email(data):
    admin = make_profile(data, role="admin")
    user = make_profile(data, email="asha@example.com")
    pkg = make_package(data)
    booking = _book(data, identity_of(user), pkg)
    before = booking.updated_at

    updated = booking_service.update_booking_status(
        data, booking.id, "confirmed", admin_notes="Advance received",
        conversation_link="https://wa.me/919876543210", actor=identity_of(admin),
    )

    assert updated.status == "confirmed"
    assert updated.admin_notes == "Advance received"
    assert updated.whatsapp_conversation_link == "https://wa.me/919876543210"
    assert updated.updated_at >= before
    emails = data.select(EmailLog)
    assert len(emails) == 1
    assert emails[0].to_email == "asha@example.com"
    assert emails[0].booking_id == booking.id
    assert emails[0].status == "queued"
    audit = data.select(AuditLog)
    assert [a.action for a in audit] == ["booking.status_changed"]
    assert audit[0].details["to"] == "confirmed"


def test_cancel_without_notes_uses_default_note(data):
    user = make_profile(data)
    booking = _book(data, identity_of(user), make_package(data))
    updated = booking_service.update_booking_status(data, booking.id, "cancelled")
    assert updated.status == "cancelled"
    assert updated.admin_notes == booking_service.DEFAULT_CANCEL_NOTE
    assert data.select(EmailLog) == []


def test_terminal_status_cannot_move(data):
    user = make_profile(data)
    booking = _book(data, identity_of(user), make_package(data))
    booking_service.update_booking_status(data, booking.id, "cancelled")

    with pytest.raises(InvalidStatusTransition):
        booking_service.update_booking_status(data, booking.id, "confirmed")
    # annotating a cancelled booking is still allowed
    again = booking_service.update_booking_status(data, booking.id, "cancelled", admin_notes="Group dropped out")
    assert again.admin_notes == "Group dropped out"


def test_validate_transition_rules():
    booking_service.validate_transition("pending", "confirmed")
    booking_service.validate_transition("pending", "cancelled")
    booking_service.validate_transition("confirmed", "confirmed")
    with pytest.raises(InvalidStatusTransition):
        booking_service.validate_transition("confirmed", "pending")
    with pytest.raises(InvalidStatusTransition):
        booking_service.validate_transition("pending", "completed")


def test_update_status_unknown_booking_is_not_found(data):
    with pytest.raises(NotFound):
        booking_service.update_booking_status(data, "no-such-booking", "confirmed")


def test_payment_status(data):
    user = make_profile(data)
    booking = _book(data, identity_of(user), make_package(data))
    assert booking.payment_status == "advance_paid"
    updated = booking_service.update_payment_status(data, booking.id, "fully_paid")
    assert updated.payment_status == "fully_paid"
    with pytest.raises(NotFound):
        booking_service.update_payment_status(data, "no-such-booking", "fully_paid")


def test_status_change_rolls_back_when_audit_fails(data, monkeypatch):
    admin = make_profile(data, role="admin")
    booking = _book(data, identity_of(make_profile(data)), make_package(data))

    def audit_down(*args, **kwargs):
        raise RemoteQueryError("audit_logs unavailable")

    monkeypatch.setattr(booking_service, "log_audit", audit_down)
    with pytest.raises(RemoteQueryError):
        booking_service.update_booking_status(data, booking.id, "confirmed", actor=identity_of(admin))

    assert booking_service.get_booking(data, booking.id).status == "pending"
    assert data.select(EmailLog) == []


def test_unknown_payment_status_is_rejected(data):
    booking = _book(data, identity_of(make_profile(data)), make_package(data))
    with pytest.raises(InvalidValue):
        booking_service.update_payment_status(data, booking.id, "refunded")
    assert booking_service.get_booking(data, booking.id).payment_status == "advance_paid"
