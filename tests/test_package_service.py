import time
from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.errors import RemoteQueryError
from app.models.booking import Booking
from app.models.package_date import PackageAvailableDate
from app.services import booking_service, package_service
from conftest import identity_of, make_date, make_package, make_profile


def test_list_active_excludes_inactive_newest_first(data):
    t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    old = make_package(data, "Old trek", created_at=t0)
    new = make_package(data, "New trek", created_at=t0 + timedelta(days=3))
    make_package(data, "Hidden trek", is_active=False, created_at=t0 + timedelta(days=5))

    titles = [p.title for p in package_service.list_active_packages(data)]
    assert titles == [new.title, old.title]

    all_titles = [p.title for p in package_service.list_all_packages(data)]
    assert all_titles[0] == "Hidden trek"
    assert len(all_titles) == 3


def test_get_package_missing_is_none(data):
    assert package_service.get_package(data, "no-such-id") is None


def test_available_dates_filtered_and_ascending(data):
    pkg = make_package(data)
    other = make_package(data, "Other")
    today = date(2026, 10, 19)
    make_date(data, pkg.id, today + timedelta(days=10))
    make_date(data, pkg.id, today)
    make_date(data, pkg.id, today - timedelta(days=1))
    make_date(data, pkg.id, today + timedelta(days=5), is_available=False)
    make_date(data, other.id, today + timedelta(days=2))

    rows = package_service.list_available_dates(data, pkg.id, today=today)
    assert [r.available_date for r in rows] == [today, today + timedelta(days=10)]

    # the admin view lists every row of the package
    assert len(package_service.list_package_dates(data, pkg.id)) == 4


def test_create_returns_server_fields(data):
    pkg = package_service.create_package(data, {
        "title": "Kudremukh",
        "price_per_head": 3000,
        "advance_payment": 500,
        "itinerary": [{"day": 1, "title": "Climb", "activities": [{"time": "06:00", "activity": "Start"}]}],
        "contact_info": {"note": "", "phone": "+91 9000000000"},
    })
    assert pkg.id
    assert pkg.created_at is not None
    assert pkg.updated_at is not None
    assert pkg.itinerary[0]["activities"][0]["activity"] == "Start"


def test_update_stamps_updated_at(data):
    pkg = package_service.create_package(data, {"title": "Kudremukh", "price_per_head": 3000})
    before = pkg.updated_at
    time.sleep(0.01)
    updated = package_service.update_package(data, pkg.id, {"price_per_head": 3500, "is_active": False})
    assert updated.price_per_head == 3500
    assert updated.is_active is False
    assert updated.updated_at > before


def test_update_missing_package_is_none(data):
    assert package_service.update_package(data, "no-such-id", {"title": "x"}) is None


def test_delete_package_leaves_bookings(data):
    user = make_profile(data)
    pkg = make_package(data)
    booking = booking_service.create_booking(
        data, identity_of(user), package_id=pkg.id, booking_date=date(2026, 12, 1),
        travel_group_name="Asha", number_of_members=1, total_price=4500, advance_paid=1000,
        members=[{"name": "Asha", "phone": "9876543210"}],
    )
    make_date(data, pkg.id, date(2026, 12, 1))

    assert package_service.delete_package(data, pkg.id) == 1
    assert package_service.get_package(data, pkg.id) is None
    assert data.select(PackageAvailableDate, PackageAvailableDate.package_id == pkg.id) == []
    orphan = data.select_one(Booking, Booking.id == booking.id)
    assert orphan is not None
    assert orphan.package_id == pkg.id


def test_add_and_remove_date(data):
    pkg = make_package(data)
    row = package_service.add_available_date(data, pkg.id, date(2026, 11, 7), max_bookings=12)
    assert row.current_bookings == 0
    assert row.is_available is True
    assert package_service.remove_available_date(data, row.id) == 1
    assert package_service.remove_available_date(data, row.id) == 0


def test_data_layer_errors_surface_as_remote_query_error(data):
    with pytest.raises(RemoteQueryError) as exc:
        package_service.add_available_date(data, "no-such-package", date(2026, 11, 7))
    assert "FOREIGN KEY" in exc.value.message.upper()
    # the session is usable again after the failure
    assert package_service.list_active_packages(data) == []
