import uuid
from datetime import date, datetime, timezone

from app.db.gateway import DataService
from app.models.package import Package
from app.models.package_date import PackageAvailableDate


def list_active_packages(data: DataService) -> list[Package]:
    return data.select(Package, Package.is_active.is_(True), order_by=[Package.created_at.desc()])


def list_all_packages(data: DataService) -> list[Package]:
    return data.select(Package, order_by=[Package.created_at.desc()])


def get_package(data: DataService, package_id: str) -> Package | None:
    return data.select_one(Package, Package.id == package_id)


def list_available_dates(data: DataService, package_id: str, today: date | None = None) -> list[PackageAvailableDate]:
    """Bookable dates of a package: flagged available and not in the past, soonest first."""
    today = today or date.today()
    return data.select(
        PackageAvailableDate,
        PackageAvailableDate.package_id == package_id,
        PackageAvailableDate.is_available.is_(True),
        PackageAvailableDate.available_date >= today,
        order_by=[PackageAvailableDate.available_date.asc()],
    )


def list_package_dates(data: DataService, package_id: str) -> list[PackageAvailableDate]:
    return data.select(
        PackageAvailableDate,
        PackageAvailableDate.package_id == package_id,
        order_by=[PackageAvailableDate.available_date.asc()],
    )


def create_package(data: DataService, fields: dict) -> Package:
    now = datetime.now(timezone.utc)
    pkg = Package(id=str(uuid.uuid4()), created_at=now, updated_at=now, **fields)
    data.insert(pkg)
    return get_package(data, pkg.id)


def update_package(data: DataService, package_id: str, patch: dict) -> Package | None:
    patch = {**patch, "updated_at": datetime.now(timezone.utc)}
    if not data.update(Package, patch, Package.id == package_id):
        return None
    return get_package(data, package_id)


def delete_package(data: DataService, package_id: str) -> int:
    # Bookings reference packages by plain id and are not cleaned up here.
    return data.delete(Package, Package.id == package_id)


def add_available_date(data: DataService, package_id: str, available_date: date, max_bookings: int = 0) -> PackageAvailableDate:
    row = PackageAvailableDate(
        id=str(uuid.uuid4()),
        package_id=package_id,
        available_date=available_date,
        max_bookings=max_bookings,
        current_bookings=0,
        is_available=True,
    )
    data.insert(row)
    return row


def remove_available_date(data: DataService, date_id: str) -> int:
    return data.delete(PackageAvailableDate, PackageAvailableDate.id == date_id)


def set_date_availability(data: DataService, date_id: str, is_available: bool) -> PackageAvailableDate | None:
    """Open or close one departure date; None when the id is unknown."""
    if not data.update(PackageAvailableDate, {"is_available": is_available}, PackageAvailableDate.id == date_id):
        return None
    return data.select_one(PackageAvailableDate, PackageAvailableDate.id == date_id)
