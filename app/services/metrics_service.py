from dataclasses import dataclass, asdict
from typing import Any, Iterable


@dataclass
class DashboardMetrics:
    total_bookings: int = 0
    pending_bookings: int = 0
    confirmed_bookings: int = 0
    cancelled_bookings: int = 0
    total_revenue: int = 0
    advance_revenue: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def _field(booking: Any, name: str):
    if isinstance(booking, dict):
        return booking.get(name)
    return getattr(booking, name, None)


def compute_dashboard_metrics(bookings: Iterable[Any]) -> DashboardMetrics:
    """Single pass over the booking set.

    Revenue counts confirmed bookings only; advance revenue counts every
    booking's ``advance_paid``, cancelled ones included.
    """
    m = DashboardMetrics()
    for b in bookings:
        status = _field(b, "status")
        m.total_bookings += 1
        if status == "pending":
            m.pending_bookings += 1
        elif status == "confirmed":
            m.confirmed_bookings += 1
            m.total_revenue += int(_field(b, "total_price") or 0)
        elif status == "cancelled":
            m.cancelled_bookings += 1
        m.advance_revenue += int(_field(b, "advance_paid") or 0)
    return m
