from types import SimpleNamespace

from app.services.metrics_service import DashboardMetrics, compute_dashboard_metrics


def test_dashboard_scenario():
    bookings = [
        {"status": "confirmed", "total_price": 5000, "advance_paid": 1000},
        {"status": "pending", "total_price": 3000, "advance_paid": 500},
        {"status": "cancelled", "total_price": 4000, "advance_paid": 800},
    ]
    m = compute_dashboard_metrics(bookings)
    assert m.as_dict() == {
        "total_bookings": 3,
        "pending_bookings": 1,
        "confirmed_bookings": 1,
        "cancelled_bookings": 1,
        "total_revenue": 5000,
        "advance_revenue": 2300,
    }


def test_total_is_sum_of_statuses():
    statuses = ["pending"] * 4 + ["confirmed"] * 3 + ["cancelled"] * 2
    m = compute_dashboard_metrics({"status": s, "total_price": 100, "advance_paid": 10} for s in statuses)
    assert m.total_bookings == m.pending_bookings + m.confirmed_bookings + m.cancelled_bookings == 9


def test_cancelled_booking_adds_no_revenue_but_counts_advance():
    m = compute_dashboard_metrics([{"status": "cancelled", "total_price": 9000, "advance_paid": 700}])
    assert m.total_revenue == 0
    assert m.advance_revenue == 700


def test_reads_attributes_from_rows():
    rows = [
        SimpleNamespace(status="confirmed", total_price=1200, advance_paid=200),
        SimpleNamespace(status="confirmed", total_price=800, advance_paid=None),
    ]
    m = compute_dashboard_metrics(rows)
    assert m.confirmed_bookings == 2
    assert m.total_revenue == 2000
    assert m.advance_revenue == 200


def test_empty_set():
    assert compute_dashboard_metrics([]) == DashboardMetrics()
