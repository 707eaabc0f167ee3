from datetime import date, timedelta

from app.db.session import Base, engine
from app.models.package_date import PackageAvailableDate
from app.tasks import worker_jobs
from conftest import make_date, make_package

TODAY = date(2026, 11, 1)


def test_close_past_departures_only_touches_open_past_dates(data):
    pkg = make_package(data)
    past = make_date(data, pkg.id, TODAY - timedelta(days=1))
    already_closed = make_date(data, pkg.id, TODAY - timedelta(days=8), is_available=False)
    today_row = make_date(data, pkg.id, TODAY)
    upcoming = make_date(data, pkg.id, TODAY + timedelta(days=6))

    assert worker_jobs.close_past_departures(today=TODAY) == {"closed": 1}

    open_ids = {r.id for r in data.select(PackageAvailableDate, PackageAvailableDate.is_available.is_(True))}
    assert open_ids == {today_row.id, upcoming.id}
    assert past.id not in open_ids
    assert already_closed.id not in open_ids

    # nothing left to close on a second run
    assert worker_jobs.close_past_departures(today=TODAY) == {"closed": 0}


def test_jobs_skip_before_migrations():
    Base.metadata.drop_all(engine)
    assert worker_jobs.process_email_queue() == {"skipped": True, "reason": "missing_tables"}
    assert worker_jobs.close_past_departures(today=TODAY) == {"skipped": True, "reason": "missing_tables"}
