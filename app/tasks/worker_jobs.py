import logging
from contextlib import contextmanager
from datetime import date

from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from app.core.errors import RemoteQueryError
from app.db.gateway import DataService
from app.db.session import SessionLocal
from app.models.package_date import PackageAvailableDate
from app.services.email_service import process_pending_emails

logger = logging.getLogger(__name__)

SKIPPED = {"skipped": True, "reason": "missing_tables"}


class _SchemaMissing(Exception):
    pass


@contextmanager
def _session(factory=SessionLocal):
    db: Session = factory()
    try:
        yield db
    except (ProgrammingError, OperationalError) as e:
        # tables not migrated yet
        db.rollback()
        raise _SchemaMissing() from e
    finally:
        db.close()


def process_email_queue(limit: int = 50, session_factory=SessionLocal) -> dict:
    """Retry queued/failed confirmation emails. Run periodically via Celery beat."""
    try:
        with _session(session_factory) as db:
            result = process_pending_emails(db, limit=limit)
    except _SchemaMissing:
        return dict(SKIPPED)
    if result["processed"]:
        logger.info("email queue: %s", result)
    return result


def close_past_departures(today: date | None = None, session_factory=SessionLocal) -> dict:
    """Mark departure dates before today as no longer available."""
    today = today or date.today()
    try:
        with _session(session_factory) as db:
            closed = DataService(db).update(
                PackageAvailableDate,
                {"is_available": False},
                PackageAvailableDate.available_date < today,
                PackageAvailableDate.is_available.is_(True),
            )
    except _SchemaMissing:
        return dict(SKIPPED)
    except RemoteQueryError as e:
        if isinstance(e.__cause__, (ProgrammingError, OperationalError)):
            return dict(SKIPPED)
        raise
    if closed:
        logger.info("closed %d past departure date(s) before %s", closed, today.isoformat())
    return {"closed": closed}
