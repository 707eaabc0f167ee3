"""Narrow data-access gateway used by every service.

Exposes the handful of primitives the services need (select, insert, update,
delete, the counter increment procedure) over a SQLAlchemy session, and turns
every SQLAlchemy failure into RemoteQueryError with the driver message kept
as-is. Outside ``transaction()`` each primitive commits on its own; inside it,
writes are only flushed and the whole scope commits or rolls back together.
"""
from contextlib import contextmanager
import logging
from typing import Any, Iterable, Iterator, Sequence

from sqlalchemy import delete as sa_delete, select, update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import RemoteQueryError

logger = logging.getLogger(__name__)


def _message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class DataService:
    def __init__(self, db: Session):
        self.db = db
        self._in_tx = False

    @property
    def in_transaction(self) -> bool:
        return self._in_tx

    @contextmanager
    def transaction(self) -> Iterator["DataService"]:
        if self._in_tx:
            yield self
            return
        self._in_tx = True
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RemoteQueryError(_message(e)) from e
        except Exception:
            self.db.rollback()
            raise
        finally:
            self._in_tx = False

    def _done(self) -> None:
        if self._in_tx:
            self.db.flush()
        else:
            self.db.commit()

    def _fail(self, exc: SQLAlchemyError):
        if not self._in_tx:
            self.db.rollback()
        logger.debug("data layer error: %s", exc)
        raise RemoteQueryError(_message(exc)) from exc

    # reads

    def select(self, model, *filters, order_by: Sequence[Any] = (), limit: int | None = None,
               options: Sequence[Any] = ()) -> list:
        stmt = select(model).where(*filters).options(*options)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            return list(self.db.execute(stmt.execution_options(populate_existing=True)).unique().scalars().all())
        except SQLAlchemyError as e:
            self._fail(e)

    def select_one(self, model, *filters, options: Sequence[Any] = ()):
        """First matching row or None (the 'maybe single' read)."""
        rows = self.select(model, *filters, options=options, limit=1)
        return rows[0] if rows else None

    # writes

    def insert(self, rows):
        many = isinstance(rows, (list, tuple))
        items: Iterable = rows if many else [rows]
        try:
            self.db.add_all(items)
            self._done()
        except SQLAlchemyError as e:
            self._fail(e)
        return rows

    def update(self, model, patch: dict, *filters) -> int:
        """Apply ``patch`` to matching rows; returns the number of rows affected."""
        try:
            result = self.db.execute(
                sa_update(model).where(*filters).values(**patch).execution_options(synchronize_session="fetch")
            )
            self._done()
        except SQLAlchemyError as e:
            self._fail(e)
        return result.rowcount or 0

    def delete(self, model, *filters) -> int:
        try:
            result = self.db.execute(
                sa_delete(model).where(*filters).execution_options(synchronize_session="fetch")
            )
            self._done()
        except SQLAlchemyError as e:
            self._fail(e)
        return result.rowcount or 0

    def increment(self, model, row_id: str, column: str, delta: int = 1) -> int:
        """Server-side counter bump: ``column = column + delta`` on the row whose id is ``row_id``."""
        col = getattr(model, column)
        return self.update(model, {column: col + delta}, model.id == row_id)
