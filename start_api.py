#!/usr/bin/env python3
"""Container entry point: wait for the database, migrate, seed, then serve."""
import logging
import os
import sys

from alembic import command
from alembic.config import Config

from app.core.config import settings

logger = logging.getLogger("start_api")


def migrate(database_url: str) -> None:
    cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(cfg, "head")


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="[start_api] %(message)s")
    if not settings.DATABASE_URL.startswith("sqlite"):
        from wait_for_db import wait_for_postgres
        wait_for_postgres(settings.DATABASE_URL, settings.DB_WAIT_TIMEOUT)

    migrate(settings.DATABASE_URL)
    logger.info("migrations applied")

    from app.seed import run as seed
    seed()

    port = os.getenv("PORT", "8000")
    logger.info("starting uvicorn on :%s", port)
    os.execv(sys.executable, [sys.executable, "-m", "uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", port])


if __name__ == "__main__":
    main()
