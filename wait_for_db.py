"""Block until the Postgres server behind DATABASE_URL accepts connections."""
import logging
import os
import time
from urllib.parse import urlparse

import psycopg2

logger = logging.getLogger("wait_for_db")


def connect_kwargs(database_url: str) -> dict:
    # psycopg2 does not understand the SQLAlchemy driver suffix
    url = urlparse(database_url.replace("+psycopg2", "", 1))
    name = url.path.lstrip("/") or "trekbook"
    return {
        "host": url.hostname or "db",
        "port": url.port or 5432,
        "user": url.username or "trekbook",
        "password": url.password or "trekbook",
        "dbname": name,
    }


def wait_for_postgres(database_url: str, timeout_s: int = 60, interval_s: float = 1.0) -> None:
    kwargs = connect_kwargs(database_url)
    deadline = time.monotonic() + timeout_s
    logger.info("waiting for Postgres at %s:%s/%s (timeout %ss)", kwargs["host"], kwargs["port"], kwargs["dbname"], timeout_s)
    while True:
        try:
            psycopg2.connect(connect_timeout=5, **kwargs).close()
        except psycopg2.OperationalError as e:
            if time.monotonic() > deadline:
                logger.error("gave up waiting for Postgres: %s", e)
                raise
            time.sleep(interval_s)
            continue
        logger.info("Postgres is ready")
        return


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[wait_for_db] %(message)s")
    if not os.getenv("DATABASE_URL"):
        raise SystemExit("DATABASE_URL is not set")
    wait_for_postgres(os.environ["DATABASE_URL"], int(os.getenv("DB_WAIT_TIMEOUT", "60")))
