"""
core/database.py -- Construction of the process-wide SQLAlchemy Engine.

There is exactly one Engine per process. api/main.py creates it in the
lifespan startup, hands it to every store, and disposes it at shutdown.
Stores never create or dispose engines themselves, so the connection pool has
a single owner with an explicit acquire/release around the server lifetime.

Layer rule: core/ is the kernel. No imports from api/, auth/, or reporting/.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

logger = logging.getLogger("staffdesk.database")


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL and foreign keys on every new SQLite connection.

    SQLite PRAGMAs are per-connection, so they must be reapplied for each
    connection the pool opens.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(db_url: str) -> Engine:
    """Return a configured Engine for db_url.

    SQLite URLs get check_same_thread=False because FastAPI runs sync route
    handlers in a threadpool and connections move between threads.
    """
    connect_args: dict = {}
    is_sqlite = db_url.startswith("sqlite")
    if is_sqlite:
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _set_sqlite_pragmas)
    logger.info("Database engine created (%s)", make_url(db_url).render_as_string(hide_password=True))
    return engine
