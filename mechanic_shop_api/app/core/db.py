"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), running a group of statements as one atomic unit
(``transaction``), reading outside a transaction
(``read_guard``), applying migrations on application start
(``init_db``) and a connection dependency for FastAPI routes
(``get_db``).

Connections are opened in autocommit mode (``isolation_level=None``)
so that transactions are controlled explicitly.  ``transaction`` starts
with ``BEGIN IMMEDIATE``: the write lock is taken before the first read,
which serializes identifier allocation and the insert consuming it
across concurrent sessions.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings
from .exceptions import PersistenceFailure

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: shop schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS Customer (
            id INTEGER PRIMARY KEY,
            fname TEXT NOT NULL,
            lname TEXT NOT NULL,
            phone TEXT NOT NULL,
            address TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS Mechanic (
            id INTEGER PRIMARY KEY,
            fname TEXT NOT NULL,
            lname TEXT NOT NULL,
            experience INTEGER NOT NULL CHECK (experience BETWEEN 1 AND 99)
        );

        CREATE TABLE IF NOT EXISTS Car (
            vin TEXT PRIMARY KEY,
            make TEXT NOT NULL,
            model TEXT NOT NULL,
            year INTEGER NOT NULL CHECK (year >= 1)
        );

        CREATE TABLE IF NOT EXISTS Owns (
            customer_id INTEGER NOT NULL,
            car_vin TEXT NOT NULL,
            PRIMARY KEY (customer_id, car_vin),
            FOREIGN KEY(customer_id) REFERENCES Customer(id),
            FOREIGN KEY(car_vin) REFERENCES Car(vin)
        );

        CREATE TABLE IF NOT EXISTS Service_Request (
            rid INTEGER PRIMARY KEY,
            customer_id INTEGER NOT NULL,
            car_vin TEXT NOT NULL,
            date TEXT NOT NULL,
            odometer INTEGER NOT NULL CHECK (odometer BETWEEN 0 AND 9999999),
            complain TEXT NOT NULL DEFAULT '',
            FOREIGN KEY(customer_id) REFERENCES Customer(id),
            FOREIGN KEY(car_vin) REFERENCES Car(vin)
        );

        -- wid and rid carry the same value.  The remaining columns keep
        -- the history of the open request, whose row is deleted on close.
        CREATE TABLE IF NOT EXISTS Closed_Request (
            wid INTEGER PRIMARY KEY,
            rid INTEGER NOT NULL UNIQUE,
            mid INTEGER NOT NULL,
            date TEXT NOT NULL,
            comment TEXT NOT NULL,
            bill INTEGER NOT NULL CHECK (bill >= 0),
            customer_id INTEGER NOT NULL,
            car_vin TEXT NOT NULL,
            odometer INTEGER NOT NULL,
            complain TEXT NOT NULL DEFAULT '',
            opened_at TEXT NOT NULL,
            FOREIGN KEY(mid) REFERENCES Mechanic(id),
            FOREIGN KEY(customer_id) REFERENCES Customer(id),
            FOREIGN KEY(car_vin) REFERENCES Car(vin)
        );
        """,
    ),
    # Migration 2: lookup indices
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_customer_lname ON Customer(lname);
        CREATE INDEX IF NOT EXISTS idx_owns_car_vin ON Owns(car_vin);
        CREATE INDEX IF NOT EXISTS idx_service_request_car_vin ON Service_Request(car_vin);
        CREATE INDEX IF NOT EXISTS idx_closed_request_car_vin ON Closed_Request(car_vin);
        CREATE INDEX IF NOT EXISTS idx_closed_request_customer_id ON Closed_Request(customer_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # mechanic_shop_api/
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection returns rows as ``sqlite3.Row`` objects, enforces
    foreign keys and waits up to ``settings.db_timeout`` seconds for
    another session's lock.  ``check_same_thread`` is disabled because
    FastAPI may open the connection in a worker thread and use it on
    the event loop thread; a connection is still only used by one
    request at a time.
    """
    path = db_path or get_database_path()
    try:
        conn = sqlite3.connect(
            path,
            timeout=settings.db_timeout,
            isolation_level=None,
            check_same_thread=False,
        )
    except sqlite3.Error as e:
        raise PersistenceFailure(f"Unable to open database {path}: {e}") from e
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Cursor]:
    """Run the enclosed statements as one atomic unit.

    Yields a cursor inside ``BEGIN IMMEDIATE``.  On normal exit the
    transaction is committed; on any exception it is rolled back so
    none of the writes become visible.  ``sqlite3`` errors (including
    lock timeouts) are re-raised as :class:`PersistenceFailure`; other
    exceptions propagate unchanged.
    """
    cursor = conn.cursor()
    try:
        cursor.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as e:
        raise PersistenceFailure(f"Could not start transaction: {e}") from e
    try:
        yield cursor
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Transaction rolled back: %s", e)
        raise PersistenceFailure(str(e)) from e
    except BaseException:
        conn.rollback()
        raise
    finally:
        cursor.close()


@contextmanager
def read_guard() -> Iterator[None]:
    """Re-raise ``sqlite3`` errors from reads outside ``transaction`` as :class:`PersistenceFailure`."""
    try:
        yield
    except sqlite3.Error as e:
        logger.error("Read failed: %s", e)
        raise PersistenceFailure(str(e)) from e


def get_db() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency yielding a connection scoped to one request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  Each migration and its version row are committed
    together.
    """
    conn = get_connection(db_path)
    try:
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                conn.executescript(
                    f"BEGIN;\n{sql}\nINSERT INTO migrations (version) VALUES ({version});\nCOMMIT;"
                )
                logger.info("Applied migration %s", version)
                current_version = version
    except sqlite3.Error as e:
        if conn.in_transaction:
            conn.rollback()
        raise PersistenceFailure(f"Migration failed: {e}") from e
    finally:
        conn.close()
