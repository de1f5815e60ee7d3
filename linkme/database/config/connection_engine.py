"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the application:
- Builds a SQLAlchemy connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- Uses `URL.create(...)` to keep configuration environment-driven.
- SQLite connections are opened with ``check_same_thread=False`` because
  FastAPI runs sync endpoints in a worker thread pool, and pysqlite's own
  transaction handling is disabled so that SAVEPOINT works (SQLAlchemy's
  documented pysqlite recipe). The conversation registry and the rating
  aggregator both rely on savepoints.
- SQLite transactions start with ``BEGIN IMMEDIATE`` so concurrent writers
  queue on the database lock (up to ``SQLITE_BUSY_TIMEOUT`` seconds) instead
  of failing the lock upgrade mid-transaction. A queued caller then sees the
  committed state and takes the normal conflict branch.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData
from linkme.database.config.config import settings

# --------------------------------------------------------------------
# Construct the SQLAlchemy connection URL using values from Settings.
# --------------------------------------------------------------------
connection_url = URL.create(
    drivername=settings.DB_DRIVER_NAME,
    username=settings.DB_USERNAME,
    password=settings.DB_PASSWORD,
    host=settings.DB_HOST,
    port=settings.DB_PORT,
    database=settings.DB_DATABASE_NAME,
)
"""Constructs the SQLAlchemy connection URL using values from Settings."""

is_sqlite = connection_url.get_backend_name() == "sqlite"
"""True when the deployment uses the single-file SQLite store."""

# --------------------------------------------------------------------
# Engine object: core interface to the database.
# --------------------------------------------------------------------
connection_engine = create_engine(
    connection_url,
    connect_args={"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT} if is_sqlite else {},
)
"""Engine object: Core interface to the database.
Responsible for managing connections, executing SQL, and pooling.
"""

if is_sqlite:

    @event.listens_for(connection_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(connection_engine, "begin")
    def _emit_begin(conn):
        # writers serialize here; operations read before they write
        conn.exec_driver_sql("BEGIN IMMEDIATE")

# --------------------------------------------------------------------
# Metadata object: schema-level information shared across all models.
# --------------------------------------------------------------------
metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

# --------------------------------------------------------------------
# Declarative Base: root class for ORM models.
# --------------------------------------------------------------------
declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models.
All model classes should inherit from this to gain ORM features and automatic schema generation.
"""
