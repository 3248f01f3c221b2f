# fleet/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL in production; SQLite is accepted for
local runs and tests. Services build their own unit of work on top of the
session (see fleet.services.transaction). All models are auto-imported here so
create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fleet.config import settings


def build_engine(url: str):
    """
    Create an engine for `url`.

    SQLite gets a 30s busy timeout so concurrent writers queue instead of
    failing, and enforces foreign keys. The driver only opens a transaction
    at the first write, so plain reads never hold the database lock.
    """
    if not url.startswith("sqlite"):
        return create_engine(
            url,
            pool_pre_ping=True,          # Auto-reconnect if DB connection drops
            pool_size=10,
            max_overflow=20,
            echo=False,                  # Set True to log all SQL queries (debug only)
        )

    kwargs = {"connect_args": {"check_same_thread": False, "timeout": 30}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool     # one shared in-memory database
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from fleet.models.vehicle import Vehicle          # noqa
    from fleet.models.client import Client            # noqa
    from fleet.models.assignment import Assignment    # noqa
    from fleet.models.user import User                # noqa

    Base.metadata.create_all(bind=bind or engine)
