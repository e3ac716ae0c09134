"""
Database configuration with connection pooling.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool

from models.config import settings


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """
    Let SQLAlchemy own transaction boundaries on a pysqlite engine.

    The driver's implicit BEGIN handling breaks SAVEPOINTs, which topic
    and system user creation rely on.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_db_engine(database_url: str | None = None):
    """
    Create database engine with appropriate configuration.

    Uses QueuePool for PostgreSQL/production and NullPool for SQLite.
    NullPool creates a new connection per unit of work, avoiding SQLite
    locking issues under concurrency.
    """
    url = database_url or settings.DATABASE_URL

    if url.startswith("sqlite"):
        return enable_sqlite_savepoints(
            create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=NullPool,
            )
        )

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,  # Verify connections before use
    )


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
