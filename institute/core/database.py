from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from .config import settings
from .exceptions import TransientStoreError
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================


def _engine_options(url: str) -> dict:
    """
    Pool and timeout options for the configured backend.

    SQLite has no server-side statement timeout, so only the busy timeout
    applies there. In-memory SQLite shares one connection across threads.
    """
    if url.startswith("sqlite"):
        options = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.DB_CONNECT_TIMEOUT,
            },
        }
        if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
            options["poolclass"] = StaticPool
        return options

    return {
        "poolclass": QueuePool,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
        "connect_args": {
            "connect_timeout": settings.DB_CONNECT_TIMEOUT,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO_SQL,
    **_engine_options(settings.DATABASE_URL),
)


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)

Base = declarative_base()


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Turn on foreign key enforcement for SQLite connections."""
    if settings.is_sqlite:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# =============================================================================
# DATABASE SESSION DEPENDENCY
# =============================================================================

def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI endpoints.

    Creates a session per request and closes it afterwards, even if the
    request failed.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a unit of work that commits once at the end.

    Every write issued inside the block is committed together or rolled back
    together. Connection loss and timeouts surface as TransientStoreError;
    any other error is re-raised unchanged after the rollback.

    Usage:
        with transaction(db):
            db.add(tx)
            db.execute(update(...))
    """
    try:
        yield db
        db.commit()
    except (OperationalError, PoolTimeoutError) as e:
        db.rollback()
        logger.error(f"Store unavailable, rolled back: {e}")
        raise TransientStoreError(str(e.orig) if isinstance(e, DBAPIError) else str(e)) from e
    except Exception:
        db.rollback()
        raise


@contextmanager
def store_errors() -> Iterator[None]:
    """Translate connection failures on plain reads into TransientStoreError."""
    try:
        yield
    except (OperationalError, PoolTimeoutError) as e:
        logger.error(f"Store unavailable: {e}")
        raise TransientStoreError(str(e.orig) if isinstance(e, DBAPIError) else str(e)) from e


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables():
    """
    Create all database tables defined in models.

    ⚠️ In production, prefer Alembic migrations.
    """
    from institute.models import certificate, course, fee_transaction, student  # noqa: F401

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables created successfully!")


def drop_database_tables():
    """
    Drop all database tables.

    ⚠️ DANGER: This will delete all data!
    """
    logger.warning("⚠️ Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("✅ Database tables dropped!")


def check_database_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful!")
        return True
    except (OperationalError, PoolTimeoutError) as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


def init_db():
    """
    Initialize database.
    Run this when starting the application.
    """
    logger.info("Initializing database...")

    if not check_database_connection():
        raise TransientStoreError("Cannot connect to database!")

    if settings.AUTO_CREATE_TABLES:
        create_database_tables()

    logger.info("✅ Database initialized successfully!")
