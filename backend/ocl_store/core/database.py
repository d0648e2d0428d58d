"""Database configuration and session management."""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import BigInteger, Engine, Integer, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from ocl_store.core.config import settings

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")

# Lazy initialized engine so importing models never needs a DB driver
_sync_engine: Engine | None = None


def get_sync_engine() -> Engine:
    """Get or create the sync engine.

    Lazily creates the engine on first use to avoid import errors
    when psycopg2 is not installed (e.g., in test environments).
    """
    global _sync_engine
    if _sync_engine is None:
        _sync_engine = create_engine(
            settings.database_url,
            echo=settings.debug,
            future=True,
        )
    return _sync_engine


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides the store-generated integer primary key shared by every table,
    link tables included.
    """

    id: Mapped[int] = mapped_column(
        IdType,
        primary_key=True,
        autoincrement=True,
    )


def get_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Build a session factory bound to the given engine (default: sync engine)."""
    return sessionmaker(
        bind=engine or get_sync_engine(),
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(engine: Engine | None = None) -> Generator[Session, None, None]:
    """Provide a session that commits on success and rolls back on error.

    Usage:
        with session_scope() as session:
            writer = CodeSystemWriter(session)
            ...
    """
    session = get_session_factory(engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """Create all tables.

    For development and tests only; the production schema is owned elsewhere.
    """
    Base.metadata.create_all(engine or get_sync_engine())
