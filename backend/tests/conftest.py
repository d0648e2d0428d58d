"""Pytest configuration and fixtures for backend tests."""

from collections.abc import Generator
from dataclasses import dataclass, field

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ocl_store.core.database import Base
from ocl_store.models import AuthToken, Organization, Source, UserProfile, UserProfilesOrganization

_test_engine = create_engine(
    "sqlite:///:memory:",
    echo=False,
    future=True,
)
_TestSession = sessionmaker(
    bind=_test_engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


@pytest.fixture
def engine() -> Engine:
    return _test_engine


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a database session with all tables, dropped again afterwards."""
    Base.metadata.create_all(bind=_test_engine)

    session = _TestSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=_test_engine)


@dataclass
class Principals:
    alice: UserProfile
    bob: UserProfile
    acme: Organization
    alice_token: AuthToken
    bob_token: AuthToken


@pytest.fixture
def principals(db_session: Session) -> Principals:
    """Seed two users with one token each; alice is a member of acme, bob is not."""
    alice = UserProfile(username="alice", email="alice@example.org")
    bob = UserProfile(username="bob", email="bob@example.org")
    acme = Organization(mnemonic="acme", name="Acme Health")
    alice_token = AuthToken(key="abc123", user_profile=alice)
    bob_token = AuthToken(key="bob456", user_profile=bob)
    db_session.add_all([alice, bob, acme, alice_token, bob_token])
    db_session.flush()
    db_session.add(UserProfilesOrganization(user_profile=alice, organization=acme))
    db_session.commit()
    return Principals(alice=alice, bob=bob, acme=acme, alice_token=alice_token, bob_token=bob_token)


@pytest.fixture
def make_source():
    """Factory for transient sources; owner and audit ids are set by the caller."""

    def _make_source(
        mnemonic: str = "123",
        version: str = "1.0",
        canonical_url: str | None = "http://example.org/fhir/CodeSystem/123",
        **kwargs,
    ) -> Source:
        return Source(mnemonic=mnemonic, version=version, canonical_url=canonical_url, **kwargs)

    return _make_source


@dataclass
class StatementLog:
    """Statements seen by the engine, as (sql, executemany, parameter count)."""

    entries: list[tuple[str, bool, int]] = field(default_factory=list)

    def inserts_into(self, table: str) -> list[tuple[str, bool, int]]:
        return [e for e in self.entries if e[0].startswith(f"INSERT INTO {table} ")]

    def updates_of(self, table: str) -> list[tuple[str, bool, int]]:
        return [e for e in self.entries if e[0].startswith(f"UPDATE {table} ")]


@pytest.fixture
def statement_log(engine: Engine) -> Generator[StatementLog, None, None]:
    """Record every cursor execution on the test engine."""
    log = StatementLog()

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        count = len(parameters) if executemany else 1
        log.entries.append((statement, executemany, count))

    event.listen(engine, "before_cursor_execute", before_cursor_execute)
    yield log
    event.remove(engine, "before_cursor_execute", before_cursor_execute)
