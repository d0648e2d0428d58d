"""Batched multi-table persistence of concept graphs.

Writes a code system's concepts, their localized names and descriptions,
and the link rows tying them together. Two statement shapes are kept
apart on purpose:

1. ``insert_rows_sequential``: one INSERT per row, returning the
   store-generated key of each row in input order. Needed whenever a
   later statement references the new row.
2. ``insert_rows_batched``: a single executemany round trip, no keys
   returned. Used for link tables once both endpoints have ids.

The engine never opens or commits a transaction. A failure partway
through ``insert_concept_graph`` leaves earlier rows in place unless the
caller wraps the whole call in one transaction (see
``CodeSystemWriter``).
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import Table, bindparam, insert, update
from sqlalchemy.orm import Session

from ocl_store.core.exceptions import InternalError
from ocl_store.models import (
    Concept,
    ConceptsDescription,
    ConceptsName,
    ConceptsSource,
    LocalizedText,
    Source,
    UserProfile,
)
from ocl_store.models.source import utcnow

logger = logging.getLogger(__name__)

CONCEPTS = Concept.__table__
LOCALIZED_TEXTS = LocalizedText.__table__
CONCEPTS_NAMES = ConceptsName.__table__
CONCEPTS_DESCRIPTIONS = ConceptsDescription.__table__
CONCEPTS_SOURCES = ConceptsSource.__table__

# (child column, parent column) for every two-column link table
LINK_COLUMNS: dict[str, tuple[str, str]] = {
    CONCEPTS_NAMES.name: ("localizedtext_id", "concept_id"),
    CONCEPTS_DESCRIPTIONS.name: ("localizedtext_id", "concept_id"),
    CONCEPTS_SOURCES.name: ("concept_id", "source_id"),
}

_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


@dataclass(frozen=True)
class GeneratedId:
    """A store-assigned primary key, widened to a signed 64-bit integer."""

    value: int

    @classmethod
    def from_key(cls, key: Any) -> "GeneratedId":
        """Widen whatever numeric type the driver returned.

        Raises:
            InternalError: If the store returned no key or a non-integral one.
        """
        if key is None:
            raise InternalError("The store did not return a generated key for the inserted row.")
        try:
            value = int(key)
        except (TypeError, ValueError, OverflowError) as e:
            raise InternalError(f"Generated key {key!r} is not an integer.") from e
        if isinstance(key, bool) or value != key:
            raise InternalError(f"Generated key {key!r} is not an integer.")
        if not _MIN_ID <= value <= _MAX_ID:
            raise InternalError(f"Generated key {value} does not fit in 64 bits.")
        return cls(value)

    def __int__(self) -> int:
        return self.value


@dataclass
class LocalizedTextRecord:
    """A name or description to be written to localized_texts."""

    name: str
    locale: str
    type: str | None = None
    locale_preferred: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def to_row(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "locale": self.locale,
            "locale_preferred": self.locale_preferred,
            "created_at": self.created_at,
        }


@dataclass
class ConceptRecord:
    """A concept to be written under an already persisted parent source.

    ``names`` and ``descriptions`` may contain None entries; those are
    skipped and never linked. ``parent``, ``created_by`` and ``updated_by``
    must be set before the record is inserted.
    """

    mnemonic: str
    name: str | None = None
    full_name: str | None = None
    default_locale: str | None = None
    concept_class: str | None = None
    datatype: str | None = None
    version: str | None = None
    uri: str | None = None
    public_access: str | None = None
    is_active: bool = True
    released: bool = False
    retired: bool = False
    is_latest_version: bool = True
    comment: str | None = None
    extras: dict | None = None
    names: list[LocalizedTextRecord | None] = field(default_factory=list)
    descriptions: list[LocalizedTextRecord | None] = field(default_factory=list)
    parent: Source | None = None
    created_by: UserProfile | None = None
    updated_by: UserProfile | None = None

    def to_row(self) -> dict[str, Any]:
        # Timestamps are taken from the parent source, not the concept.
        return {
            "public_access": self.public_access,
            "is_active": self.is_active,
            "extras": self.extras,
            "uri": self.uri,
            "mnemonic": self.mnemonic,
            "version": self.version,
            "released": self.released,
            "retired": self.retired,
            "is_latest_version": self.is_latest_version,
            "name": self.name,
            "full_name": self.full_name,
            "default_locale": self.default_locale,
            "concept_class": self.concept_class,
            "datatype": self.datatype,
            "comment": self.comment,
            "created_by_id": self.created_by.id,
            "updated_by_id": self.updated_by.id,
            "parent_id": self.parent.id,
            "created_at": self.parent.created_at,
            "updated_at": self.parent.updated_at,
        }


def _as_int(value: GeneratedId | int) -> int:
    return int(value)


class BatchPersistenceEngine:
    """Writes concept graphs and link rows through the given session.

    Usage:
        engine = BatchPersistenceEngine(session)
        with session.begin():
            ids = engine.insert_concept_graph(concepts)
            engine.bump_concept_versions(ids)
            engine.link_concepts_to_source(ids, source.id)
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _insert(self, table: Table, row: dict[str, Any]) -> GeneratedId:
        result = self._session.execute(insert(table).values(row))
        primary_key = result.inserted_primary_key
        return GeneratedId.from_key(primary_key[0] if primary_key else None)

    def insert_rows_sequential(
        self, table: Table, rows: Sequence[dict[str, Any]]
    ) -> list[GeneratedId]:
        """Insert rows one statement at a time, returning their keys in input order."""
        return [self._insert(table, row) for row in rows]

    def insert_rows_batched(self, table: Table, rows: Sequence[dict[str, Any]]) -> None:
        """Insert all rows in one executemany round trip; no-op for empty input."""
        if not rows:
            return
        self._session.execute(insert(table), list(rows))
        logger.debug(f"Batch inserted {len(rows)} row(s) into {table.name}")

    def insert_localized_texts(self, texts: Sequence[LocalizedTextRecord]) -> list[GeneratedId]:
        """Insert localized texts; the i-th id belongs to the i-th text."""
        return self.insert_rows_sequential(LOCALIZED_TEXTS, [t.to_row() for t in texts])

    def link_rows(
        self,
        table: Table,
        pairs: Sequence[tuple[GeneratedId | int, GeneratedId | int]],
    ) -> None:
        """Batch insert (child id, parent id) pairs into a two-column link table."""
        if table.name not in LINK_COLUMNS:
            raise InternalError(f"{table.name} is not a link table.")
        child_column, parent_column = LINK_COLUMNS[table.name]
        self.insert_rows_batched(
            table,
            [
                {child_column: _as_int(child), parent_column: _as_int(parent)}
                for child, parent in pairs
            ],
        )

    def _insert_texts_and_link(
        self,
        texts: list[LocalizedTextRecord | None],
        link_table: Table,
        concept_id: GeneratedId,
    ) -> None:
        present = [t for t in texts if t is not None]
        if not present:
            return
        text_ids = self.insert_localized_texts(present)
        self.link_rows(link_table, [(text_id, concept_id) for text_id in text_ids])

    def insert_concept_graph(self, concepts: Sequence[ConceptRecord]) -> list[GeneratedId]:
        """Insert concepts with their names and descriptions, in input order.

        Each concept's link rows need its freshly generated id, so concepts
        are processed one after another.

        Returns:
            The generated concept ids, aligned with ``concepts``.
        """
        concept_ids: list[GeneratedId] = []
        for concept in concepts:
            concept_id = self._insert(CONCEPTS, concept.to_row())
            self._insert_texts_and_link(concept.names, CONCEPTS_NAMES, concept_id)
            self._insert_texts_and_link(concept.descriptions, CONCEPTS_DESCRIPTIONS, concept_id)
            concept_ids.append(concept_id)

        logger.debug(f"Inserted concept graph of {len(concept_ids)} concept(s)")
        return concept_ids

    def bump_concept_versions(self, concept_ids: Iterable[GeneratedId | int]) -> None:
        """Set each concept's version to its own id, in one batched UPDATE."""
        params = [{"b_id": _as_int(i), "b_version": str(_as_int(i))} for i in concept_ids]
        if not params:
            return
        stmt = (
            update(CONCEPTS)
            .where(CONCEPTS.c.id == bindparam("b_id"))
            .values(version=bindparam("b_version"))
        )
        self._session.execute(stmt, params)
        logger.debug(f"Bumped version of {len(params)} concept(s)")

    def link_concepts_to_source(
        self, concept_ids: Sequence[GeneratedId | int], source_id: GeneratedId | int
    ) -> None:
        """Link every concept to the source, in one batched INSERT."""
        self.link_rows(CONCEPTS_SOURCES, [(concept_id, source_id) for concept_id in concept_ids])
