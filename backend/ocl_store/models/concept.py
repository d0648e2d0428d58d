"""SQLAlchemy models for concepts, localized texts and their link tables.

Rows in these tables are written through the batch persistence engine with
Core statements; the mapped classes define the schema and serve reads.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ocl_store.core.database import Base, IdType
from ocl_store.models.source import JsonType, utcnow


class Concept(Base):
    """A concept belonging to exactly one Source (its parent)."""

    __tablename__ = "concepts"

    mnemonic: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    version: Mapped[str | None] = mapped_column(String(255), nullable=True)
    uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    default_locale: Mapped[str | None] = mapped_column(String(20), nullable=True)
    concept_class: Mapped[str | None] = mapped_column(String(255), nullable=True)
    datatype: Mapped[str | None] = mapped_column(String(255), nullable=True)
    public_access: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    released: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    retired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_latest_version: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    extras: Mapped[dict | None] = mapped_column(JsonType, nullable=True)

    created_by_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("user_profiles.id"),
        nullable=False,
    )
    updated_by_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("user_profiles.id"),
        nullable=False,
    )
    parent_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("sources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Copied from the parent source at insert time
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Concept(id={self.id}, mnemonic='{self.mnemonic}', version='{self.version}')>"


class LocalizedText(Base):
    """A name or description fragment in one locale.

    Stored independently of its concept so the same row id can be linked
    from either concepts_names or concepts_descriptions.
    """

    __tablename__ = "localized_texts"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    locale: Mapped[str] = mapped_column(String(20), nullable=False)
    locale_preferred: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<LocalizedText(id={self.id}, locale='{self.locale}', name='{self.name}')>"


class ConceptsName(Base):
    """Link row: a localized text used as a concept name."""

    __tablename__ = "concepts_names"

    concept_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("concepts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    localizedtext_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("localized_texts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class ConceptsDescription(Base):
    """Link row: a localized text used as a concept description."""

    __tablename__ = "concepts_descriptions"

    concept_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("concepts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    localizedtext_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("localized_texts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class ConceptsSource(Base):
    """Link row: a concept batch-inserted under a source."""

    __tablename__ = "concepts_sources"

    concept_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("concepts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    source_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("sources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
