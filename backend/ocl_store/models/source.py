"""SQLAlchemy model for Source (a persisted FHIR CodeSystem)."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ocl_store.core.database import Base, IdType
from ocl_store.schemas.base import PublicAccess

JsonType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(UTC)


class Source(Base):
    """A versioned terminology source owned by an organization or a user.

    Identity within an owner's scope is (mnemonic, version) or
    (canonical_url, version). Uniqueness is checked before writing, not
    enforced by a constraint here.
    """

    __tablename__ = "sources"

    mnemonic: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    version: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    canonical_url: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    default_locale: Mapped[str] = mapped_column(String(20), nullable=False, default="en")
    public_access: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PublicAccess.VIEW.value,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    released: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    retired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_latest_version: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Flattened FHIR sub-structures, stored as JSON text
    identifier: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact: Mapped[str | None] = mapped_column(Text, nullable=True)
    jurisdiction: Mapped[str | None] = mapped_column(Text, nullable=True)
    extras: Mapped[dict | None] = mapped_column(JsonType, nullable=True)

    organization_id: Mapped[int | None] = mapped_column(
        IdType,
        ForeignKey("organizations.id"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(
        IdType,
        ForeignKey("user_profiles.id"),
        nullable=True,
        index=True,
    )
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
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    organization = relationship("Organization", foreign_keys=[organization_id])
    user = relationship("UserProfile", foreign_keys=[user_id])

    def __repr__(self) -> str:
        return f"<Source(id={self.id}, mnemonic='{self.mnemonic}', version='{self.version}')>"
