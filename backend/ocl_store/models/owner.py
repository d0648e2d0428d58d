"""SQLAlchemy models for principals: organizations, users, tokens and memberships."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ocl_store.core.database import Base, IdType


class Organization(Base):
    """An organization owning sources, addressed by its short mnemonic."""

    __tablename__ = "organizations"

    mnemonic: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    memberships = relationship(
        "UserProfilesOrganization",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, mnemonic='{self.mnemonic}')>"


class UserProfile(Base):
    """An individual user, addressed by username."""

    __tablename__ = "user_profiles"

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    auth_tokens = relationship(
        "AuthToken",
        back_populates="user_profile",
        cascade="all, delete-orphan",
    )
    memberships = relationship(
        "UserProfilesOrganization",
        back_populates="user_profile",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<UserProfile(id={self.id}, username='{self.username}')>"


class AuthToken(Base):
    """An opaque API token owned by exactly one user.

    Created and revoked by the identity subsystem; only read here.
    """

    __tablename__ = "authtoken_token"

    key: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        unique=True,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user_profile = relationship("UserProfile", back_populates="auth_tokens")

    def __repr__(self) -> str:
        return f"<AuthToken(id={self.id}, user_id={self.user_id})>"


class UserProfilesOrganization(Base):
    """Membership edge between a user and an organization."""

    __tablename__ = "user_profiles_organizations"

    userprofile_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organization_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_profile = relationship("UserProfile", back_populates="memberships")
    organization = relationship("Organization", back_populates="memberships")

    def __repr__(self) -> str:
        return (
            f"<UserProfilesOrganization(userprofile_id={self.userprofile_id}, "
            f"organization_id={self.organization_id})>"
        )
