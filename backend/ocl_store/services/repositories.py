"""Read-only repositories over principals and sources.

Each repository wraps the session it is given; none of them write.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ocl_store.models import (
    AuthToken,
    Organization,
    Source,
    UserProfile,
    UserProfilesOrganization,
)


class OrganizationRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_mnemonic(self, mnemonic: str) -> Organization | None:
        stmt = select(Organization).where(Organization.mnemonic == mnemonic)
        return self._session.execute(stmt).scalar_one_or_none()


class UserRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_username(self, username: str) -> UserProfile | None:
        stmt = select(UserProfile).where(UserProfile.username == username)
        return self._session.execute(stmt).scalar_one_or_none()


class AuthTokenRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_key(self, key: str) -> AuthToken | None:
        stmt = (
            select(AuthToken)
            .options(selectinload(AuthToken.user_profile))
            .where(AuthToken.key == key)
        )
        return self._session.execute(stmt).scalar_one_or_none()


class MembershipRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_organization_mnemonic(self, mnemonic: str) -> list[UserProfilesOrganization]:
        """All membership edges of an organization, with members and their tokens loaded."""
        stmt = (
            select(UserProfilesOrganization)
            .join(Organization, UserProfilesOrganization.organization_id == Organization.id)
            .options(
                selectinload(UserProfilesOrganization.user_profile).selectinload(
                    UserProfile.auth_tokens
                )
            )
            .where(Organization.mnemonic == mnemonic)
        )
        return list(self._session.execute(stmt).scalars())


class SourceRepository:
    """Owner-scoped identity lookups for sources.

    A blank owner reference never matches, so a user-scoped lookup cannot
    see organization sources and vice versa.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_first_by_mnemonic_and_version_and_username(
        self, mnemonic: str, version: str, username: str | None
    ) -> Source | None:
        if not username:
            return None
        stmt = (
            select(Source)
            .join(UserProfile, Source.user_id == UserProfile.id)
            .where(Source.mnemonic == mnemonic)
            .where(Source.version == version)
            .where(UserProfile.username == username)
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def find_first_by_mnemonic_and_version_and_organization(
        self, mnemonic: str, version: str, org: str | None
    ) -> Source | None:
        if not org:
            return None
        stmt = (
            select(Source)
            .join(Organization, Source.organization_id == Organization.id)
            .where(Source.mnemonic == mnemonic)
            .where(Source.version == version)
            .where(Organization.mnemonic == org)
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def find_first_by_canonical_url_and_version_and_username(
        self, url: str, version: str, username: str | None
    ) -> Source | None:
        if not username:
            return None
        stmt = (
            select(Source)
            .join(UserProfile, Source.user_id == UserProfile.id)
            .where(Source.canonical_url == url)
            .where(Source.version == version)
            .where(UserProfile.username == username)
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def find_first_by_canonical_url_and_version_and_organization(
        self, url: str, version: str, org: str | None
    ) -> Source | None:
        if not org:
            return None
        stmt = (
            select(Source)
            .join(Organization, Source.organization_id == Organization.id)
            .where(Source.canonical_url == url)
            .where(Source.version == version)
            .where(Organization.mnemonic == org)
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()
