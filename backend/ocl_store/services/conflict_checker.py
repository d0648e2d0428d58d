"""Pre-write duplicate detection for versioned resources.

A read-then-decide guard: it rejects the common duplicate early but is not
the linearization point. Two concurrent writers can both pass it; the
enclosing transaction and any store-level constraint decide the race.
"""

import logging

from sqlalchemy.orm import Session

from ocl_store.core.exceptions import InternalError, VersionConflictError
from ocl_store.schemas.base import ResourceType
from ocl_store.services.repositories import SourceRepository

logger = logging.getLogger(__name__)


def _resource_type_name(resource_type: str) -> str:
    if resource_type != ResourceType.CODESYSTEM.value:
        raise InternalError("Invalid resource type.")
    return ResourceType.CODESYSTEM.value


class ConflictChecker:
    """Owner-scoped identity checks against existing sources."""

    def __init__(self, session: Session) -> None:
        self._sources = SourceRepository(session)

    def check_id_conflict(
        self,
        username: str | None,
        org: str | None,
        resource_id: str,
        version: str,
        resource_type: str,
    ) -> None:
        """Reject a write whose (resource_id, version) already exists under the user or org.

        Raises:
            VersionConflictError: If a matching source exists for the owner.
            InternalError: If the resource type is not supported.
        """
        resource_type = _resource_type_name(resource_type)

        user_source = self._sources.find_first_by_mnemonic_and_version_and_username(
            resource_id, version, username
        )
        org_source = self._sources.find_first_by_mnemonic_and_version_and_organization(
            resource_id, version, org
        )
        if user_source is not None or org_source is not None:
            logger.warning(f"Rejected duplicate {resource_type} {resource_id} version {version}")
            raise VersionConflictError(
                f"The {resource_type} {resource_id} of version {version} already exists."
            )

    def check_canonical_url_conflict(
        self,
        username: str | None,
        org: str | None,
        url: str,
        version: str,
        resource_type: str,
    ) -> None:
        """Reject a write whose (canonical url, version) already exists under the user or org."""
        resource_type = _resource_type_name(resource_type)

        user_source = self._sources.find_first_by_canonical_url_and_version_and_username(
            url, version, username
        )
        org_source = self._sources.find_first_by_canonical_url_and_version_and_organization(
            url, version, org
        )
        if user_source is not None or org_source is not None:
            logger.warning(f"Rejected duplicate {resource_type} url {url} version {version}")
            raise VersionConflictError(
                f"The {resource_type} of canonical url {url} and version {version} already exists."
            )
