"""Tests for owner-scoped duplicate detection."""

import pytest
from sqlalchemy.orm import Session

from ocl_store.core.exceptions import InternalError, VersionConflictError
from ocl_store.schemas.base import ResourceType
from ocl_store.services.conflict_checker import ConflictChecker

CODESYSTEM = ResourceType.CODESYSTEM.value
URL = "http://example.org/fhir/CodeSystem/123"


@pytest.fixture
def checker(db_session: Session) -> ConflictChecker:
    return ConflictChecker(db_session)


@pytest.fixture
def existing_sources(db_session: Session, principals, make_source) -> None:
    """alice owns 123 v1.0; acme owns 456 v1.0."""
    alice = principals.alice
    db_session.add_all(
        [
            make_source(
                "123", "1.0", URL,
                user_id=alice.id, created_by_id=alice.id, updated_by_id=alice.id,
            ),
            make_source(
                "456", "1.0", "http://example.org/fhir/CodeSystem/456",
                organization_id=principals.acme.id, created_by_id=alice.id, updated_by_id=alice.id,
            ),
        ]
    )
    db_session.commit()


class TestIdConflict:
    """Tests for check_id_conflict."""

    def test_same_user_id_and_version_conflicts(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        with pytest.raises(VersionConflictError) as exc_info:
            checker.check_id_conflict("alice", None, "123", "1.0", CODESYSTEM)
        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == "The CodeSystem 123 of version 1.0 already exists."

    def test_new_version_does_not_conflict(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        checker.check_id_conflict("alice", None, "123", "2.0", CODESYSTEM)

    def test_same_org_id_and_version_conflicts(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        with pytest.raises(VersionConflictError):
            checker.check_id_conflict(None, "acme", "456", "1.0", CODESYSTEM)

    def test_other_owner_does_not_conflict(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        checker.check_id_conflict("bob", None, "123", "1.0", CODESYSTEM)
        checker.check_id_conflict(None, "acme", "123", "1.0", CODESYSTEM)
        checker.check_id_conflict("alice", None, "456", "1.0", CODESYSTEM)

    def test_either_scope_is_enough_to_conflict(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        with pytest.raises(VersionConflictError):
            checker.check_id_conflict("bob", "acme", "456", "1.0", CODESYSTEM)

    def test_accepts_enum_resource_type(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        with pytest.raises(VersionConflictError):
            checker.check_id_conflict("alice", None, "123", "1.0", ResourceType.CODESYSTEM)

    def test_unknown_resource_type_raises_internal_error(self, checker: ConflictChecker) -> None:
        with pytest.raises(InternalError, match="Invalid resource type") as exc_info:
            checker.check_id_conflict("alice", None, "123", "1.0", "ValueSet")
        assert exc_info.value.status_code == 500


class TestCanonicalUrlConflict:
    """Tests for check_canonical_url_conflict."""

    def test_same_user_url_and_version_conflicts(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        with pytest.raises(VersionConflictError, match="canonical url"):
            checker.check_canonical_url_conflict("alice", None, URL, "1.0", CODESYSTEM)

    def test_new_version_does_not_conflict(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        checker.check_canonical_url_conflict("alice", None, URL, "1.1", CODESYSTEM)

    def test_other_owner_does_not_conflict(
        self, checker: ConflictChecker, existing_sources
    ) -> None:
        checker.check_canonical_url_conflict(None, "acme", URL, "1.0", CODESYSTEM)

    def test_unknown_resource_type_raises_internal_error(self, checker: ConflictChecker) -> None:
        with pytest.raises(InternalError):
            checker.check_canonical_url_conflict("alice", None, URL, "1.0", "ConceptMap")
