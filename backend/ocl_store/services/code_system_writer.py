"""Authorized, conflict-checked creation of a CodeSystem and its concepts.

This is the transaction boundary for a CodeSystem write. The whole
pipeline runs inside one transaction, so a failure at any stage leaves
no source, concept, text or link row behind:

1. validate the token, require exactly one owner, resolve it, authorize the token's user
2. reject duplicates by (id, version) and (canonical url, version)
3. persist the source under its owner
4. insert the concept graph, bump concept versions, link concepts to the source
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from ocl_store.core.audit import log_resource_create
from ocl_store.core.exceptions import InvalidRequestError
from ocl_store.models import Organization, Source
from ocl_store.schemas.base import ResourceType
from ocl_store.services.access_control import AccessControlValidator, is_valid
from ocl_store.services.batch_persistence import (
    BatchPersistenceEngine,
    ConceptRecord,
    GeneratedId,
)
from ocl_store.services.conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


@dataclass
class CodeSystemWriteRequest:
    """A CodeSystem already mapped to a transient Source and concept records.

    Exactly one of ``org`` and ``username`` names the owner.
    """

    auth_header: str | None
    source: Source
    concepts: list[ConceptRecord] = field(default_factory=list)
    org: str | None = None
    username: str | None = None


@dataclass
class WriteResult:
    """Generated ids of a completed write."""

    source_id: GeneratedId
    concept_ids: list[GeneratedId]


class CodeSystemWriter:
    """Runs the CodeSystem write pipeline on one session.

    Usage:
        with session_scope() as session:
            result = CodeSystemWriter(session).write(request)
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._validator = AccessControlValidator(session)
        self._checker = ConflictChecker(session)
        self._engine = BatchPersistenceEngine(session)

    def write(self, request: CodeSystemWriteRequest) -> WriteResult:
        """Write the request atomically.

        Joins the caller's transaction as a savepoint when one is already
        open on the session.
        """
        if self._session.in_transaction():
            transaction = self._session.begin_nested()
        else:
            transaction = self._session.begin()
        with transaction:
            return self._write(request)

    def _write(self, request: CodeSystemWriteRequest) -> WriteResult:
        org, username = request.org, request.username
        token = self._validator.validate_token(request.auth_header)
        if is_valid(org) and is_valid(username):
            raise InvalidRequestError("Owner must be either an organization or a user, not both.")
        if not is_valid(org) and not is_valid(username):
            raise InvalidRequestError("Owner can not be empty.")

        owner = self._validator.resolve_owner(org, username)
        self._validator.authorize(token, username, org)

        source = request.source
        resource_type = ResourceType.CODESYSTEM.value
        self._checker.check_id_conflict(username, org, source.mnemonic, source.version, resource_type)
        if is_valid(source.canonical_url):
            self._checker.check_canonical_url_conflict(
                username, org, source.canonical_url, source.version, resource_type
            )

        acting_user = token.user_profile
        if isinstance(owner, Organization):
            source.organization_id = owner.id
        else:
            source.user_id = owner.id
        source.created_by_id = acting_user.id
        source.updated_by_id = acting_user.id
        self._session.add(source)
        self._session.flush()
        source_id = GeneratedId.from_key(source.id)
        logger.info(f"Created {resource_type} {source.mnemonic} version {source.version} (id={source_id.value})")

        for concept in request.concepts:
            concept.parent = source
            concept.created_by = concept.created_by or acting_user
            concept.updated_by = concept.updated_by or acting_user

        concept_ids = self._engine.insert_concept_graph(request.concepts)
        self._engine.bump_concept_versions(concept_ids)
        self._engine.link_concepts_to_source(concept_ids, source_id)
        logger.info(f"Wrote {len(concept_ids)} concept(s) for {resource_type} {source.mnemonic}")

        log_resource_create(
            resource_type=resource_type,
            resource_id=f"{source.mnemonic}/{source.version}",
            owner=org if is_valid(org) else username,
            username=acting_user.username,
            concept_count=len(concept_ids),
        )
        return WriteResult(source_id=source_id, concept_ids=concept_ids)
