"""Core application configuration and utilities."""

from ocl_store.core.audit import AuditAction, AuditEvent, log_audit, log_auth_event, log_resource_create
from ocl_store.core.config import settings
from ocl_store.core.database import Base, get_sync_engine, init_db, session_scope
from ocl_store.core.exceptions import (
    InternalError,
    InvalidRequestError,
    NotFoundError,
    OclFhirError,
    UnauthenticatedError,
    UnauthorizedError,
    VersionConflictError,
)

__all__ = [
    # Config
    "settings",
    # Database
    "Base",
    "get_sync_engine",
    "init_db",
    "session_scope",
    # Errors
    "OclFhirError",
    "UnauthenticatedError",
    "UnauthorizedError",
    "InvalidRequestError",
    "NotFoundError",
    "VersionConflictError",
    "InternalError",
    # Audit
    "AuditAction",
    "AuditEvent",
    "log_audit",
    "log_auth_event",
    "log_resource_create",
]
