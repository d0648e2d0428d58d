"""Audit logging for authentication and write operations.

Provides logging for:
- Authentication and authorization outcomes
- Resource creation (code systems and their concepts)

This audit log should be shipped to an append-only store in production.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

# Separate audit logger for security-critical events
audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """Types of auditable actions."""

    CREATE = "create"
    AUTH_SUCCESS = "auth_success"
    AUTH_FAILURE = "auth_failure"


class AuditEvent(BaseModel):
    """Audit event record."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: AuditAction = Field(..., description="Type of action performed")
    resource_type: str = Field(..., description="Type of resource accessed")
    resource_id: str | None = Field(None, description="ID of specific resource")
    owner: str | None = Field(None, description="Organization or user owning the resource")
    username: str | None = Field(None, description="User who performed action")
    details: dict | None = Field(None, description="Additional context")
    success: bool = Field(True, description="Whether action succeeded")


def log_audit(
    action: AuditAction,
    resource_type: str,
    resource_id: str | None = None,
    owner: str | None = None,
    username: str | None = None,
    details: dict | None = None,
    success: bool = True,
) -> AuditEvent:
    """Log an audit event.

    Args:
        action: Type of action being audited
        resource_type: The type of resource being accessed
        resource_id: Specific resource identifier
        owner: Owner mnemonic or username the action targets
        username: User performing the action
        details: Additional context
        success: Whether the action succeeded

    Returns:
        The created AuditEvent
    """
    event = AuditEvent(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        owner=owner,
        username=username,
        details=details,
        success=success,
    )

    log_level = logging.INFO if success else logging.WARNING
    audit_logger.log(
        log_level,
        f"AUDIT: {action.value} {resource_type}"
        f"{f'/{resource_id}' if resource_id else ''}"
        f"{f' owner={owner}' if owner else ''}"
        f" success={success}",
        extra={"audit_event": event.model_dump()},
    )

    return event


def log_auth_event(
    success: bool,
    username: str | None = None,
    owner: str | None = None,
    reason: str | None = None,
) -> AuditEvent:
    """Log an authentication or authorization outcome."""
    action = AuditAction.AUTH_SUCCESS if success else AuditAction.AUTH_FAILURE
    details = {"reason": reason} if reason else None

    return log_audit(
        action=action,
        resource_type="auth",
        owner=owner,
        username=username,
        details=details,
        success=success,
    )


def log_resource_create(
    resource_type: str,
    resource_id: str,
    owner: str,
    username: str | None = None,
    concept_count: int = 0,
) -> AuditEvent:
    """Log the creation of a resource and the number of concepts written with it."""
    return log_audit(
        action=AuditAction.CREATE,
        resource_type=resource_type,
        resource_id=resource_id,
        owner=owner,
        username=username,
        details={"concept_count": concept_count},
    )
