"""Error taxonomy for the CodeSystem write path.

Every error is a FastAPI ``HTTPException`` carrying the status code the
web layer should answer with, so callers can let them propagate as-is.
"""

from fastapi import HTTPException, status


class OclFhirError(HTTPException):
    """Base class for all write-path errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return self.detail


class UnauthenticatedError(OclFhirError):
    """Missing or invalid authentication token."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Token"})


class UnauthorizedError(OclFhirError):
    """Valid token, but the principal may not act as the requested owner."""

    status_code = status.HTTP_403_FORBIDDEN


class InvalidRequestError(OclFhirError):
    """Malformed request, such as an empty or contradictory owner."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(OclFhirError):
    """Referenced organization or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class VersionConflictError(OclFhirError):
    """A resource with the same identity and version already exists for the owner."""

    status_code = status.HTTP_409_CONFLICT


class InternalError(OclFhirError):
    """Unsupported resource type or a generated key that could not be retrieved."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
