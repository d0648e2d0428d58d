"""Token authentication and ownership authorization for write requests.

A write names exactly one owner, either an organization (by mnemonic) or
a user (by username). The caller presents an API token in the
``Authorization`` header as ``Token <secret>``. This module resolves the
owner, looks the token up and decides whether its user may act for that
owner.
"""

import logging
import re

from sqlalchemy.orm import Session

from ocl_store.core.audit import log_auth_event
from ocl_store.core.config import settings
from ocl_store.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    UnauthenticatedError,
    UnauthorizedError,
)
from ocl_store.models import AuthToken, Organization, UserProfile
from ocl_store.services.repositories import (
    AuthTokenRepository,
    MembershipRepository,
    OrganizationRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def is_valid(value: str | None) -> bool:
    """True for a non-None string with at least one non-whitespace character."""
    return value is not None and value.strip() != ""


def strip_token_scheme(raw: str, scheme: str | None = None) -> str:
    """Remove leading ``Token`` markers (any case, repeated) and surrounding whitespace."""
    marker = re.escape(scheme or settings.token_scheme)
    return re.sub(rf"^\s*(?:{marker}\s+)+", "", raw, flags=re.IGNORECASE).strip()


class AccessControlValidator:
    """Resolves owners, validates tokens and authorizes principals.

    Usage:
        validator = AccessControlValidator(session)
        owner = validator.resolve_owner(org, username)
        token = validator.validate_token(request.headers.get("Authorization"))
        validator.authorize(token, username, org)
    """

    def __init__(self, session: Session) -> None:
        self._organizations = OrganizationRepository(session)
        self._users = UserRepository(session)
        self._tokens = AuthTokenRepository(session)
        self._memberships = MembershipRepository(session)

    def resolve_owner(self, org: str | None, username: str | None) -> Organization | UserProfile:
        """Look up the owner of a write; an organization code wins over a username.

        Raises:
            NotFoundError: If the named organization or user does not exist.
        """
        if is_valid(org):
            organization = self._organizations.find_by_mnemonic(org)
            if organization is None:
                raise NotFoundError(f"The organization of id = {org} does not exist.")
            return organization

        user = self._users.find_by_username(username) if is_valid(username) else None
        if user is None:
            raise NotFoundError(f"The user of username = {username} does not exist.")
        return user

    def validate_token(self, raw: str | None) -> AuthToken | None:
        """Look up the token carried by a raw ``Authorization`` header value.

        Returns None when no token matches the key; ``authorize`` rejects that.

        Raises:
            UnauthenticatedError: If the header value is missing or blank.
        """
        if not is_valid(raw):
            logger.warning("Authentication token missing in request")
            log_auth_event(success=False, reason="token not provided")
            raise UnauthenticatedError("The authentication token is not provided.")
        return self._tokens.find_by_key(strip_token_scheme(raw))

    def authorize(self, token: AuthToken | None, username: str | None, org: str | None) -> None:
        """Check that the token's user may write on behalf of the owner.

        For a user owner the token must belong to that user. For an
        organization owner the token's user must be a member AND the member
        record must itself hold a token with the same key.

        Raises:
            UnauthenticatedError: If token is None.
            UnauthorizedError: If the token's user may not act for the owner.
            InvalidRequestError: If neither username nor org is given.
        """
        if token is None:
            log_auth_event(success=False, owner=org or username, reason="invalid token")
            raise UnauthenticatedError("Invalid authentication token.")

        token_username = token.user_profile.username
        if is_valid(username):
            if username != token_username:
                log_auth_event(
                    success=False,
                    username=token_username,
                    owner=username,
                    reason="token belongs to another user",
                )
                raise UnauthorizedError(
                    f"The {username} is not authorized to use the token provided."
                )
        elif is_valid(org):
            is_member = any(
                member.username == token_username
                and any(t.key == token.key for t in member.auth_tokens)
                for member in (
                    edge.user_profile
                    for edge in self._memberships.find_by_organization_mnemonic(org)
                )
            )
            if not is_member:
                log_auth_event(
                    success=False,
                    username=token_username,
                    owner=org,
                    reason="not a member",
                )
                raise UnauthorizedError(
                    f"The user {token_username} is not authorized to access {org} organization."
                )
        else:
            raise InvalidRequestError("Owner can not be empty.")

        log_auth_event(success=True, username=token_username, owner=username if is_valid(username) else org)
