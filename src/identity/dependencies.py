"""FastAPI dependencies resolving the caller through the identity provider."""

from fastapi import Header
from shared.errors import Unauthenticated

from identity.provider import User, get_identity_provider


def current_user(authorization: str | None = Header(default=None)) -> User:
    """Return the authenticated user or raise Unauthenticated."""
    token = None
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        token = credentials.strip() if scheme.lower() == "bearer" else authorization.strip()

    user = get_identity_provider().get_current_user(token)
    if user is None:
        raise Unauthenticated()
    return user
