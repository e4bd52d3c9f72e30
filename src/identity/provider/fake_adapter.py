"""In-process identity provider for development and testing.

Users are registered at runtime together with an optional session token.
Requests then authenticate with ``Authorization: Bearer <token>``.
"""

from uuid import uuid4

from shared.errors import Unauthenticated

from identity.provider.port import IdentityProvider, Role, User


class FakeIdentityProvider(IdentityProvider):
    """Configurable fake identity provider."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.tokens: dict[str, str] = {}

    def register(self, user_id: str, email: str, role: Role = Role.BUYER, token: str | None = None) -> str:
        """Register a user and return the session token that identifies them."""
        self.users[user_id] = User(id=user_id, email=email, role=role)
        token = token or f"fake_session_{uuid4().hex[:16]}"
        self.tokens[token] = user_id
        return token

    def get_current_user(self, token: str | None) -> User | None:
        if not token:
            return None
        user_id = self.tokens.get(token)
        if user_id is None:
            return None
        return self.users.get(user_id)

    def require_role(self, user_id: str) -> Role:
        user = self.users.get(str(user_id))
        if user is None:
            raise Unauthenticated()
        return user.role
