"""Identity provider port (abstract interface).

Authentication itself lives outside the marketplace. The core only needs to
resolve the caller behind a session token and to look up a user's role.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    """The authenticated caller."""

    id: str
    email: str
    role: Role = Role.BUYER


class IdentityProvider(ABC):
    """Abstract identity provider interface."""

    @abstractmethod
    def get_current_user(self, token: str | None) -> User | None:
        """Return the user owning the session token, or None when anonymous."""
        ...

    @abstractmethod
    def require_role(self, user_id: str) -> Role:
        """Return the role of a known user.

        Raises ``shared.errors.Unauthenticated`` for unknown users.
        """
        ...
