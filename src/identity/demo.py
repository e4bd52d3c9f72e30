"""Demo accounts for local development and load testing.

Registered into the fake identity provider when MARKETPLACE_DEMO is enabled.
Each account authenticates with a fixed bearer token.
"""

from identity.provider import FakeIdentityProvider, Role, get_identity_provider

DEMO_USERS = [
    {"user_id": "demo-buyer", "email": "buyer@test.com", "role": Role.BUYER, "token": "demo-buyer-token"},
    {"user_id": "demo-seller", "email": "seller@test.com", "role": Role.SELLER, "token": "demo-seller-token"},
    {"user_id": "demo-admin", "email": "admin@test.com", "role": Role.ADMIN, "token": "demo-admin-token"},
]


def register_demo_users(provider: FakeIdentityProvider | None = None) -> dict[str, str]:
    """Register the demo accounts and return a mapping of email to token."""
    provider = provider or get_identity_provider()
    if not isinstance(provider, FakeIdentityProvider):
        raise TypeError("Demo users can only be registered with the fake identity provider")

    return {user["email"]: provider.register(**user) for user in DEMO_USERS}
