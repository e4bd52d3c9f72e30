"""Tests for the fake identity provider and the current-user dependency."""

import pytest
from identity.demo import DEMO_USERS, register_demo_users
from identity.dependencies import current_user
from identity.provider import FakeIdentityProvider, IdentityProvider, Role, User, get_identity_provider
from shared.errors import Unauthenticated


class TestFakeIdentityProvider:
    def test_register_returns_token_resolving_to_user(self):
        provider = FakeIdentityProvider()
        token = provider.register("u-1", "u1@test.com", Role.SELLER)

        assert provider.get_current_user(token) == User(id="u-1", email="u1@test.com", role=Role.SELLER)

    def test_register_with_fixed_token(self):
        provider = FakeIdentityProvider()
        assert provider.register("u-1", "u1@test.com", token="fixed") == "fixed"

    def test_default_role_is_buyer(self):
        provider = FakeIdentityProvider()
        provider.register("u-1", "u1@test.com")
        assert provider.require_role("u-1") == Role.BUYER

    @pytest.mark.parametrize("token", [None, "", "unknown"])
    def test_unknown_token_resolves_to_nobody(self, token):
        assert FakeIdentityProvider().get_current_user(token) is None

    def test_require_role_of_unknown_user(self):
        with pytest.raises(Unauthenticated):
            FakeIdentityProvider().require_role("nobody")

    def test_is_an_identity_provider(self):
        assert isinstance(get_identity_provider(), IdentityProvider)


class TestCurrentUserDependency:
    def test_bearer_token(self, identity, seller):
        assert current_user(authorization="Bearer seller-token").id == seller

    def test_bare_token(self, identity, seller):
        assert current_user(authorization="seller-token").id == seller

    @pytest.mark.parametrize("header", [None, "Bearer wrong", "Bearer "])
    def test_missing_or_bad_token(self, identity, header):
        with pytest.raises(Unauthenticated):
            current_user(authorization=header)


class TestDemoUsers:
    def test_demo_users_registered_with_fixed_tokens(self, identity):
        tokens = register_demo_users()

        assert set(tokens) == {user["email"] for user in DEMO_USERS}
        assert identity.get_current_user("demo-seller-token").role == Role.SELLER
        assert identity.require_role("demo-admin") == Role.ADMIN

    def test_demo_users_need_the_fake_provider(self):
        class OtherProvider(IdentityProvider):
            def get_current_user(self, token):
                return None

            def require_role(self, user_id):
                raise Unauthenticated()

        with pytest.raises(TypeError):
            register_demo_users(OtherProvider())
