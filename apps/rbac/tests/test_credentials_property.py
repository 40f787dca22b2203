"""
Property-based tests for the credential store and token service.

Property: for any username, password and role, a created user verifies
with the same password and fails with any other; a token issued for the
user verifies to the same id and role.
"""
import pytest
from hypothesis import given, strategies as st, settings, assume, HealthCheck

from apps.core.exceptions import InvalidCredentials
from apps.rbac.models import Role, User
from apps.rbac.services import TokenService, UserService


usernames = st.text(
    alphabet=st.characters(whitelist_categories=('Lu', 'Ll', 'Nd'), max_codepoint=0x7f),
    min_size=1,
    max_size=40,
)
passwords = st.text(
    alphabet=st.characters(blacklist_categories=('Cs', 'Cc')),
    min_size=1,
    max_size=64,
)
roles = st.sampled_from(Role.values)


@pytest.mark.django_db
class TestCredentialProperties:
    """Property-based tests for credentials and tokens."""

    @given(username=usernames, password=passwords, other=passwords, role=roles)
    @settings(
        max_examples=30,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture]
    )
    def test_create_then_verify(self, username, password, other, role):
        """
        Property: verify succeeds with the creating password only.
        """
        assume(password != other)

        user = UserService.create_user(username, password, role)
        try:
            assert UserService.verify_credentials(username, password) == user

            with pytest.raises(InvalidCredentials):
                UserService.verify_credentials(username, other)
        finally:
            User.objects.filter(id=user.id).delete()

    @given(username=usernames, role=roles)
    @settings(
        max_examples=30,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture]
    )
    def test_issue_then_verify_round_trip(self, username, role):
        """
        Property: verifying a fresh token returns the issuing user id and role.
        """
        user = User(username=username, role=role)

        claims = TokenService.verify(TokenService.issue(user))

        assert claims.user_id == user.id
        assert claims.role == role
        assert claims.username == username
