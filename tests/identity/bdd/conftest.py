"""Shared BDD fixtures and step definitions for the Identity context."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers

from storefront.identity.accounts import SetUserActive
from storefront.identity.user import User

PASSWORD = "correct-horse-battery"


@pytest.fixture()
def password():
    return PASSWORD


@pytest.fixture()
def attempts():
    """Outcome of each sign-in attempt made by the scenario."""
    return []


@given(parsers.cfparse('an account "{email}"'), target_fixture="account")
def account(make_user, email):
    return make_user(email=email, password=PASSWORD)


@given("the account is deactivated")
def account_is_deactivated(account):
    current_domain.process(SetUserActive(user_id=account.id, active=False), asynchronous=False)


@given(parsers.cfparse('a legacy account "{email}" without a password'))
def legacy_account(email):
    current_domain.repository_for(User).add(User.register(email=email, password_hash=None))
