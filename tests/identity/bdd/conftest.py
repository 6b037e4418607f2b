"""Shared BDD fixtures and step definitions for the Identity domain."""

import pytest
from identity.account.registration import register_user
from identity.account.roles import is_admin
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def account():
    """The user the scenario is about."""
    return {"user_id": None, "email": None}


@given(parsers.cfparse('a registered user "{email}"'))
def registered_user(email, account):
    account["user_id"] = register_user(email, "karibu123", "Test User")
    account["email"] = email


@then("the user is an admin")
def user_is_admin(account):
    assert is_admin(account["user_id"]) is True


@then("the user is not an admin")
def user_is_not_admin(account):
    assert is_admin(account["user_id"]) is False
