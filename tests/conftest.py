import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize every domain once. Each context's conftest pushes its own
    domain context per test, so `current_domain` always refers to the domain
    under test.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from identity.domain import identity
    from store.domain import store
    from support.domain import support

    identity.init()
    store.init()
    support.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


def _all_domains():
    from identity.domain import identity
    from store.domain import store
    from support.domain import support

    return [identity, store, support]


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from shared.db import drop_db, setup_db

    for domain in _all_domains():
        setup_db(domain)

    yield

    for domain in _all_domains():
        drop_db(domain)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Reset every domain's infrastructure and every swappable adapter after each test."""
    yield

    for domain in _all_domains():
        with domain.domain_context():
            for _, provider in domain.providers.items():
                provider._data_reset()

            for _, broker in domain.brokers.items():
                broker._data_reset()

            domain.event_store.store._data_reset()

    from identity.auth import reset_auth_provider
    from shared.change_feed import reset_change_feed
    from store.gateway import reset_gateway
    from store.storage import reset_storage

    reset_auth_provider()
    reset_gateway()
    reset_storage()
    reset_change_feed()


# ---------------------------------------------------------------------------
# Shared helpers for signed-in callers
# ---------------------------------------------------------------------------
@pytest.fixture
def sign_up():
    """Register a user through the auth provider and the identity domain; return a bearer token."""
    from identity.account.registration import register_user
    from identity.auth import get_auth_provider
    from identity.domain import identity

    def _sign_up(email="amina@example.com", password="karibu123", full_name="Amina Otieno", admin=False):
        with identity.domain_context():
            register_user(email, password, full_name)
            if admin:
                from identity.account.roles import GrantAdminRole

                identity.process(GrantAdminRole(email=email), asynchronous=False)
        session = get_auth_provider().sign_in(email, password)
        return session

    return _sign_up


@pytest.fixture
def customer(sign_up):
    return sign_up()


@pytest.fixture
def admin(sign_up):
    return sign_up(email="owner@kwetustore.com", password="admin-pass", full_name="Store Owner", admin=True)


@pytest.fixture
def headers_for():
    def _headers(session):
        return {"Authorization": f"Bearer {session.access_token}"}

    return _headers
