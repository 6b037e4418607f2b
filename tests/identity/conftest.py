import pytest


@pytest.fixture(autouse=True)
def identity_context():
    """Run every test inside the identity domain context."""
    from identity.domain import identity

    ctx = identity.domain_context()
    ctx.push()

    yield

    ctx.pop()
