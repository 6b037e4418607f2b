import pytest
from identity.shared.email import EmailAddress
from protean.exceptions import ValidationError


def test_email_address_element_type():
    from protean.utils import DomainObjects

    assert EmailAddress.element_type == DomainObjects.VALUE_OBJECT


def test_email_address_requires_address():
    with pytest.raises(ValidationError):
        EmailAddress()


@pytest.mark.parametrize(
    "email",
    ["user@example.com", "user.name@example.com", "user+tag@example.com", "a@b.cc", "user@example.co.ke"],
)
def test_valid_email_addresses(email):
    assert EmailAddress(address=email).address == email


@pytest.mark.parametrize(
    "email",
    [
        "plainaddress",
        "@example.com",
        "user@",
        "user@localhost",
        "user@@example.com",
        "user name@example.com",
        "user..name@example.com",
        ".user@example.com",
        "user@-example.com",
        "user@example.com.",
        "user;x@example.com",
    ],
)
def test_invalid_email_addresses(email):
    with pytest.raises(ValidationError) as exc:
        EmailAddress(address=email)
    assert "email" in exc.value.messages
