"""Shared BDD fixtures and step definitions for the Support domain."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from support.chat.commands import PostMessage, StartConversation
from support.chat.conversation import Conversation

CUSTOMER_ID = "customer-001"


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def chat():
    return {"conversation_id": None}


@given(parsers.cfparse('a customer "{name}" with email "{email}" opens a conversation'))
def customer_opens_conversation(name, email, chat):
    chat["conversation_id"] = current_domain.process(
        StartConversation(customer_id=CUSTOMER_ID, customer_name=name, customer_email=email),
        asynchronous=False,
    )


@when(parsers.cfparse('the customer writes "{text}"'))
def customer_writes(text, chat, error):
    try:
        current_domain.process(
            PostMessage(
                conversation_id=chat["conversation_id"],
                sender_id=CUSTOMER_ID,
                sender_type="customer",
                message=text,
            ),
            asynchronous=False,
        )
    except ValidationError as exc:
        error["exc"] = exc


@then(parsers.cfparse("the conversation has {count:d} messages"))
def conversation_message_count(count, chat):
    assert current_domain.repository_for(Conversation).get(chat["conversation_id"]).message_count == count
