from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError
from support.chat.conversation import ChatMessage, Conversation, ConversationStatus, message_order
from support.chat.events import ConversationClosed, ConversationStarted, MessagePosted


@pytest.fixture
def conversation():
    conversation = Conversation.start("customer-001", "Amina Otieno", "amina@example.com")
    conversation._events.clear()
    return conversation


class TestStartConversation:
    def test_start_is_active(self):
        conversation = Conversation.start("customer-001", " Amina Otieno ", "amina@example.com")

        assert conversation.status == ConversationStatus.ACTIVE.value
        assert conversation.customer_name == "Amina Otieno"
        assert conversation.message_count == 0
        assert isinstance(conversation._events[0], ConversationStarted)

    @pytest.mark.parametrize(
        "name,email",
        [("", "amina@example.com"), ("Amina", ""), ("   ", "amina@example.com"), (None, None)],
        ids=["no-name", "no-email", "blank-name", "nothing"],
    )
    def test_name_and_email_are_required(self, name, email):
        with pytest.raises(ValidationError) as exc:
            Conversation.start("customer-001", name, email)
        assert exc.value.messages["customer"] == ["Please enter your name and email"]


class TestMessages:
    def test_messages_are_numbered_in_order(self, conversation):
        first = conversation.next_message("customer-001", "customer", "Hello")
        second = conversation.next_message("admin-001", "admin", "Karibu! How can we help?")

        assert (first.sequence, second.sequence) == (1, 2)
        assert conversation.message_count == 2
        assert second.sender_type == "admin"

    def test_message_raises_posted_event(self, conversation):
        message = conversation.next_message("customer-001", "customer", "  Hello  ")

        assert message.message == "Hello"
        event = message._events[0]
        assert isinstance(event, MessagePosted)
        assert event.conversation_id == str(conversation.id)
        assert event.sequence == 1

    def test_blank_message_is_rejected(self, conversation):
        with pytest.raises(ValidationError):
            conversation.next_message("customer-001", "customer", "   ")

    def test_unknown_sender_type_is_rejected(self, conversation):
        with pytest.raises(ValidationError):
            conversation.next_message("customer-001", "robot", "Hello")

    def test_closed_conversation_rejects_messages(self, conversation):
        conversation.close()

        with pytest.raises(ValidationError) as exc:
            conversation.next_message("customer-001", "customer", "Anyone there?")
        assert exc.value.messages["conversation"] == ["Conversation is closed"]
        assert conversation.message_count == 0

    def test_same_timestamp_orders_by_sequence(self):
        now = datetime.now(UTC)
        later = ChatMessage.post("c-1", "u-1", "customer", "second", sequence=2, posted_at=now)
        earlier = ChatMessage.post("c-1", "u-1", "customer", "first", sequence=1, posted_at=now)

        assert [m.message for m in sorted([later, earlier], key=message_order)] == ["first", "second"]


class TestCloseConversation:
    def test_close(self, conversation):
        conversation.close()

        assert conversation.status == ConversationStatus.CLOSED.value
        assert isinstance(conversation._events[0], ConversationClosed)

    def test_close_twice(self, conversation):
        conversation.close()
        with pytest.raises(ValidationError):
            conversation.close()
