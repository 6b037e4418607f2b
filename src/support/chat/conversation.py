"""Conversation and ChatMessage aggregates.

A conversation is opened by a customer and stays active until it is
closed. Messages are append-only; each one gets the next ``sequence``
number from its conversation, which orders messages that share a
timestamp.

State Machine:
    active → closed
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from support.chat.events import ConversationActivity, ConversationClosed, ConversationStarted, MessagePosted
from support.domain import support


class ConversationStatus(Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class SenderType(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@support.aggregate
class Conversation:
    customer_id = Identifier(required=True)
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    status = String(choices=ConversationStatus, default=ConversationStatus.ACTIVE.value)
    message_count = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def is_active(self) -> bool:
        return self.status == ConversationStatus.ACTIVE.value

    @classmethod
    def start(cls, customer_id, customer_name, customer_email):
        name, email = (customer_name or "").strip(), (customer_email or "").strip()
        if not name or not email:
            raise ValidationError({"customer": ["Please enter your name and email"]})

        now = datetime.now(UTC)
        conversation = cls(
            customer_id=customer_id,
            customer_name=name,
            customer_email=email,
            status=ConversationStatus.ACTIVE.value,
            message_count=0,
            created_at=now,
            updated_at=now,
        )
        conversation.raise_(
            ConversationStarted(
                conversation_id=str(conversation.id),
                customer_id=str(customer_id),
                customer_name=name,
                customer_email=email,
                status=conversation.status,
                started_at=now,
            )
        )
        return conversation

    def next_message(self, sender_id, sender_type, text):
        """Build the next message in this conversation and count it."""
        if not self.is_active:
            raise ValidationError({"conversation": ["Conversation is closed"]})

        now = datetime.now(UTC)
        self.message_count = (self.message_count or 0) + 1
        self.updated_at = now
        self.raise_(
            ConversationActivity(
                conversation_id=str(self.id),
                status=self.status,
                message_count=self.message_count,
                updated_at=now,
            )
        )
        return ChatMessage.post(
            conversation_id=self.id,
            sender_id=sender_id,
            sender_type=sender_type,
            text=text,
            sequence=self.message_count,
            posted_at=now,
        )

    def close(self):
        if not self.is_active:
            raise ValidationError({"status": ["Conversation is already closed"]})

        now = datetime.now(UTC)
        self.status = ConversationStatus.CLOSED.value
        self.updated_at = now
        self.raise_(ConversationClosed(conversation_id=str(self.id), status=self.status, closed_at=now))


@support.aggregate
class ChatMessage:
    conversation_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    sender_type = String(choices=SenderType, required=True)
    message = Text(required=True)
    sequence = Integer(required=True, min_value=1)
    created_at = DateTime()

    @invariant.post
    def message_must_not_be_blank(self):
        if not (self.message or "").strip():
            raise ValidationError({"message": ["Message cannot be empty"]})

    @classmethod
    def post(cls, conversation_id, sender_id, sender_type, text, sequence, posted_at):
        message = cls(
            conversation_id=conversation_id,
            sender_id=sender_id,
            sender_type=sender_type,
            message=(text or "").strip(),
            sequence=sequence,
            created_at=posted_at,
        )
        message.raise_(
            MessagePosted(
                message_id=str(message.id),
                conversation_id=str(conversation_id),
                sender_id=str(sender_id),
                sender_type=sender_type,
                message=message.message,
                sequence=sequence,
                created_at=posted_at,
            )
        )
        return message


@support.repository(part_of=Conversation)
class ConversationRepository:
    def active_for(self, customer_id):
        """The customer's most recently updated active conversation, or None."""
        conversations = self._dao.query.filter(
            customer_id=str(customer_id), status=ConversationStatus.ACTIVE.value
        ).limit(None).all().items
        return max(conversations, key=lambda c: c.updated_at, default=None)

    def recently_updated(self, customer_id=None):
        query = self._dao.query
        if customer_id:
            query = query.filter(customer_id=str(customer_id))
        return sorted(query.limit(None).all().items, key=lambda c: c.updated_at, reverse=True)


def message_order(message):
    return (message.created_at, message.sequence)


@support.repository(part_of=ChatMessage)
class ChatMessageRepository:
    def history(self, conversation_id):
        """Messages in ``conversation_id`` ordered by (created_at, sequence)."""
        messages = self._dao.query.filter(conversation_id=str(conversation_id)).limit(None).all().items
        return sorted(messages, key=message_order)
