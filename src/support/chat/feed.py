"""Publishes committed chat changes to the shared change feed."""

import structlog
from protean.utils.mixins import handle

from shared.change_feed import ChangeEvent, ChangeType, get_change_feed
from support.chat.conversation import ChatMessage, Conversation
from support.chat.events import ConversationActivity, ConversationClosed, ConversationStarted, MessagePosted
from support.domain import support

logger = structlog.get_logger(__name__)

MESSAGES_TABLE = "chat_messages"
CONVERSATIONS_TABLE = "chat_conversations"


def message_row(event: MessagePosted) -> dict:
    return {
        "id": event.message_id,
        "conversation_id": event.conversation_id,
        "sender_id": event.sender_id,
        "sender_type": event.sender_type,
        "message": event.message,
        "sequence": event.sequence,
        "created_at": event.created_at,
    }


def publish_conversations_deleted(conversation_ids) -> None:
    feed = get_change_feed()
    for conversation_id in conversation_ids:
        feed.publish(ChangeEvent(table=CONVERSATIONS_TABLE, change_type=ChangeType.DELETE, old={"id": conversation_id}))


@support.event_handler(part_of=ChatMessage)
class ChatMessageFeedEventHandler:
    @handle(MessagePosted)
    def on_message_posted(self, event: MessagePosted) -> None:
        delivered = get_change_feed().publish(
            ChangeEvent(table=MESSAGES_TABLE, change_type=ChangeType.INSERT, new=message_row(event))
        )
        logger.debug("Chat message published", conversation_id=event.conversation_id, delivered=delivered)


@support.event_handler(part_of=Conversation)
class ConversationFeedEventHandler:
    @handle(ConversationStarted)
    def on_started(self, event: ConversationStarted) -> None:
        get_change_feed().publish(
            ChangeEvent(
                table=CONVERSATIONS_TABLE,
                change_type=ChangeType.INSERT,
                new={
                    "id": event.conversation_id,
                    "customer_id": event.customer_id,
                    "customer_name": event.customer_name,
                    "customer_email": event.customer_email,
                    "status": event.status,
                },
            )
        )

    @handle(ConversationActivity)
    def on_activity(self, event: ConversationActivity) -> None:
        get_change_feed().publish(
            ChangeEvent(
                table=CONVERSATIONS_TABLE,
                change_type=ChangeType.UPDATE,
                new={"id": event.conversation_id, "status": event.status, "message_count": event.message_count},
            )
        )

    @handle(ConversationClosed)
    def on_closed(self, event: ConversationClosed) -> None:
        get_change_feed().publish(
            ChangeEvent(
                table=CONVERSATIONS_TABLE,
                change_type=ChangeType.UPDATE,
                new={"id": event.conversation_id, "status": event.status},
            )
        )
