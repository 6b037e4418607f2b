"""Read helpers for conversations and message history."""

from protean.utils.globals import current_domain

from support.chat.commands import DeleteAllConversations
from support.chat.conversation import ChatMessage, Conversation
from support.chat.feed import publish_conversations_deleted


def conversation_payload(conversation) -> dict:
    return {
        "id": str(conversation.id),
        "customer_id": str(conversation.customer_id),
        "customer_name": conversation.customer_name,
        "customer_email": conversation.customer_email,
        "status": conversation.status,
        "message_count": conversation.message_count or 0,
        "created_at": conversation.created_at,
        "updated_at": conversation.updated_at,
    }


def message_payload(message) -> dict:
    return {
        "id": str(message.id),
        "conversation_id": str(message.conversation_id),
        "sender_id": str(message.sender_id),
        "sender_type": message.sender_type,
        "message": message.message,
        "sequence": message.sequence,
        "created_at": message.created_at,
    }


def conversations(customer_id=None) -> list[dict]:
    """Conversations, most recently active first."""
    return [conversation_payload(c) for c in current_domain.repository_for(Conversation).recently_updated(customer_id)]


def history(conversation_id) -> list[dict]:
    return [message_payload(m) for m in current_domain.repository_for(ChatMessage).history(conversation_id)]


def conversations_with_messages(customer_id) -> list[dict]:
    return [{**c, "messages": history(c["id"])} for c in conversations(customer_id)]


def delete_all_conversations(requested_by) -> dict:
    """Purge every conversation and message, then tell feed subscribers."""
    result = current_domain.process(DeleteAllConversations(requested_by=requested_by), asynchronous=False)
    publish_conversations_deleted(result["conversation_ids"])
    return result
