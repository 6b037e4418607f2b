"""Support chat commands and handlers."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from support.chat.conversation import ChatMessage, Conversation, SenderType
from support.domain import logger, support


@support.command(part_of="Conversation")
class StartConversation:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    customer_email = String(max_length=254)


@support.command(part_of="Conversation")
class PostMessage:
    conversation_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    sender_type = String(choices=SenderType, required=True)
    message = Text(required=True)


@support.command(part_of="Conversation")
class CloseConversation:
    conversation_id = Identifier(required=True)


@support.command(part_of="Conversation")
class DeleteAllConversations:
    requested_by = Identifier(required=True)


@support.command_handler(part_of=Conversation)
class ConversationCommandHandler:
    @handle(StartConversation)
    def start_conversation(self, command):
        """Open a conversation, or resume the customer's active one."""
        repo = current_domain.repository_for(Conversation)
        existing = repo.active_for(command.customer_id)
        if existing is not None:
            return str(existing.id)

        conversation = Conversation.start(
            customer_id=command.customer_id,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
        )
        repo.add(conversation)
        logger.info("Conversation started", conversation_id=str(conversation.id), customer_id=str(command.customer_id))
        return str(conversation.id)

    @handle(PostMessage)
    def post_message(self, command):
        conversations = current_domain.repository_for(Conversation)
        conversation = conversations.get(command.conversation_id)
        message = conversation.next_message(
            sender_id=command.sender_id,
            sender_type=command.sender_type,
            text=command.message,
        )
        conversations.add(conversation)
        current_domain.repository_for(ChatMessage).add(message)
        return str(message.id)

    @handle(CloseConversation)
    def close_conversation(self, command):
        repo = current_domain.repository_for(Conversation)
        conversation = repo.get(command.conversation_id)
        conversation.close()
        repo.add(conversation)

    @handle(DeleteAllConversations)
    def delete_all(self, command):
        messages = current_domain.repository_for(ChatMessage)
        conversations = current_domain.repository_for(Conversation)

        message_count = 0
        for message in messages._dao.query.limit(None).all().items:
            messages._dao.delete(message)
            message_count += 1

        conversation_ids = []
        for conversation in conversations._dao.query.limit(None).all().items:
            conversation_ids.append(str(conversation.id))
            conversations._dao.delete(conversation)

        logger.warning(
            "All conversations deleted",
            requested_by=str(command.requested_by),
            conversations=len(conversation_ids),
            messages=message_count,
        )
        return {"conversation_ids": conversation_ids, "messages_deleted": message_count}
