"""Domain events for support conversations and their messages."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from support.domain import support


@support.event(part_of="Conversation")
class ConversationStarted:
    __version__ = 1

    conversation_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_name = String(required=True)
    customer_email = String(required=True)
    status = String(required=True)
    started_at = DateTime(required=True)


@support.event(part_of="Conversation")
class ConversationActivity:
    """A message landed in the conversation, bumping its message count."""

    __version__ = 1

    conversation_id = Identifier(required=True)
    status = String(required=True)
    message_count = Integer(required=True)
    updated_at = DateTime(required=True)


@support.event(part_of="Conversation")
class ConversationClosed:
    __version__ = 1

    conversation_id = Identifier(required=True)
    status = String(required=True)
    closed_at = DateTime(required=True)


@support.event(part_of="ChatMessage")
class MessagePosted:
    __version__ = 1

    message_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    sender_type = String(required=True)
    message = Text(required=True)
    sequence = Integer(required=True)
    created_at = DateTime(required=True)
