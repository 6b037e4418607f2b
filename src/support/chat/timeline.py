"""Message timeline — history plus live messages, each shown exactly once.

The timeline subscribes to the feed *before* loading history, so a message
committed between the two is never missed; it may arrive both ways and is
then kept once, by id.
"""

from collections.abc import Callable

from protean.utils.globals import current_domain

from shared.change_feed import ChangeEvent, ChangeType, get_change_feed
from support.chat.conversation import ChatMessage
from support.chat.feed import MESSAGES_TABLE


def _message_dict(message: ChatMessage) -> dict:
    return {
        "id": str(message.id),
        "conversation_id": str(message.conversation_id),
        "sender_id": str(message.sender_id),
        "sender_type": message.sender_type,
        "message": message.message,
        "sequence": message.sequence,
        "created_at": message.created_at,
    }


class MessageTimeline:
    def __init__(self, conversation_id, on_message: Callable[[dict], None] | None = None) -> None:
        self.conversation_id = str(conversation_id)
        self._on_message = on_message
        self._messages: dict[str, dict] = {}
        self._subscription = get_change_feed().subscribe(
            MESSAGES_TABLE,
            self._on_change,
            row_filter={"conversation_id": self.conversation_id},
            change_types={ChangeType.INSERT},
        )

    def load(self) -> list[dict]:
        """Merge the stored history in. Must run inside the support domain context."""
        for message in current_domain.repository_for(ChatMessage).history(self.conversation_id):
            self.add(_message_dict(message))
        return self.messages

    def add(self, row: dict) -> bool:
        """Add ``row`` unless a message with its id is already shown. Returns True if added."""
        message_id = str(row["id"])
        if message_id in self._messages:
            return False
        self._messages[message_id] = dict(row)
        if self._on_message is not None:
            self._on_message(self._messages[message_id])
        return True

    def _on_change(self, event: ChangeEvent) -> None:
        self.add(event.new)

    @property
    def messages(self) -> list[dict]:
        return sorted(self._messages.values(), key=lambda m: (m["created_at"], m["sequence"]))

    @property
    def active(self) -> bool:
        return self._subscription.active

    def close(self) -> None:
        self._subscription.unsubscribe()

    def __enter__(self) -> "MessageTimeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
