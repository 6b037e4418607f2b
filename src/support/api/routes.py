"""FastAPI endpoints for the Support domain: customer chat and the admin inbox."""

from fastapi import APIRouter, Depends, HTTPException, WebSocket
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.guard import AdminCapability, SessionContext, current_session, require_admin, resolve_session
from shared.change_feed import get_change_feed
from shared.streaming import FeedStream
from support.api.schemas import (
    ConversationDetailResponse,
    ConversationIdResponse,
    ConversationListResponse,
    ConversationResponse,
    MessageIdResponse,
    MessageResponse,
    PostMessageRequest,
    PurgeResponse,
    StartConversationRequest,
    StatusResponse,
)
from support.chat.commands import CloseConversation, PostMessage, StartConversation
from support.chat.conversation import Conversation, SenderType
from support.chat.feed import CONVERSATIONS_TABLE
from support.chat.queries import conversation_payload, conversations, delete_all_conversations, history
from support.chat.timeline import MessageTimeline
from support.domain import logger, support

chat_router = APIRouter(prefix="/chat", tags=["chat"])
admin_chat_router = APIRouter(prefix="/admin/chats", tags=["admin"])


def _owned_conversation(conversation_id, session: SessionContext):
    conversation = current_domain.repository_for(Conversation).get(conversation_id)
    if not session.is_admin and str(conversation.customer_id) != session.user_id:
        raise HTTPException(status_code=403, detail={"message": "Not your conversation", "redirect": "/"})
    return conversation


async def _stream_timeline(websocket: WebSocket, conversation_id: str, session: SessionContext) -> None:
    await websocket.accept()
    stream = FeedStream(websocket)
    with MessageTimeline(conversation_id, on_message=stream.push) as timeline:
        with support.domain_context():
            timeline.load()
        logger.info("Chat stream opened", conversation_id=conversation_id, user_id=session.user_id)
        await stream.run()


# --- Customer chat ---


@chat_router.post("/conversations", status_code=201, response_model=ConversationIdResponse)
async def start_conversation(
    body: StartConversationRequest,
    session: SessionContext = Depends(current_session),
) -> ConversationIdResponse:
    command = StartConversation(
        customer_id=session.user_id,
        customer_name=body.customer_name or session.full_name,
        customer_email=body.customer_email or session.email,
    )
    conversation_id = current_domain.process(command, asynchronous=False)
    return ConversationIdResponse(conversation_id=conversation_id)


@chat_router.get("/conversations/current", response_model=ConversationDetailResponse)
async def current_conversation(session: SessionContext = Depends(current_session)) -> ConversationDetailResponse:
    conversation = current_domain.repository_for(Conversation).active_for(session.user_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail={"message": "No active conversation"})
    return ConversationDetailResponse(**conversation_payload(conversation), messages=history(conversation.id))


@chat_router.get("/conversations/{conversation_id}/messages", response_model=list[MessageResponse])
async def get_messages(conversation_id: str, session: SessionContext = Depends(current_session)):
    _owned_conversation(conversation_id, session)
    return [MessageResponse(**m) for m in history(conversation_id)]


@chat_router.post("/conversations/{conversation_id}/messages", status_code=201, response_model=MessageIdResponse)
async def send_message(
    conversation_id: str,
    body: PostMessageRequest,
    session: SessionContext = Depends(current_session),
) -> MessageIdResponse:
    _owned_conversation(conversation_id, session)
    command = PostMessage(
        conversation_id=conversation_id,
        sender_id=session.user_id,
        sender_type=SenderType.CUSTOMER.value,
        message=body.message,
    )
    message_id = current_domain.process(command, asynchronous=False)
    return MessageIdResponse(message_id=message_id)


@chat_router.post("/conversations/{conversation_id}/close", response_model=StatusResponse)
async def close_conversation(conversation_id: str, session: SessionContext = Depends(current_session)) -> StatusResponse:
    _owned_conversation(conversation_id, session)
    current_domain.process(CloseConversation(conversation_id=conversation_id), asynchronous=False)
    return StatusResponse()


@chat_router.websocket("/conversations/{conversation_id}/stream")
async def conversation_stream(websocket: WebSocket, conversation_id: str, token: str | None = None):
    session = resolve_session(token)
    if session is None:
        await websocket.close(code=1008)
        return

    with support.domain_context():
        try:
            conversation = current_domain.repository_for(Conversation).get(conversation_id)
        except ObjectNotFoundError:
            conversation = None
    if conversation is None or (not session.is_admin and str(conversation.customer_id) != session.user_id):
        await websocket.close(code=1008)
        return

    await _stream_timeline(websocket, conversation_id, session)


# --- Admin inbox ---


@admin_chat_router.get("", response_model=ConversationListResponse)
async def list_conversations(_admin: AdminCapability = Depends(require_admin)) -> ConversationListResponse:
    return ConversationListResponse(conversations=[ConversationResponse(**c) for c in conversations()])


@admin_chat_router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def admin_messages(conversation_id: str, _admin: AdminCapability = Depends(require_admin)):
    current_domain.repository_for(Conversation).get(conversation_id)
    return [MessageResponse(**m) for m in history(conversation_id)]


@admin_chat_router.post("/{conversation_id}/messages", status_code=201, response_model=MessageIdResponse)
async def admin_reply(
    conversation_id: str,
    body: PostMessageRequest,
    admin: AdminCapability = Depends(require_admin),
) -> MessageIdResponse:
    command = PostMessage(
        conversation_id=conversation_id,
        sender_id=admin.user_id,
        sender_type=SenderType.ADMIN.value,
        message=body.message,
    )
    message_id = current_domain.process(command, asynchronous=False)
    return MessageIdResponse(message_id=message_id)


@admin_chat_router.post("/{conversation_id}/close", response_model=StatusResponse)
async def admin_close(conversation_id: str, _admin: AdminCapability = Depends(require_admin)) -> StatusResponse:
    current_domain.process(CloseConversation(conversation_id=conversation_id), asynchronous=False)
    return StatusResponse()


@admin_chat_router.delete("", response_model=PurgeResponse)
async def delete_all(admin: AdminCapability = Depends(require_admin)) -> PurgeResponse:
    result = delete_all_conversations(admin.user_id)
    return PurgeResponse(
        conversations_deleted=len(result["conversation_ids"]),
        messages_deleted=result["messages_deleted"],
    )


@admin_chat_router.websocket("/stream")
async def inbox_stream(websocket: WebSocket, token: str | None = None):
    """Live conversation changes (new, updated, closed, deleted) for the admin inbox."""
    session = resolve_session(token)
    if session is None or not session.is_admin:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    stream = FeedStream(websocket)
    subscription = get_change_feed().subscribe(
        CONVERSATIONS_TABLE,
        lambda event: stream.push({"change_type": event.change_type.value, "conversation": event.new or event.old}),
    )
    with subscription:
        await stream.run()


@admin_chat_router.websocket("/{conversation_id}/stream")
async def admin_conversation_stream(websocket: WebSocket, conversation_id: str, token: str | None = None):
    session = resolve_session(token)
    if session is None or not session.is_admin:
        await websocket.close(code=1008)
        return
    await _stream_timeline(websocket, conversation_id, session)
