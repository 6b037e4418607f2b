"""Pydantic request/response schemas for the Support API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StartConversationRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"customer_name": "Amina Otieno", "customer_email": "amina@example.com"}]}
    }

    customer_name: str | None = Field(None, max_length=255)
    customer_email: str | None = Field(None, max_length=254)


class PostMessageRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"message": "Has my order shipped yet?"}]}}

    message: str = Field(..., max_length=4000)


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    sender_type: str
    message: str
    sequence: int
    created_at: datetime | None = None


class ConversationResponse(BaseModel):
    id: str
    customer_id: str
    customer_name: str
    customer_email: str
    status: str
    message_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ConversationDetailResponse(ConversationResponse):
    messages: list[MessageResponse] = []


class ConversationListResponse(BaseModel):
    conversations: list[ConversationResponse]


class ConversationIdResponse(BaseModel):
    conversation_id: str


class MessageIdResponse(BaseModel):
    message_id: str


class PurgeResponse(BaseModel):
    conversations_deleted: int
    messages_deleted: int


class StatusResponse(BaseModel):
    status: str = "ok"
