"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class SignUpRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "amina@example.com",
                    "password": "karibu123",
                    "full_name": "Amina Otieno",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    full_name: str | None = Field(None, max_length=255)


class SignInRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "amina@example.com", "password": "karibu123"}]}}

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class PasswordResetRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "amina@example.com"}]}}

    email: str = Field(..., max_length=254)


class GrantAdminRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "owner@kwetustore.com"}]}}

    email: str = Field(..., max_length=254)


# --- Response Schemas ---


class UserIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"user_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890"}]}}

    user_id: str


class SessionResponse(BaseModel):
    user_id: str
    email: str
    full_name: str | None = None
    is_admin: bool = False
    redirect: str = "/"


class SignInResponse(SessionResponse):
    access_token: str
    expires_at: datetime | None = None


class ProfileResponse(BaseModel):
    user_id: str
    email: str
    full_name: str | None = None
    created_at: datetime | None = None


class AdminResponse(BaseModel):
    id: str
    user_id: str
    email: str | None = None
    full_name: str | None = None
    created_at: datetime | None = None


class AdminListResponse(BaseModel):
    admins: list[AdminResponse]


class RoleIdResponse(BaseModel):
    role_id: str


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
