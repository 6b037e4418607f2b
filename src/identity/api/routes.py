"""FastAPI endpoints for the Identity domain."""

import os

from fastapi import APIRouter, Depends, HTTPException
from protean.utils.globals import current_domain

from identity.account.profile import UserProfile
from identity.account.registration import register_user
from identity.account.roles import GrantAdminRole, is_admin, list_admins
from identity.api.schemas import (
    AdminListResponse,
    AdminResponse,
    GrantAdminRequest,
    PasswordResetRequest,
    ProfileResponse,
    RoleIdResponse,
    SessionResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    StatusResponse,
    UserIdResponse,
)
from identity.auth import get_auth_provider
from identity.auth.port import AuthError
from identity.domain import logger
from identity.guard import ADMIN_HOME_PATH, HOME_PATH, AdminCapability, SessionContext, current_session, require_admin

auth_router = APIRouter(prefix="/auth", tags=["auth"])
profile_router = APIRouter(prefix="/profiles", tags=["profiles"])
admin_router = APIRouter(prefix="/admin/admins", tags=["admin"])


def _landing_page(admin: bool) -> str:
    return ADMIN_HOME_PATH if admin else HOME_PATH


# --- Auth endpoints ---


@auth_router.post("/sign-up", status_code=201, response_model=UserIdResponse)
async def sign_up(body: SignUpRequest) -> UserIdResponse:
    user_id = register_user(body.email, body.password, body.full_name)
    return UserIdResponse(user_id=user_id)


@auth_router.post("/sign-in", response_model=SignInResponse)
async def sign_in(body: SignInRequest) -> SignInResponse:
    try:
        session = get_auth_provider().sign_in(body.email, body.password)
    except AuthError as exc:
        logger.info("Sign-in failed", email=body.email)
        raise HTTPException(status_code=401, detail={"message": str(exc), "redirect": "/auth"}) from exc

    admin = is_admin(session.user.id)
    return SignInResponse(
        access_token=session.access_token,
        expires_at=session.expires_at,
        user_id=session.user.id,
        email=session.user.email,
        full_name=session.user.full_name,
        is_admin=admin,
        redirect=_landing_page(admin),
    )


@auth_router.post("/sign-out", response_model=StatusResponse)
async def sign_out(session: SessionContext = Depends(current_session)) -> StatusResponse:
    try:
        get_auth_provider().sign_out(session.access_token)
    except AuthError as exc:
        raise HTTPException(status_code=502, detail={"message": str(exc)}) from exc
    return StatusResponse()


@auth_router.post("/password-reset", response_model=StatusResponse)
async def password_reset(body: PasswordResetRequest) -> StatusResponse:
    site_url = os.environ.get("SITE_URL", "http://localhost:8000")
    try:
        get_auth_provider().send_password_reset(body.email, redirect_to=f"{site_url}/auth")
    except AuthError as exc:
        raise HTTPException(status_code=502, detail={"message": str(exc)}) from exc
    return StatusResponse()


@auth_router.get("/session", response_model=SessionResponse)
async def get_session(session: SessionContext = Depends(current_session)) -> SessionResponse:
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        full_name=session.full_name,
        is_admin=session.is_admin,
        redirect=_landing_page(session.is_admin),
    )


# --- Profile endpoints ---


@profile_router.get("/me", response_model=ProfileResponse)
async def my_profile(session: SessionContext = Depends(current_session)) -> ProfileResponse:
    profile = current_domain.repository_for(UserProfile).get(session.user_id)
    return ProfileResponse(
        user_id=str(profile.user_id),
        email=profile.email,
        full_name=profile.full_name,
        created_at=profile.created_at,
    )


# --- Admin role endpoints ---


@admin_router.get("", response_model=AdminListResponse)
async def get_admins(_admin: AdminCapability = Depends(require_admin)) -> AdminListResponse:
    return AdminListResponse(admins=[AdminResponse(**admin) for admin in list_admins()])


@admin_router.post("", status_code=201, response_model=RoleIdResponse)
async def grant_admin(body: GrantAdminRequest, admin: AdminCapability = Depends(require_admin)) -> RoleIdResponse:
    role_id = current_domain.process(GrantAdminRole(email=body.email), asynchronous=False)
    logger.info("Admin granted through back office", granted_by=admin.user_id, email=body.email)
    return RoleIdResponse(role_id=role_id)
