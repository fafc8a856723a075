from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials
from qr_attendance.core.dependencies import (
    get_auth_service, get_user_session, require_authenticated, security
)
from qr_attendance.core.session import UserSession
from qr_attendance.database.supabase_client import get_supabase, get_service_supabase
from qr_attendance.modules.auth.schemas import (
    LoginRequest, TokenResponse, PasswordResetRequest, PasswordUpdateRequest,
    SessionResponse, AuthorizeRequest, AuthorizeResponse
)
from qr_attendance.modules.auth.service import AuthService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_admin_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> AuthService:
    return AuthService(supabase, admin_client=admin_client)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    service: AuthService = Depends(get_admin_auth_service)
):
    """Logout and invalidate token"""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    service.logout(credentials.credentials)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=SessionResponse)
async def get_current_session(session: UserSession = Depends(require_authenticated)):
    """Current authenticated user and their joined profile"""
    return SessionResponse(user=session.user, profile=session.profile)


@router.post("/authorize", response_model=AuthorizeResponse)
async def authorize(
    request: AuthorizeRequest,
    session: UserSession = Depends(get_user_session)
):
    """Access decision for a page gated to allowed_roles (render or where to redirect)"""
    decision = session.authorize(request.allowed_roles)
    return AuthorizeResponse(outcome=decision.outcome, redirect_to=decision.redirect_to)


@router.post("/password-reset", status_code=202)
async def password_reset(
    request: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password recovery email"""
    service.request_password_reset(request.email)
    return {"message": "Password reset email sent"}


@router.post("/update-password", status_code=200)
async def update_password(
    request: PasswordUpdateRequest,
    session: UserSession = Depends(require_authenticated),
    service: AuthService = Depends(get_admin_auth_service)
):
    """Set a new password for the current user"""
    service.update_password(session.user_id, request.password)
    return {"message": "Password updated successfully"}
