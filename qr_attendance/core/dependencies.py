"""
Core dependencies for route protection and session building
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from qr_attendance.config import settings
from qr_attendance.core.guard import AccessOutcome
from qr_attendance.core.session import UserSession
from qr_attendance.database.supabase_client import get_supabase, get_service_supabase
from qr_attendance.modules.auth.service import AuthService
from qr_attendance.modules.profiles.store import ProfileStore
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# auto_error=False: a missing token is a session-less request, which the
# access guard turns into 401
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_profile_store(supabase: Client = Depends(get_service_supabase)) -> ProfileStore:
    return ProfileStore(supabase)


def get_user_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service),
    store: ProfileStore = Depends(get_profile_store),
) -> UserSession:
    """Build the request's session from the Bearer token (anonymous if no token)"""
    if credentials is None:
        return UserSession(None, store.get)
    user_data = auth_service.get_current_user(credentials.credentials)
    return UserSession(user_data, store.get)


def require_roles(*allowed_roles: str):
    """Factory for a dependency that admits authenticated sessions, optionally restricted to roles"""
    roles = list(allowed_roles) if allowed_roles else None

    def check_access(session: UserSession = Depends(get_user_session)) -> UserSession:
        decision = session.authorize(roles)
        if decision.outcome == AccessOutcome.REDIRECT_SIGN_IN:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if decision.outcome == AccessOutcome.REDIRECT_LANDING:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient role. Required one of: {', '.join(roles or [])}"
            )
        return session
    return check_access


require_authenticated = require_roles()
require_admin = require_roles(settings.admin_role_name)


def require_admin_or_self(
    user_id: str,
    session: UserSession = Depends(require_authenticated),
) -> UserSession:
    """Admit admins, or the user acting on their own record (path param user_id)"""
    if session.is_self(user_id):
        return session
    if session.authorize([settings.admin_role_name]).allowed:
        return session
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You can only access your own profile"
    )
