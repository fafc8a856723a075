import hashlib
import time
from supabase import Client
from qr_attendance.config import settings
from qr_attendance.modules.auth.schemas import LoginRequest, TokenResponse
from fastapi import HTTPException
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _purge_expired(now: float) -> None:
    for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
        del _AUTH_USER_CACHE[key]


def evict_cached_user(user_id: str) -> None:
    """Drop every cached token lookup for user_id (e.g. after the account is deleted)"""
    for key in [k for k, (data, _) in _AUTH_USER_CACHE.items() if data.get("id") == user_id]:
        del _AUTH_USER_CACHE[key]


class AuthService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.admin_client = admin_client

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
                _purge_expired(now)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        if self.admin_client is None:
            return True
        try:
            # Revokes the refresh tokens of this token's session only
            self.admin_client.auth.admin.sign_out(token, "local")
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def request_password_reset(self, email: str) -> None:
        """Send the Supabase password recovery email"""
        options = {}
        if settings.password_reset_redirect_url:
            options["redirect_to"] = settings.password_reset_redirect_url
        try:
            self.supabase.auth.reset_password_for_email(email, options)
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Password reset failed: {str(e)}")

    def update_password(self, user_id: str, password: str) -> None:
        """Set a new password for user_id through the admin API (requires service role key)"""
        if not password:
            raise HTTPException(status_code=400, detail="Password is required")
        if self.admin_client is None:
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot update password."
            )
        try:
            response = self.admin_client.auth.admin.update_user_by_id(
                user_id,
                {"password": password}
            )
            if not response or not response.user:
                raise HTTPException(status_code=404, detail="User not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Failed to update password: {str(e)}")
