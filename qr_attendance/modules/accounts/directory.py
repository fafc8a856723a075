from supabase import Client
from qr_attendance.core.exceptions import AuthError
import logging

logger = logging.getLogger(__name__)


class AuthDirectory:
    """Account lifecycle against Supabase Auth. Requires a service_role client."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_account(self, email: str, password: str, confirmed: bool = True) -> str:
        """Create an auth user and return its id"""
        try:
            response = self.supabase.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": confirmed,
            })
        except Exception as e:
            raise AuthError(str(e), details=getattr(e, "code", None)) from e

        if not response or not response.user:
            raise AuthError("Failed to create user", details={"email": email})
        return response.user.id

    def delete_account(self, account_id: str) -> None:
        """Delete an auth user; the profile row cascades in the database"""
        try:
            self.supabase.auth.admin.delete_user(account_id)
        except Exception as e:
            raise AuthError(str(e), details=getattr(e, "code", None)) from e
