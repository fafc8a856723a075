from supabase import Client
from qr_attendance.config import settings
from qr_attendance.core.exceptions import StoreError
from qr_attendance.modules.profiles.schemas import ProfileResponse
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

PROFILE_JOIN_SELECT = (
    "*, "
    "roles_usuarios ( id, nombre ), "
    "facultades ( id, nombre ), "
    "carreras ( id, nombre, id_facultad )"
)


class ProfileStore:
    """Data access for the profiles table. Every failure surfaces as StoreError."""

    def __init__(self, supabase: Client, table: Optional[str] = None):
        self.supabase = supabase
        self.table = table or settings.profiles_table

    def update(self, account_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Update the profile row keyed by account_id and return the stored row."""
        try:
            result = self.supabase.table(self.table)\
                .update(fields)\
                .eq("id", account_id)\
                .execute()
        except Exception as e:
            raise StoreError(f"Error updating profile: {e}", details=getattr(e, "details", None)) from e

        if not result.data:
            raise StoreError(
                "Error updating profile: no profile row for account",
                details={"account_id": account_id},
            )
        return result.data[0]

    def touch_update(self, account_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Update with actualizado_en stamped to now."""
        data = dict(fields)
        data["actualizado_en"] = datetime.now(timezone.utc).isoformat()
        return self.update(account_id, data)

    def get(self, account_id: str) -> Optional[ProfileResponse]:
        """Joined profile (role, faculty, career) or None if the row does not exist."""
        try:
            result = self.supabase.table(self.table)\
                .select(PROFILE_JOIN_SELECT)\
                .eq("id", account_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise StoreError(f"Error fetching profile: {e}") from e

        if result is None or not result.data:
            return None
        return ProfileResponse(**result.data)

    def list_profiles(self, limit: int = 50, offset: int = 0) -> List[ProfileResponse]:
        try:
            result = self.supabase.table(self.table)\
                .select("*, roles_usuarios ( id, nombre )")\
                .order("creado_en", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
        except Exception as e:
            raise StoreError(f"Error listing profiles: {e}") from e
        return [ProfileResponse(**row) for row in (result.data or [])]

    def count(self) -> int:
        try:
            result = self.supabase.table(self.table)\
                .select("id", count="exact")\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StoreError(f"Error counting profiles: {e}") from e
        return result.count or 0
