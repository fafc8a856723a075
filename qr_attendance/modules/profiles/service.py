from supabase import Client
from qr_attendance.config import settings
from qr_attendance.core.exceptions import StoreError
from qr_attendance.modules.profiles.schemas import (
    ProfileResponse, ProfileUpdate, AvatarUploadResponse, QrPayloadResponse,
    RoleResponse, FacultyResponse, CareerResponse
)
from qr_attendance.modules.profiles.store import ProfileStore
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

QR_PREFIX = "USER:"


def build_qr_payload(user_id: str) -> str:
    """Text encoded on a user's badge QR code"""
    return f"{QR_PREFIX}{user_id}"


def avatar_path(user_id: str, filename: str) -> str:
    """Storage path for a user's avatar: <user_id>.<ext>, one object per user"""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "png"
    return f"{user_id}.{ext}"


class ProfileService:
    def __init__(self, supabase: Client, store: Optional[ProfileStore] = None):
        self.supabase = supabase
        self.store = store or ProfileStore(supabase)

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get joined profile by user ID"""
        try:
            profile = self.store.get(user_id)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=e.message)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def list_profiles(self, limit: int = 50, offset: int = 0) -> List[ProfileResponse]:
        """List profiles with their role, newest first"""
        try:
            return self.store.list_profiles(limit=limit, offset=offset)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=e.message)

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Partial update; only fields present in the request are written"""
        update_data = profile_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        try:
            self.store.touch_update(user_id, update_data)
        except StoreError as e:
            if isinstance(e.details, dict) and e.details.get("account_id") == user_id:
                raise HTTPException(status_code=404, detail="Profile not found")
            raise HTTPException(status_code=500, detail=e.message)
        return self.get_profile(user_id)

    def upload_avatar(
        self,
        user_id: str,
        file_content: bytes,
        filename: str,
        content_type: Optional[str] = None
    ) -> AvatarUploadResponse:
        """Upload the avatar to storage (upsert) and point the profile at it"""
        path = avatar_path(user_id, filename)
        file_options = {"upsert": "true"}
        if content_type:
            file_options["content-type"] = content_type
        try:
            self.supabase.storage.from_(settings.avatars_bucket).upload(
                path,
                file_content,
                file_options=file_options
            )
            logger.info(f"Avatar uploaded to Supabase Storage: {path}")
        except Exception as e:
            logger.error(f"Avatar upload failed for {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Failed to upload avatar: {str(e)}")

        try:
            self.store.touch_update(user_id, {"avatar_url": path})
        except StoreError as e:
            raise HTTPException(status_code=500, detail=e.message)

        return AvatarUploadResponse(
            profile=self.get_profile(user_id),
            path=path,
            public_url=self.get_avatar_url(path)
        )

    def get_avatar_url(self, path: str) -> Optional[str]:
        try:
            return self.supabase.storage.from_(settings.avatars_bucket).get_public_url(path)
        except Exception as e:
            logger.warning(f"Could not resolve public URL for avatar {path}: {e}")
            return None

    def get_qr_payload(self, user_id: str) -> QrPayloadResponse:
        self.get_profile(user_id)
        return QrPayloadResponse(user_id=user_id, payload=build_qr_payload(user_id))


class ReferenceService:
    """Read-only lookup tables: roles, faculties, careers"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch(self, table: str, faculty_id: Optional[str] = None) -> List[dict]:
        try:
            query = self.supabase.table(table).select("*")
            if faculty_id:
                query = query.eq("id_facultad", faculty_id)
            result = query.order("nombre").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching {table}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_roles(self) -> List[RoleResponse]:
        return [RoleResponse(**r) for r in self._fetch(settings.roles_table)]

    def list_faculties(self) -> List[FacultyResponse]:
        return [FacultyResponse(**f) for f in self._fetch(settings.faculties_table)]

    def list_careers(self, faculty_id: Optional[str] = None) -> List[CareerResponse]:
        return [CareerResponse(**c) for c in self._fetch(settings.careers_table, faculty_id)]
