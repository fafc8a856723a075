from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File
from qr_attendance.core.dependencies import (
    require_admin, require_admin_or_self, require_authenticated
)
from qr_attendance.core.session import UserSession
from qr_attendance.database.supabase_client import get_service_supabase
from qr_attendance.modules.profiles.schemas import (
    ProfileResponse, ProfileUpdate, AvatarUploadResponse, QrPayloadResponse,
    RoleResponse, FacultyResponse, CareerResponse
)
from qr_attendance.modules.profiles.service import ProfileService, ReferenceService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])
reference_router = APIRouter(prefix="/reference", tags=["reference"])


def get_profile_service(supabase: Client = Depends(get_service_supabase)) -> ProfileService:
    return ProfileService(supabase)


def get_reference_service(supabase: Client = Depends(get_service_supabase)) -> ReferenceService:
    return ReferenceService(supabase)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: UserSession = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service)
):
    """List all profiles with their role (admin only)"""
    return service.list_profiles(limit=limit, offset=offset)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    session: UserSession = Depends(require_admin_or_self),
    service: ProfileService = Depends(get_profile_service)
):
    """Get a joined profile (admin, or the user themself)"""
    return service.get_profile(user_id)


@router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    profile_data: ProfileUpdate,
    session: UserSession = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service)
):
    """Update profile fields (admin only)"""
    return service.update_profile(user_id, profile_data)


@router.post("/{user_id}/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    user_id: str,
    file: UploadFile = File(...),
    session: UserSession = Depends(require_admin_or_self),
    service: ProfileService = Depends(get_profile_service)
):
    """Upload or replace a profile avatar"""
    if not file.filename:
        raise HTTPException(status_code=400, detail="File name is required")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    return service.upload_avatar(user_id, content, file.filename, file.content_type)


@router.get("/{user_id}/qr", response_model=QrPayloadResponse)
async def get_qr_payload(
    user_id: str,
    session: UserSession = Depends(require_admin_or_self),
    service: ProfileService = Depends(get_profile_service)
):
    """Payload to encode on the user's badge QR code"""
    return service.get_qr_payload(user_id)


@reference_router.get("/roles", response_model=List[RoleResponse])
async def list_roles(
    session: UserSession = Depends(require_authenticated),
    service: ReferenceService = Depends(get_reference_service)
):
    return service.list_roles()


@reference_router.get("/faculties", response_model=List[FacultyResponse])
async def list_faculties(
    session: UserSession = Depends(require_authenticated),
    service: ReferenceService = Depends(get_reference_service)
):
    return service.list_faculties()


@reference_router.get("/careers", response_model=List[CareerResponse])
async def list_careers(
    faculty_id: Optional[str] = None,
    session: UserSession = Depends(require_authenticated),
    service: ReferenceService = Depends(get_reference_service)
):
    """Careers, optionally only those of one faculty"""
    return service.list_careers(faculty_id)
