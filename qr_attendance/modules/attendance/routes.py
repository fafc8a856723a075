from fastapi import APIRouter, Depends
from qr_attendance.core.dependencies import require_admin, require_authenticated
from qr_attendance.core.session import UserSession
from qr_attendance.database.supabase_client import get_service_supabase
from qr_attendance.modules.attendance.schemas import (
    ScanRequest, ScanResult, AttendanceRecord, AttendanceFilters, DashboardStats
)
from qr_attendance.modules.attendance.service import AttendanceService
from supabase import Client
from datetime import date
from typing import List, Optional

router = APIRouter(prefix="/attendance", tags=["attendance"])
dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_attendance_service(supabase: Client = Depends(get_service_supabase)) -> AttendanceService:
    return AttendanceService(supabase)


@router.post("/scan", response_model=ScanResult)
async def scan(
    request: ScanRequest,
    session: UserSession = Depends(require_admin),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Register attendance from a scanned badge QR code (admin only)"""
    return service.register_scan(request.code)


@router.get("", response_model=List[AttendanceRecord])
async def list_attendance(
    filters: AttendanceFilters = Depends(),
    session: UserSession = Depends(require_admin),
    service: AttendanceService = Depends(get_attendance_service)
):
    """All attendance records, filterable by date range, session, role, faculty, career"""
    return service.list_attendance(filters)


@router.get("/me", response_model=List[AttendanceRecord])
async def list_my_attendance(
    start: Optional[date] = None,
    end: Optional[date] = None,
    session: Optional[str] = None,
    user_session: UserSession = Depends(require_authenticated),
    service: AttendanceService = Depends(get_attendance_service)
):
    """The current user's attendance records"""
    filters = AttendanceFilters(start=start, end=end, session=session)
    return service.list_user_attendance(user_session.user_id, filters)


@dashboard_router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    day: Optional[date] = None,
    session: UserSession = Depends(require_admin),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.dashboard_stats(day)
