from supabase import Client
from qr_attendance.config import settings
from qr_attendance.core.exceptions import StoreError
from qr_attendance.modules.attendance.schemas import (
    ScanResult, AttendanceRecord, AttendanceFilters, DashboardStats
)
from qr_attendance.modules.profiles.service import QR_PREFIX
from qr_attendance.modules.profiles.store import ProfileStore
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

INVALID_QR_MESSAGE = "Invalid QR code."
RECORD_COLUMNS = "id, user_id, created_at, session, type"
LATEST_LIMIT = 5


def parse_qr_payload(code: str) -> Optional[str]:
    """User id from a badge payload 'USER:<id>', or None if the code is not one of ours"""
    if not code or not code.startswith(QR_PREFIX):
        return None
    user_id = code.split(":", 1)[1].strip()
    return user_id or None


def _day_bounds(day: date):
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class AttendanceService:
    def __init__(self, supabase: Client, store: Optional[ProfileStore] = None):
        self.supabase = supabase
        self.store = store or ProfileStore(supabase)

    def register_scan(self, code: str) -> ScanResult:
        """Register attendance for a scanned badge via the register_attendance RPC"""
        user_id = parse_qr_payload(code)
        if user_id is None:
            return ScanResult(success=False, message=INVALID_QR_MESSAGE)

        try:
            result = self.supabase.rpc(
                settings.register_attendance_rpc,
                {"p_user_id": user_id}
            ).execute()
        except Exception as e:
            logger.error(f"register_attendance failed for {user_id}: {e}")
            raise HTTPException(status_code=502, detail=f"Error: {str(e)}")

        data = result.data or {}
        if isinstance(data, list):
            data = data[0] if data else {}
        success = data.get("status") == "success"
        message = data.get("message") or ("Attendance registered" if success else "Attendance not registered")
        logger.info(f"Scan for {user_id}: {data.get('status')} - {message}")
        return ScanResult(success=success, message=message, user_id=user_id)

    def list_attendance(self, filters: AttendanceFilters) -> List[AttendanceRecord]:
        """All attendance records with the attendee's profile, newest first"""
        try:
            query = self.supabase.table(settings.attendance_table)\
                .select(f"{RECORD_COLUMNS}, perfiles!inner(nombres, apellidos, correo_institucional, id_rol, id_facultad, id_carrera)")
            query = self._apply_date_filters(query, filters)
            if filters.role:
                query = query.eq("perfiles.id_rol", filters.role)
            if filters.faculty:
                query = query.eq("perfiles.id_facultad", filters.faculty)
            if filters.career:
                query = query.eq("perfiles.id_carrera", filters.career)
            result = query.order("created_at", desc=True).execute()
            return [AttendanceRecord(**r) for r in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_user_attendance(self, user_id: str, filters: AttendanceFilters) -> List[AttendanceRecord]:
        """A single user's attendance, newest first"""
        try:
            query = self.supabase.table(settings.attendance_table)\
                .select(RECORD_COLUMNS)\
                .eq("user_id", user_id)
            query = self._apply_date_filters(query, filters)
            result = query.order("created_at", desc=True).execute()
            return [AttendanceRecord(**r) for r in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _apply_date_filters(self, query, filters: AttendanceFilters):
        if filters.start:
            query = query.gte("created_at", _day_bounds(filters.start)[0].isoformat())
        if filters.end:
            # end date is inclusive of the whole day
            query = query.lt("created_at", _day_bounds(filters.end)[1].isoformat())
        if filters.session:
            query = query.eq("session", filters.session)
        return query

    def dashboard_stats(self, day: Optional[date] = None) -> DashboardStats:
        """Attendance count for the day, registered users, latest records"""
        day = day or datetime.now(timezone.utc).date()
        day_start, day_end = _day_bounds(day)
        try:
            today_result = self.supabase.table(settings.attendance_table)\
                .select("id", count="exact")\
                .gte("created_at", day_start.isoformat())\
                .lt("created_at", day_end.isoformat())\
                .limit(1)\
                .execute()
            latest_result = self.supabase.table(settings.attendance_table)\
                .select(f"{RECORD_COLUMNS}, perfiles!inner(nombres, apellidos)")\
                .order("created_at", desc=True)\
                .limit(LATEST_LIMIT)\
                .execute()
            registered_users = self.store.count()
        except StoreError as e:
            raise HTTPException(status_code=500, detail=e.message)
        except Exception as e:
            logger.error(f"Error fetching dashboard data: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        latest = [AttendanceRecord(**r) for r in (latest_result.data or [])]
        return DashboardStats(
            day=day,
            attendance_today=today_result.count or 0,
            registered_users=registered_users,
            last_session=latest[0].session if latest else None,
            latest=latest
        )
