from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime


class ScanRequest(BaseModel):
    code: str


class ScanResult(BaseModel):
    success: bool
    message: str
    user_id: Optional[str] = None


class AttendanceProfile(BaseModel):
    nombres: Optional[str] = None
    apellidos: Optional[str] = None
    correo_institucional: Optional[str] = None
    id_rol: Optional[str] = None
    id_facultad: Optional[str] = None
    id_carrera: Optional[str] = None


class AttendanceRecord(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime
    session: Optional[str] = None
    type: Optional[str] = None
    perfiles: Optional[AttendanceProfile] = None

    class Config:
        from_attributes = True


class AttendanceFilters(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None
    session: Optional[str] = None
    role: Optional[str] = None
    faculty: Optional[str] = None
    career: Optional[str] = None


class DashboardStats(BaseModel):
    day: date
    attendance_today: int
    registered_users: int
    last_session: Optional[str] = None
    latest: List[AttendanceRecord]
