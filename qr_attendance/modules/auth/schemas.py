from pydantic import BaseModel, EmailStr
from typing import Any, Dict, List, Optional

from qr_attendance.core.guard import AccessOutcome
from qr_attendance.modules.profiles.schemas import ProfileResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordUpdateRequest(BaseModel):
    password: str


class SessionResponse(BaseModel):
    user: Dict[str, Any]
    profile: Optional[ProfileResponse] = None


class AuthorizeRequest(BaseModel):
    allowed_roles: Optional[List[str]] = None


class AuthorizeResponse(BaseModel):
    outcome: AccessOutcome
    redirect_to: Optional[str] = None
