from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class RoleResponse(BaseModel):
    id: str
    nombre: str
    creado_en: Optional[datetime] = None

    class Config:
        from_attributes = True


class FacultyResponse(BaseModel):
    id: str
    nombre: str

    class Config:
        from_attributes = True


class CareerResponse(BaseModel):
    id: str
    nombre: str
    id_facultad: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    id: str
    nombres: Optional[str] = None
    apellidos: Optional[str] = None
    correo_institucional: Optional[str] = None
    id_rol: Optional[str] = None
    id_facultad: Optional[str] = None
    id_carrera: Optional[str] = None
    codigo_qr: Optional[str] = None
    avatar_url: Optional[str] = None
    creado_en: Optional[datetime] = None
    actualizado_en: Optional[datetime] = None
    # Present only when the query joined the relation
    roles_usuarios: Optional[RoleResponse] = None
    facultades: Optional[FacultyResponse] = None
    carreras: Optional[CareerResponse] = None

    @property
    def role_name(self) -> Optional[str]:
        return self.roles_usuarios.nombre if self.roles_usuarios else None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    nombres: Optional[str] = None
    apellidos: Optional[str] = None
    correo_institucional: Optional[str] = None
    id_rol: Optional[str] = None
    id_facultad: Optional[str] = None
    id_carrera: Optional[str] = None
    avatar_url: Optional[str] = None


class AvatarUploadResponse(BaseModel):
    profile: ProfileResponse
    path: str
    public_url: Optional[str] = None


class QrPayloadResponse(BaseModel):
    user_id: str
    payload: str
