from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional


class CreateAccountRequest(BaseModel):
    # email/password stay optional here so an absent value is reported
    # as MissingField (400) by the service rather than a 422
    email: Optional[str] = None
    password: Optional[str] = None
    nombres: Optional[str] = None
    apellidos: Optional[str] = None
    correo_institucional: Optional[str] = None
    id_rol: Optional[str] = None
    id_facultad: Optional[str] = None
    id_carrera: Optional[str] = None
    avatar_url: Optional[str] = None

    def profile_fields(self) -> Dict[str, Any]:
        """Profile columns the caller supplied; omitted ones keep the blank row's defaults"""
        return self.model_dump(exclude_unset=True, exclude={"email", "password"})


class CreateAccountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user_id: str = Field(alias="userId")


class DeleteAccountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")


class DeleteAccountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user_id: str = Field(alias="userId")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
