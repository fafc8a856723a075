from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from qr_attendance.core.dependencies import require_admin
from qr_attendance.core.session import UserSession
from qr_attendance.database.supabase_client import get_service_supabase
from qr_attendance.modules.accounts.directory import AuthDirectory
from qr_attendance.modules.accounts.schemas import (
    CreateAccountRequest, CreateAccountResponse,
    DeleteAccountRequest, DeleteAccountResponse, ErrorResponse
)
from qr_attendance.modules.accounts.service import AccountService
from qr_attendance.modules.profiles.store import ProfileStore
from supabase import Client

router = APIRouter(tags=["accounts"])

# Answered on OPTIONS even when the caller is not a browser preflight
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def get_account_service(supabase: Client = Depends(get_service_supabase)) -> AccountService:
    return AccountService(AuthDirectory(supabase), ProfileStore(supabase))


@router.options("/create-user", include_in_schema=False)
async def create_user_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(
    "/create-user",
    response_model=CreateAccountResponse,
    response_model_by_alias=True,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
async def create_user(
    body: CreateAccountRequest,
    session: UserSession = Depends(require_admin),
    service: AccountService = Depends(get_account_service)
):
    """Create an auth account with a populated profile (admin only)"""
    user_id = service.provision_account(body)
    return CreateAccountResponse(message="User created successfully", user_id=user_id)


@router.options("/delete-user", include_in_schema=False)
async def delete_user_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(
    "/delete-user",
    response_model=DeleteAccountResponse,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}},
)
async def delete_user(
    body: DeleteAccountRequest,
    session: UserSession = Depends(require_admin),
    service: AccountService = Depends(get_account_service)
):
    """Delete an auth account; its profile cascades (admin only)"""
    service.deprovision_account(body.user_id)
    return DeleteAccountResponse(message="User deleted successfully", user_id=body.user_id)
