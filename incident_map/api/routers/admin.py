from fastapi import APIRouter, Depends

from incident_map.core.config import Settings, get_settings
from incident_map.schemas.admin import AdminAuthRequest
from incident_map.schemas.common import ErrorResponse, OkResponse
from incident_map.services.admin_auth import verify_admin_token

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/auth",
    response_model=OkResponse,
    summary="管理者パスワードの確認",
    responses={401: {"model": ErrorResponse, "description": "Unauthorized"}},
)
async def check_admin_password(
    payload: AdminAuthRequest,
    settings: Settings = Depends(get_settings),
):
    verify_admin_token(payload.password, settings.admin_password)
    return {"ok": True}
