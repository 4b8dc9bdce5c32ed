"""/reports routers that delegate to the lifecycle service via DI."""

from fastapi import APIRouter, Depends, Query

from incident_map.api.deps import get_report_service, require_admin
from incident_map.core.exceptions import ValidationError
from incident_map.dto import ReportViewDTO
from incident_map.schemas.common import ErrorResponse, OkResponse
from incident_map.schemas.report import ReportCreateRequest, ReportUpdateRequest
from incident_map.schemas.vote import VoteCreateRequest
from incident_map.services.reports import ReportService
from incident_map.utils.geo import BoundingBox

router = APIRouter(prefix="/reports", tags=["reports"])

_LIST_DESC = (
    "表示範囲内のアクティブなレポートを返します。\n"
    "- 最終アクティビティから4時間経過したレポートはこの呼び出しで expired になります"
    "（管理者ロック中でも対象）\n"
    "- swLat/swLng/neLat/neLng の4つすべてを指定した場合のみ範囲で絞り込みます（境界含む）\n"
    "- score/status は毎回投票から再計算されます\n"
)

_ADMIN_RESPONSES = {401: {"model": ErrorResponse, "description": "Unauthorized"}}


@router.get(
    "",
    response_model=list[ReportViewDTO],
    summary="レポート一覧（期限切れスイープ付き）",
    description=_LIST_DESC,
)
async def list_reports(
    sw_lat: float | None = Query(None, alias="swLat"),
    sw_lng: float | None = Query(None, alias="swLng"),
    ne_lat: float | None = Query(None, alias="neLat"),
    ne_lng: float | None = Query(None, alias="neLng"),
    svc: ReportService = Depends(get_report_service),
):
    bbox = None
    corners = (sw_lat, sw_lng, ne_lat, ne_lng)
    if all(c is not None for c in corners):
        try:
            bbox = BoundingBox(*corners)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
    return await svc.list_reports(bbox=bbox)


@router.post(
    "",
    response_model=ReportViewDTO,
    status_code=201,
    summary="レポート作成",
    responses={422: {"model": ErrorResponse, "description": "validation error"}},
)
async def create_report(
    payload: ReportCreateRequest,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.create_report(
        type=payload.type,
        latitude=payload.latitude,
        longitude=payload.longitude,
        description=payload.description,
        source_url=payload.source_url,
        creator_fingerprint=payload.creator_fingerprint,
    )


@router.get(
    "/{report_id}",
    response_model=ReportViewDTO,
    summary="レポート詳細",
    responses={404: {"model": ErrorResponse, "description": "Not Found"}},
)
async def get_report(report_id: str, svc: ReportService = Depends(get_report_service)):
    return await svc.get_report(report_id)


@router.post(
    "/{report_id}/vote",
    response_model=ReportViewDTO,
    summary="confirm / deny 投票",
    responses={
        400: {"model": ErrorResponse, "description": "expired report"},
        404: {"model": ErrorResponse, "description": "Not Found"},
        409: {"model": ErrorResponse, "description": "already voted"},
    },
)
async def cast_vote(
    report_id: str,
    payload: VoteCreateRequest,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.cast_vote(
        report_id,
        voter_fingerprint=payload.voter_fingerprint,
        vote_type=payload.vote_type,
    )


@router.patch(
    "/{report_id}",
    response_model=ReportViewDTO,
    summary="管理者によるレポート編集（ロック）",
    dependencies=[Depends(require_admin)],
    responses=_ADMIN_RESPONSES,
)
async def update_report(
    report_id: str,
    payload: ReportUpdateRequest,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.update_report(report_id, payload.provided_fields())


@router.delete(
    "/{report_id}",
    response_model=OkResponse,
    summary="管理者によるレポート削除（投票・メッセージ・ソースも削除）",
    dependencies=[Depends(require_admin)],
    responses=_ADMIN_RESPONSES,
)
async def delete_report(report_id: str, svc: ReportService = Depends(get_report_service)):
    await svc.delete_report(report_id)
    return {"ok": True}
