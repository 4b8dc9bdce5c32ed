from datetime import datetime

from fastapi import APIRouter, Depends, Query

from incident_map.api.deps import get_message_service, require_admin
from incident_map.dto import MessageDTO
from incident_map.schemas.common import ErrorResponse, OkResponse
from incident_map.schemas.message import MessageCreateRequest
from incident_map.services.messages import MessageService

router = APIRouter(prefix="/reports/{report_id}/messages", tags=["messages"])


@router.get("", response_model=list[MessageDTO], summary="メッセージ一覧（since 以降のみも可）")
async def list_messages(
    report_id: str,
    since: datetime | None = Query(None, description="この時刻より後の投稿のみ返す"),
    svc: MessageService = Depends(get_message_service),
):
    return await svc.list_messages(report_id, since=since)


@router.post(
    "",
    response_model=MessageDTO,
    status_code=201,
    summary="メッセージ投稿（送信者ごとに30秒のクールダウン）",
    responses={429: {"model": ErrorResponse, "description": "cooldown active"}},
)
async def post_message(
    report_id: str,
    payload: MessageCreateRequest,
    svc: MessageService = Depends(get_message_service),
):
    return await svc.post_message(
        report_id,
        sender_fingerprint=payload.sender_fingerprint,
        content=payload.content,
    )


@router.delete(
    "/{message_id}",
    response_model=OkResponse,
    summary="管理者によるメッセージ削除",
    dependencies=[Depends(require_admin)],
)
async def delete_message(
    report_id: str,
    message_id: str,
    svc: MessageService = Depends(get_message_service),
):
    await svc.delete_message(report_id, message_id)
    return {"ok": True}
