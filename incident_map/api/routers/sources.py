from fastapi import APIRouter, Depends

from incident_map.api.deps import get_source_service
from incident_map.dto import SourceDTO
from incident_map.schemas.source import SourceCreateRequest
from incident_map.services.sources import SourceService

router = APIRouter(prefix="/reports/{report_id}/sources", tags=["sources"])


@router.get("", response_model=list[SourceDTO], summary="証拠ソース一覧")
async def list_sources(report_id: str, svc: SourceService = Depends(get_source_service)):
    return await svc.list_sources(report_id)


@router.post("", response_model=SourceDTO, status_code=201, summary="証拠ソース追加")
async def add_source(
    report_id: str,
    payload: SourceCreateRequest,
    svc: SourceService = Depends(get_source_service),
):
    return await svc.add_source(
        report_id, url=payload.url, added_by_fingerprint=payload.added_by_fingerprint
    )
