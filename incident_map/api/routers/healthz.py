# incident_map/api/routers/healthz.py
from fastapi import APIRouter

from incident_map.schemas.common import OkResponse

router = APIRouter(prefix="/healthz", tags=["health"])


@router.get("", response_model=OkResponse, summary="Liveness probe (no DB access)")
async def healthz():
    return {"ok": True}
