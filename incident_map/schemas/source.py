from __future__ import annotations

from pydantic import BaseModel, Field

from incident_map.schemas.report import FINGERPRINT_MAX_LENGTH


class SourceCreateRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2048, description="証拠URL (http/https)")
    added_by_fingerprint: str = Field(
        min_length=1, max_length=FINGERPRINT_MAX_LENGTH, description="追加者の匿名ID"
    )
