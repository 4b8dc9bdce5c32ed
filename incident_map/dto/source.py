from __future__ import annotations

from pydantic import BaseModel, Field


class SourceDTO(BaseModel):
    id: str = Field(description="ソースID")
    report_id: str = Field(description="レポートID")
    url: str = Field(description="証拠URL")
    created_at: str = Field(description="登録時刻 (ISO8601, UTC)")
