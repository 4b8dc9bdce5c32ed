from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from incident_map.models.report import ReportStatus, ReportType

FINGERPRINT_MAX_LENGTH = 256


class ReportCreateRequest(BaseModel):
    type: ReportType = Field(description="インシデント種別")
    latitude: float = Field(ge=-90, le=90, description="緯度")
    longitude: float = Field(ge=-180, le=180, description="経度")
    description: str | None = Field(default=None, max_length=2000, description="説明（任意）")
    source_url: str | None = Field(default=None, max_length=2048, description="参考URL（任意）")
    creator_fingerprint: str | None = Field(
        default=None,
        max_length=FINGERPRINT_MAX_LENGTH,
        description="作成者の匿名ID（チャットの OP 表示用）",
    )


class ReportUpdateRequest(BaseModel):
    """Admin edit. Only the fields present in the payload are applied."""

    type: ReportType | None = Field(default=None, description="インシデント種別")
    status: ReportStatus | None = Field(default=None, description="ステータスを直接指定")
    description: str | None = Field(default=None, max_length=2000, description="説明")
    source_url: str | None = Field(default=None, max_length=2048, description="参考URL")
    created_at: datetime | None = Field(default=None, description="作成時刻の修正")
    last_activity_at: datetime | None = Field(default=None, description="最終アクティビティの修正")
    locked: bool | None = Field(
        default=None,
        description="false でロック解除。省略時は編集によりロックされる",
    )

    def provided_fields(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
