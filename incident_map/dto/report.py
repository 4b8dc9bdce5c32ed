"""DTOs for report views returned by the lifecycle service."""

from __future__ import annotations

from pydantic import BaseModel, Field

from incident_map.models.report import ReportStatus, ReportType


class ReportViewDTO(BaseModel):
    """Report as shown on the map, with its freshly computed score."""

    id: str = Field(description="レポートID (UUID)")
    type: ReportType = Field(description="インシデント種別")
    latitude: float = Field(description="緯度")
    longitude: float = Field(description="経度")
    description: str | None = Field(default=None, description="説明（任意）")
    source_url: str | None = Field(default=None, description="参考URL（任意）")
    status: ReportStatus = Field(description="実効ステータス（ロック中は保存値）")
    admin_locked_at: str | None = Field(default=None, description="管理者ロック時刻")
    created_at: str = Field(description="作成時刻 (ISO8601, UTC)")
    last_activity_at: str = Field(description="最終アクティビティ時刻 (ISO8601, UTC)")
    score: float = Field(description="時間減衰スコア（小数2桁）")
    confirm_count: int = Field(default=0, description="confirm 票数")
    deny_count: int = Field(default=0, description="deny 票数")
    message_count: int = Field(default=0, description="メッセージ数")
    source_count: int = Field(default=0, description="ソース数")
