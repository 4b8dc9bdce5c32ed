from __future__ import annotations

from pydantic import BaseModel, Field


class MessageDTO(BaseModel):
    id: str = Field(description="メッセージID")
    report_id: str = Field(description="レポートID")
    content: str = Field(description="本文")
    alias_number: int = Field(description="レポート内の匿名番号（送信者ごとに固定）")
    is_op: bool = Field(description="レポート作成者による投稿か")
    created_at: str = Field(description="投稿時刻 (ISO8601, UTC)")
