from __future__ import annotations

from pydantic import BaseModel, Field

from incident_map.schemas.report import FINGERPRINT_MAX_LENGTH


class MessageCreateRequest(BaseModel):
    # 文字数上限は設定値 (MESSAGE_MAX_LENGTH) に従いサービス層で検証する
    content: str = Field(description="本文")
    sender_fingerprint: str = Field(
        min_length=1, max_length=FINGERPRINT_MAX_LENGTH, description="送信者の匿名ID"
    )
