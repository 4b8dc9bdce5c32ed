from __future__ import annotations

from pydantic import BaseModel, Field


class AdminAuthRequest(BaseModel):
    password: str = Field(default="", description="管理者パスワード")
