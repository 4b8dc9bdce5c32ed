# incident_map/schemas/common.py
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    detail: str = Field(description="エラーメッセージ")
    code: str | None = Field(default=None, description="安定したエラーコード")

    model_config = {
        "json_schema_extra": {"examples": [{"detail": "report not found", "code": "not_found"}]}
    }


class OkResponse(BaseModel):
    ok: bool = Field(description="成功可否（true 固定）")

    model_config = {"json_schema_extra": {"examples": [{"ok": True}]}}
