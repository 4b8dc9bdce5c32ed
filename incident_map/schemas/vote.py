from __future__ import annotations

from pydantic import BaseModel, Field

from incident_map.models.vote import VoteType
from incident_map.schemas.report import FINGERPRINT_MAX_LENGTH


class VoteCreateRequest(BaseModel):
    vote_type: VoteType = Field(description="confirm / deny")
    voter_fingerprint: str = Field(
        min_length=1, max_length=FINGERPRINT_MAX_LENGTH, description="投票者の匿名ID"
    )
