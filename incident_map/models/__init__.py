# Alembic がメタデータを見つけられるよう全モデルをここで読み込む
from .base import Base
from .message import Message
from .report import Report, ReportStatus, ReportType
from .source import Source
from .vote import Vote, VoteType

__all__ = [
    "Base",
    "Report",
    "ReportStatus",
    "ReportType",
    "Vote",
    "VoteType",
    "Message",
    "Source",
]
