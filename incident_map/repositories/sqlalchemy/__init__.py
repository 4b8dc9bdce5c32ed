"""SQLAlchemy implementations of repository interfaces."""

from .message import SqlAlchemyMessageRepository
from .report import SqlAlchemyReportRepository
from .source import SqlAlchemySourceRepository
from .vote import SqlAlchemyVoteLedger

__all__ = [
    "SqlAlchemyReportRepository",
    "SqlAlchemyVoteLedger",
    "SqlAlchemyMessageRepository",
    "SqlAlchemySourceRepository",
]
