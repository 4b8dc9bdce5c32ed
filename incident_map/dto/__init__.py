"""Public DTO exports for FastAPI response models."""

from .message import MessageDTO
from .report import ReportViewDTO
from .source import SourceDTO

__all__ = [
    "MessageDTO",
    "ReportViewDTO",
    "SourceDTO",
]
