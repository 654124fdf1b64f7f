"""Playground schemas package."""

from playground.schemas.common import ApiError, PageResponse
from playground.schemas.execution import ExecutionRequest, ExecutionResult, ExecutionStatus
from playground.schemas.session import SessionState
from playground.schemas.share import CleanupResult, ShareInfo, ShareRequest, ShareStatistics
from playground.schemas.snippet import (
    LANGUAGE_CONFIG,
    Language,
    LanguageConfig,
    Snippet,
    SnippetRequest,
    starter_code,
)

__all__ = [
    "LANGUAGE_CONFIG",
    "ApiError",
    "CleanupResult",
    "ExecutionRequest",
    "ExecutionResult",
    "ExecutionStatus",
    "Language",
    "LanguageConfig",
    "PageResponse",
    "SessionState",
    "ShareInfo",
    "ShareRequest",
    "ShareStatistics",
    "Snippet",
    "SnippetRequest",
    "starter_code",
]
