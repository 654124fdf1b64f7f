"""Snapshot of the workspace session held by the controller."""

from pydantic import ConfigDict, Field

from playground.schemas.base import WireModel
from playground.schemas.execution import ExecutionResult
from playground.schemas.share import ShareInfo
from playground.schemas.snippet import Language, Snippet


class SessionState(WireModel):
    """Immutable view of what the user is currently looking at.

    The controller replaces the whole snapshot on every change, so readers
    never see a half-applied update.
    """

    model_config = ConfigDict(frozen=True)

    # Editor
    code: str
    language: Language
    title: str
    author: str

    # Snippets
    snippets: tuple[Snippet, ...] = ()
    current_snippet: Snippet | None = None

    # Execution
    execution_result: ExecutionResult | None = None
    execution_history: tuple[ExecutionResult, ...] = ()

    # Sharing
    share_info: ShareInfo | None = None

    # Busy flags and error slot
    is_loading: bool = False
    is_executing: bool = False
    is_sharing: bool = False
    error: str | None = Field(default=None, description="User-facing message of the last failure")
