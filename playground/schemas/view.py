"""Request and response bodies of the session endpoints."""

from datetime import datetime

from pydantic import Field

from playground.schemas.base import WireModel
from playground.schemas.session import SessionState
from playground.schemas.share import ShareInfo
from playground.schemas.snippet import Language


class EditorUpdate(WireModel):
    """Editor fields to change. Omitted fields are left as they are."""

    code: str | None = None
    title: str | None = None
    author: str | None = None


class LanguageSelect(WireModel):
    language: Language


class SearchQuery(WireModel):
    keyword: str = ""


class ExecuteCode(WireModel):
    custom_code: str | None = Field(None, description="Run this instead of the editor code")
    input: str | None = Field(None, description="Standard input for the program")


class ShareCreate(WireModel):
    expiration_days: int | None = Field(None, description="Omit for a permanent link")


class ErrorMessage(WireModel):
    message: str = Field(..., min_length=1)


class ShareResult(WireModel):
    """Share link created by the action (None on failure) and the resulting state."""

    share: ShareInfo | None
    state: SessionState


class NotificationItem(WireModel):
    level: str
    message: str
    created_at: datetime
