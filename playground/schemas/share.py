"""Pydantic schemas for share links."""

from datetime import datetime

from pydantic import ConfigDict, Field

from playground.schemas.base import WireModel
from playground.schemas.snippet import Snippet


class ShareRequest(WireModel):
    """Request to create a share link.

    ``expiration_days`` of None creates a permanent share.
    """

    code_snippet_id: int
    expiration_days: int | None = Field(default=None, ge=1)


class ShareInfo(WireModel):
    """A share link with the snippet snapshot taken when it was created."""

    model_config = ConfigDict(frozen=True)

    id: int
    code_snippet_id: int
    share_id: str
    share_url: str
    expires_at: datetime | None = None
    is_active: bool = True
    created_at: datetime
    code_snippet: Snippet

    @property
    def is_permanent(self) -> bool:
        return self.expires_at is None


class ShareStatistics(WireModel):
    """Aggregate share counts."""

    total_shares: int
    active_shares: int
    expired_shares: int
    permanent_shares: int


class CleanupResult(WireModel):
    """Result of deactivating expired shares."""

    deactivated_count: int
    message: str
