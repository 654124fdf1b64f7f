"""Session router - binds the workspace session to the view layer.

``GET /session`` returns the current snapshot. Every action endpoint
invokes one controller action and returns the resulting snapshot; action
failures are reported in the snapshot's ``error`` field and as a
notification, never as an HTTP error.
"""

from fastapi import APIRouter, Depends

from playground.dependencies import get_session_controller
from playground.schemas.session import SessionState
from playground.schemas.view import (
    EditorUpdate,
    ErrorMessage,
    ExecuteCode,
    LanguageSelect,
    NotificationItem,
    SearchQuery,
    ShareCreate,
    ShareResult,
)
from playground.services.notify.queue import QueueNotifier
from playground.services.session_controller import WorkspaceSessionController

router = APIRouter(prefix="/session", tags=["session"])

Controller = WorkspaceSessionController


@router.get("", response_model=SessionState, summary="Get the session snapshot")
async def get_state(session: Controller = Depends(get_session_controller)) -> SessionState:
    return session.state


# Editing


@router.post("/editor", response_model=SessionState, summary="Edit code, title or author")
async def update_editor(
    request: EditorUpdate,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    """Apply editor changes. Omitted fields are left untouched."""
    if request.code is not None:
        session.set_code(request.code)
    if request.title is not None:
        session.set_title(request.title)
    if request.author is not None:
        session.set_author(request.author)
    return session.state


@router.post("/language", response_model=SessionState, summary="Select a language")
async def select_language(
    request: LanguageSelect,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    """Select a language. Replaces the editor code with the language's starter code."""
    session.set_language(request.language)
    return session.state


@router.post("/reset", response_model=SessionState, summary="Start a new document")
async def reset(session: Controller = Depends(get_session_controller)) -> SessionState:
    session.reset()
    return session.state


# Snippets


@router.post("/snippets/refresh", response_model=SessionState, summary="Reload the snippet list")
async def refresh_snippets(session: Controller = Depends(get_session_controller)) -> SessionState:
    await session.load_snippets()
    return session.state


@router.post("/snippets/search", response_model=SessionState, summary="Search snippets")
async def search_snippets(
    request: SearchQuery,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.search_snippets(request.keyword)
    return session.state


@router.post("/snippets/{snippet_id}/open", response_model=SessionState, summary="Open a snippet")
async def open_snippet(
    snippet_id: int,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    """Load a snippet into the editor, discarding unsaved changes."""
    await session.load_snippet(snippet_id)
    return session.state


@router.post("/snippets", response_model=SessionState, summary="Save the editor as a new snippet")
async def save_snippet(session: Controller = Depends(get_session_controller)) -> SessionState:
    await session.save_snippet()
    return session.state


@router.put("/snippets/{snippet_id}", response_model=SessionState, summary="Update a snippet")
async def update_snippet(
    snippet_id: int,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.update_snippet(snippet_id)
    return session.state


@router.delete("/snippets/{snippet_id}", response_model=SessionState, summary="Delete a snippet")
async def delete_snippet(
    snippet_id: int,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.delete_snippet(snippet_id)
    return session.state


# Execution


@router.post("/execute", response_model=SessionState, summary="Run the current snippet")
async def execute_code(
    request: ExecuteCode,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.execute_code(request.custom_code, request.input)
    return session.state


@router.post(
    "/snippets/{snippet_id}/history",
    response_model=SessionState,
    summary="Load execution history",
)
async def load_history(
    snippet_id: int,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.load_execution_history(snippet_id)
    return session.state


@router.post(
    "/snippets/{snippet_id}/latest-execution",
    response_model=SessionState,
    summary="Load the latest execution",
)
async def load_latest_execution(
    snippet_id: int,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.load_latest_execution(snippet_id)
    return session.state


# Sharing


@router.post("/share", response_model=ShareResult, summary="Share the current snippet")
async def share_code(
    request: ShareCreate,
    session: Controller = Depends(get_session_controller),
) -> ShareResult:
    share = await session.share_code(request.expiration_days)
    return ShareResult(share=share, state=session.state)


@router.post("/shares/{share_id}/open", response_model=SessionState, summary="Open a shared link")
async def open_shared_code(
    share_id: str,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.load_shared_code(share_id)
    return session.state


@router.delete("/shares/{share_id}", response_model=SessionState, summary="Deactivate a share")
async def deactivate_share(
    share_id: str,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    await session.deactivate_share(share_id)
    return session.state


# Error slot and notifications


@router.put("/error", response_model=SessionState, summary="Set the error message")
async def set_error(
    request: ErrorMessage,
    session: Controller = Depends(get_session_controller),
) -> SessionState:
    session.set_error(request.message)
    return session.state


@router.delete("/error", response_model=SessionState, summary="Clear the error message")
async def clear_error(session: Controller = Depends(get_session_controller)) -> SessionState:
    session.clear_error()
    return session.state


@router.get(
    "/notifications",
    response_model=list[NotificationItem],
    summary="Drain pending notifications",
)
async def drain_notifications(
    session: Controller = Depends(get_session_controller),
) -> list[NotificationItem]:
    """Return notifications not yet shown, oldest first.

    Empty when the configured notifier does not buffer.
    """
    notifier = session.notifier
    if not isinstance(notifier, QueueNotifier):
        return []
    return [
        NotificationItem(level=n.level.value, message=n.message, created_at=n.created_at)
        for n in notifier.drain()
    ]
