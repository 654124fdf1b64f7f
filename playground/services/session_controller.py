"""Workspace session controller.

Owns the session state for one workspace and exposes one action per
state-changing capability. Network-backed actions follow the same shape:

1. set the action's busy flag and clear the error slot
2. call the API gateway
3. settle into an :class:`Outcome` that is handed to two observers: the
   state merge (result merged, or error recorded) and the notifier

The state is an immutable :class:`SessionState` snapshot that is replaced
in one step per change, so readers only see pre- or post-action state.

Overlapping calls on the same channel resolve by issue order: each call
takes a sequence number and a response whose number is no longer the
latest for its channel is discarded.
"""

import logging
from collections import Counter
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError

from common.config import settings
from playground.schemas.execution import ExecutionRequest, ExecutionResult
from playground.schemas.session import SessionState
from playground.schemas.share import ShareInfo, ShareRequest, ShareStatistics
from playground.schemas.snippet import Language, Snippet, SnippetRequest, starter_code
from playground.services.gateway import ApiGatewayClient, GatewayError
from playground.services.notify import Notification, NotificationLevel, Notifier, get_notifier
from playground.services.outcome import Outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")

StateListener = Callable[[SessionState], None]
Merge = Callable[[SessionState, Any], dict[str, Any]]

# User-facing messages
MSG_CODE_REQUIRED = "Please enter some code."
MSG_SNIPPET_REQUIRED = "Please save the code snippet first."
MSG_INVALID_EXPIRATION = "Expiration must be at least 1 day."
MSG_TITLE_TOO_LONG = "Title must be at most 255 characters."
MSG_AUTHOR_TOO_LONG = "Author name must be at most 100 characters."
MSG_INVALID_SNIPPET = "The code snippet is not valid."
MSG_LOAD_SNIPPETS_FAILED = "Failed to load code snippets."
MSG_LOAD_SNIPPET_FAILED = "Failed to load the code snippet."
MSG_SEARCH_FAILED = "Search failed."
MSG_SAVE_FAILED = "Failed to save the code snippet."
MSG_UPDATE_FAILED = "Failed to update the code snippet."
MSG_DELETE_FAILED = "Failed to delete the code snippet."
MSG_EXECUTE_FAILED = "Failed to execute the code."
MSG_HISTORY_FAILED = "Failed to load execution history."
MSG_LATEST_FAILED = "Failed to load the latest execution."
MSG_SHARE_FAILED = "Failed to create a share link."
MSG_LOAD_SHARED_FAILED = "Failed to load the shared code."
MSG_DEACTIVATE_FAILED = "Failed to deactivate the share link."
MSG_STATISTICS_FAILED = "Failed to load share statistics."

MSG_SAVED = "Code snippet saved."
MSG_UPDATED = "Code snippet updated."
MSG_DELETED = "Code snippet deleted."
MSG_EXECUTED = "Code executed successfully."
MSG_EXECUTION_ERROR = "An error occurred while running the code."
MSG_SHARED = "Share link created."
MSG_DEACTIVATED = "Share link deactivated."


class BusyFlag(str, Enum):
    """Advisory in-flight flags; values are SessionState field names."""

    LOADING = "is_loading"
    EXECUTING = "is_executing"
    SHARING = "is_sharing"


class Channel(str, Enum):
    """State slots whose overlapping responses are ordered by sequence number."""

    SNIPPET_LIST = "snippet_list"
    CURRENT_SNIPPET = "current_snippet"
    EXECUTION = "execution"
    HISTORY = "history"
    SHARE = "share"


def _editor_fields(snippet: Snippet) -> dict[str, Any]:
    """Mirror a snippet into the editor fields."""
    return {
        "current_snippet": snippet,
        "code": snippet.code,
        "language": snippet.language,
        "title": snippet.title,
        "author": snippet.author_name,
    }


class WorkspaceSessionController:
    """Session state plus the actions that read and write it.

    Actions never raise for expected failures; they record a message in
    the error slot and notify the user instead.
    """

    def __init__(
        self,
        gateway: ApiGatewayClient,
        notifier: Notifier | None = None,
        *,
        execution_timeout_seconds: int | None = None,
        snippet_page_size: int | None = None,
        history_page_size: int | None = None,
        default_title: str | None = None,
        default_author: str | None = None,
        default_language: Language | None = None,
    ):
        """Initialize the controller with a fresh session.

        Args:
            gateway: Client used for every backend call.
            notifier: Receives transient notifications. Defaults to the
                configured notifier.
            execution_timeout_seconds: Server-side timeout hint sent with
                each execution. Defaults to config value.
            snippet_page_size: Page size for listing and search. Defaults to config value.
            history_page_size: Page size for execution history. Defaults to config value.
            default_title: Title of a new document. Defaults to config value.
            default_author: Author of a new document. Defaults to config value.
            default_language: Language of a new document. Defaults to config value.
        """
        self._gateway = gateway
        self._notifier = notifier or get_notifier()
        self.execution_timeout_seconds = (
            execution_timeout_seconds or settings.execution_timeout_seconds
        )
        self.snippet_page_size = snippet_page_size or settings.snippet_page_size
        self.history_page_size = history_page_size or settings.history_page_size
        self.default_title = default_title or settings.default_title
        language = default_language or Language(settings.default_language.upper())

        self._state = SessionState(
            code=starter_code(language),
            language=language,
            title=self.default_title,
            author=default_author or settings.default_author,
        )
        self._listeners: list[StateListener] = []
        self._in_flight: Counter[BusyFlag] = Counter()
        self._sequences: dict[Channel, int] = dict.fromkeys(Channel, 0)

    @property
    def state(self) -> SessionState:
        """The latest session snapshot."""
        return self._state

    @property
    def gateway(self) -> ApiGatewayClient:
        return self._gateway

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every new snapshot.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def close(self) -> None:
        """End the session and release the gateway connection pool."""
        self._listeners.clear()
        await self._gateway.aclose()

    # State plumbing

    def _apply(self, **changes: Any) -> None:
        """Replace the snapshot with one carrying ``changes``."""
        if not changes:
            return
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session listener failed")

    def _announce(self, notification: Notification | None) -> None:
        if notification is not None:
            self._notifier.notify(notification)

    def _publish(
        self,
        outcome: Outcome,
        changes: dict[str, Any],
        merge: Merge | None,
        announce: Callable[[Any], Notification | None] | None,
    ) -> None:
        """Hand a settled outcome to the state and notification observers."""
        if outcome.ok:
            if merge is not None:
                changes.update(merge(self._state, outcome.value))
            self._apply(**changes)
            if announce is not None:
                self._announce(announce(outcome.value))
            elif outcome.message:
                self._announce(Notification(NotificationLevel.SUCCESS, outcome.message))
        else:
            changes["error"] = outcome.message
            self._apply(**changes)
            self._announce(Notification(NotificationLevel.ERROR, outcome.message))

    def _reject(self, message: str) -> Outcome:
        """Fail an action locally, before any network call."""
        logger.info(f"Action rejected: {message}")
        outcome: Outcome = Outcome.failure(message)
        self._publish(outcome, {}, None, None)
        return outcome

    def _next_sequence(self, channel: Channel) -> int:
        self._sequences[channel] += 1
        return self._sequences[channel]

    async def _run(
        self,
        call: Callable[[], Awaitable[T]],
        *,
        failure_message: str,
        flag: BusyFlag | None = None,
        channel: Channel | None = None,
        merge: Merge | None = None,
        success_message: str | None = None,
        announce: Callable[[T], Notification | None] | None = None,
    ) -> Outcome[T]:
        """Run one gateway call through the busy/error discipline.

        Args:
            call: Issues the gateway request.
            failure_message: Recorded in the error slot if the call fails.
            flag: Busy flag held while the call is in flight.
            channel: Sequencing channel; stale responses are discarded.
            merge: Builds state changes from the current state and result.
            success_message: Success notification text.
            announce: Builds the notification from the result instead.

        Returns:
            The settled Outcome, marked stale if a newer call on the
            channel overtook it.
        """
        sequence = self._next_sequence(channel) if channel is not None else None
        begin: dict[str, Any] = {"error": None}
        if flag is not None:
            self._in_flight[flag] += 1
            begin[flag.value] = True
        self._apply(**begin)

        outcome: Outcome[T] | None = None
        try:
            value = await call()
            outcome = Outcome.success(value, success_message)
        except GatewayError as e:
            logger.warning(
                failure_message,
                extra={"path": e.path, "status_code": e.status_code, "error": str(e)},
            )
            outcome = Outcome.failure(failure_message, e)
        finally:
            changes: dict[str, Any] = {}
            if flag is not None:
                self._in_flight[flag] -= 1
                changes[flag.value] = self._in_flight[flag] > 0

            if outcome is None:
                # Cancelled or unexpected error: release the flag and propagate
                self._apply(**changes)

        if channel is not None and sequence != self._sequences[channel]:
            logger.debug(
                "Discarding stale response",
                extra={"channel": channel.value, "sequence": sequence},
            )
            self._apply(**changes)
            return outcome.discarded()

        self._publish(outcome, changes, merge, announce)
        return outcome

    # Editing

    def set_code(self, code: str) -> None:
        self._apply(code=code)

    def set_language(self, language: Language | str) -> None:
        """Select a language, replacing the editor code with its starter text."""
        language = Language(language)
        self._apply(language=language, code=starter_code(language))

    def set_title(self, title: str) -> None:
        self._apply(title=title)

    def set_author(self, author: str) -> None:
        self._apply(author=author)

    def reset(self) -> None:
        """Start a new document in the currently selected language."""
        self._apply(
            code=starter_code(self._state.language),
            title=self.default_title,
            current_snippet=None,
            execution_result=None,
            share_info=None,
            error=None,
        )

    # Snippets

    async def load_snippets(self) -> None:
        """Replace the snippet list with the first page."""
        await self._run(
            lambda: self._gateway.list_snippets(0, self.snippet_page_size),
            failure_message=MSG_LOAD_SNIPPETS_FAILED,
            flag=BusyFlag.LOADING,
            channel=Channel.SNIPPET_LIST,
            merge=lambda state, page: {"snippets": tuple(page.content)},
        )

    async def search_snippets(self, keyword: str) -> None:
        """Replace the snippet list with search results.

        A blank keyword lists all snippets instead.
        """
        if not keyword.strip():
            await self.load_snippets()
            return

        await self._run(
            lambda: self._gateway.search_snippets(keyword, 0, self.snippet_page_size),
            failure_message=MSG_SEARCH_FAILED,
            flag=BusyFlag.LOADING,
            channel=Channel.SNIPPET_LIST,
            merge=lambda state, page: {"snippets": tuple(page.content)},
        )

    async def load_snippet(self, snippet_id: int) -> None:
        """Open a snippet, overwriting any unsaved editor changes."""
        await self._run(
            lambda: self._gateway.get_snippet(snippet_id),
            failure_message=MSG_LOAD_SNIPPET_FAILED,
            flag=BusyFlag.LOADING,
            channel=Channel.CURRENT_SNIPPET,
            merge=lambda state, snippet: _editor_fields(snippet),
        )

    def _snippet_request(self) -> SnippetRequest | None:
        """Build the save/update body from the editor.

        Returns None after rejecting the action when the editor fields
        would not be accepted by the backend.
        """
        state = self._state
        if not state.code.strip():
            self._reject(MSG_CODE_REQUIRED)
            return None
        try:
            return SnippetRequest(
                title=state.title,
                code=state.code,
                language=state.language,
                author_name=state.author,
            )
        except ValidationError as e:
            fields = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
            logger.info(f"Snippet request rejected: {sorted(fields)}")
            if "title" in fields:
                self._reject(MSG_TITLE_TOO_LONG)
            elif fields & {"author_name", "authorName"}:
                self._reject(MSG_AUTHOR_TOO_LONG)
            else:
                self._reject(MSG_INVALID_SNIPPET)
            return None

    async def save_snippet(self) -> None:
        """Create a snippet from the editor and put it at the head of the list."""
        request = self._snippet_request()
        if request is None:
            return
        await self._run(
            lambda: self._gateway.create_snippet(request),
            failure_message=MSG_SAVE_FAILED,
            flag=BusyFlag.LOADING,
            merge=lambda state, snippet: {
                "current_snippet": snippet,
                "snippets": (snippet, *state.snippets),
            },
            success_message=MSG_SAVED,
        )

    async def update_snippet(self, snippet_id: int) -> None:
        """Replace a snippet with the editor contents, keeping its list position."""
        request = self._snippet_request()
        if request is None:
            return

        def merge(state: SessionState, updated: Snippet) -> dict[str, Any]:
            return {
                "current_snippet": updated,
                "snippets": tuple(updated if s.id == snippet_id else s for s in state.snippets),
            }

        await self._run(
            lambda: self._gateway.update_snippet(snippet_id, request),
            failure_message=MSG_UPDATE_FAILED,
            flag=BusyFlag.LOADING,
            merge=merge,
            success_message=MSG_UPDATED,
        )

    async def delete_snippet(self, snippet_id: int) -> None:
        """Delete a snippet. The list is not re-fetched."""

        def merge(state: SessionState, _: None) -> dict[str, Any]:
            current = state.current_snippet
            return {
                "snippets": tuple(s for s in state.snippets if s.id != snippet_id),
                "current_snippet": None if current and current.id == snippet_id else current,
            }

        await self._run(
            lambda: self._gateway.delete_snippet(snippet_id),
            failure_message=MSG_DELETE_FAILED,
            flag=BusyFlag.LOADING,
            merge=merge,
            success_message=MSG_DELETED,
        )

    # Execution

    async def execute_code(self, custom_code: str | None = None, input: str | None = None) -> None:
        """Run the current snippet.

        Args:
            custom_code: Code to run instead of the editor contents.
            input: Standard input for the program.
        """
        snippet = self._state.current_snippet
        if snippet is None:
            self._reject(MSG_SNIPPET_REQUIRED)
            return

        request = ExecutionRequest(
            code_snippet_id=snippet.id,
            custom_code=custom_code or self._state.code,
            input=input,
            timeout_seconds=self.execution_timeout_seconds,
        )

        def announce(result: ExecutionResult) -> Notification:
            if result.succeeded:
                return Notification(NotificationLevel.SUCCESS, MSG_EXECUTED)
            return Notification(NotificationLevel.ERROR, MSG_EXECUTION_ERROR)

        await self._run(
            lambda: self._gateway.execute(request),
            failure_message=MSG_EXECUTE_FAILED,
            flag=BusyFlag.EXECUTING,
            channel=Channel.EXECUTION,
            merge=lambda state, result: {"execution_result": result},
            announce=announce,
        )

    async def load_execution_history(self, snippet_id: int) -> None:
        """Replace the execution history with the most recent results."""
        await self._run(
            lambda: self._gateway.get_execution_history(snippet_id, 0, self.history_page_size),
            failure_message=MSG_HISTORY_FAILED,
            channel=Channel.HISTORY,
            merge=lambda state, page: {"execution_history": tuple(page.content)},
        )

    async def load_latest_execution(self, snippet_id: int) -> None:
        """Show the latest result of a snippet; empty if it never ran."""
        await self._run(
            lambda: self._gateway.get_latest_execution(snippet_id),
            failure_message=MSG_LATEST_FAILED,
            flag=BusyFlag.LOADING,
            channel=Channel.EXECUTION,
            merge=lambda state, result: {"execution_result": result},
        )

    # Sharing

    async def share_code(self, expiration_days: int | None = None) -> ShareInfo | None:
        """Create a share link for the current snippet.

        Args:
            expiration_days: Days until the link expires; None for a permanent link.

        Returns:
            The ShareInfo now held in state, or None if the action failed
            or a later share call overtook it.
        """
        snippet = self._state.current_snippet
        if snippet is None:
            self._reject(MSG_SNIPPET_REQUIRED)
            return None
        if expiration_days is not None and expiration_days < 1:
            self._reject(MSG_INVALID_EXPIRATION)
            return None

        request = ShareRequest(code_snippet_id=snippet.id, expiration_days=expiration_days)
        outcome = await self._run(
            lambda: self._gateway.create_share(request),
            failure_message=MSG_SHARE_FAILED,
            flag=BusyFlag.SHARING,
            channel=Channel.SHARE,
            merge=lambda state, share: {"share_info": share},
            success_message=MSG_SHARED,
        )
        return outcome.applied_value

    async def load_shared_code(self, share_id: str) -> None:
        """Open someone else's share link, replacing the whole editor."""
        await self._run(
            lambda: self._gateway.get_share(share_id),
            failure_message=MSG_LOAD_SHARED_FAILED,
            flag=BusyFlag.LOADING,
            channel=Channel.CURRENT_SNIPPET,
            merge=lambda state, share: {**_editor_fields(share.code_snippet), "share_info": share},
        )

    async def deactivate_share(self, share_id: str) -> None:
        def merge(state: SessionState, _: None) -> dict[str, Any]:
            share = state.share_info
            return {"share_info": None if share and share.share_id == share_id else share}

        await self._run(
            lambda: self._gateway.deactivate_share(share_id),
            failure_message=MSG_DEACTIVATE_FAILED,
            flag=BusyFlag.SHARING,
            merge=merge,
            success_message=MSG_DEACTIVATED,
        )

    async def load_share_statistics(self) -> ShareStatistics | None:
        outcome = await self._run(
            self._gateway.get_share_statistics,
            failure_message=MSG_STATISTICS_FAILED,
            flag=BusyFlag.LOADING,
        )
        return outcome.applied_value

    # Error slot

    def clear_error(self) -> None:
        self._apply(error=None)

    def set_error(self, message: str) -> None:
        self._apply(error=message)
