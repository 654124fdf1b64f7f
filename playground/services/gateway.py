"""API gateway client - the single choke point for backend calls.

Wraps an ``httpx.AsyncClient`` configured with the backend base address,
a fixed timeout and JSON content negotiation. Every operation maps to one
backend endpoint; there are no retries and no caching. Failures of any kind
are raised as :class:`GatewayError`.
"""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from common.config import settings
from playground.schemas.base import WireModel
from playground.schemas.common import ApiError, PageResponse
from playground.schemas.execution import ExecutionRequest, ExecutionResult, ExecutionStatus
from playground.schemas.share import CleanupResult, ShareInfo, ShareRequest, ShareStatistics
from playground.schemas.snippet import Language, Snippet, SnippetRequest

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_PAGE_SIZE = 20


class GatewayError(Exception):
    """A backend call failed.

    Attributes:
        method: HTTP method of the failed request.
        path: Request path relative to the base address.
        status_code: HTTP status, or None when no response was received.
        api_error: Parsed backend error envelope, when the body was one.
        original: The underlying httpx or parsing exception.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str,
        path: str,
        status_code: int | None = None,
        api_error: ApiError | None = None,
        original: Exception | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.path = path
        self.status_code = status_code
        self.api_error = api_error
        self.original = original

    @property
    def is_not_found(self) -> bool:
        return self.status_code == httpx.codes.NOT_FOUND

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None and isinstance(self.original, httpx.TransportError)


def _parse_api_error(response: httpx.Response) -> ApiError | None:
    """Extract the backend error envelope from a failed response, if present."""
    try:
        return ApiError.model_validate(response.json())
    except ValueError:
        return None


async def _log_request(request: httpx.Request) -> None:
    logger.info(f"[API] {request.method} {request.url.path}")


async def _log_response(response: httpx.Response) -> None:
    logger.info(f"[API] {response.status_code} {response.request.url.path}")


class ApiGatewayClient:
    """Typed client for the snippets, executions and shares resources."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Backend base address. Defaults to the resolved setting
                (runtime config file, then environment, then local default).
            timeout_seconds: Request timeout. Defaults to config value.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url or settings.resolved_api_base_url
        self.timeout_seconds = timeout_seconds or settings.request_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout_seconds),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )
        logger.debug(
            "Gateway client created",
            extra={"base_url": self.base_url, "timeout_seconds": self.timeout_seconds},
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "ApiGatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: WireModel | None = None,
    ) -> httpx.Response:
        """Send one request and raise GatewayError on any failure."""
        json_body = body.to_wire() if body is not None else None
        try:
            response = await self._client.request(method, path, params=params, json=json_body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            api_error = _parse_api_error(e.response)
            logger.error(
                f"[API] Response error: {e.response.status_code} {method} {path}",
                extra={"api_error": api_error.model_dump() if api_error else None},
            )
            message = api_error.message if api_error else f"HTTP {e.response.status_code}"
            raise GatewayError(
                message,
                method=method,
                path=path,
                status_code=e.response.status_code,
                api_error=api_error,
                original=e,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"[API] Request error: {method} {path}: {e!r}")
            raise GatewayError(
                str(e) or type(e).__name__,
                method=method,
                path=path,
                original=e,
            ) from e
        return response

    async def _fetch(
        self,
        model: type[ModelT],
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: WireModel | None = None,
    ) -> ModelT:
        """Send a request and validate the JSON body as ``model``."""
        response = await self._request(method, path, params=params, body=body)
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            logger.error(f"[API] Malformed response body for {method} {path}: {e}")
            raise GatewayError(
                "Malformed response from server",
                method=method,
                path=path,
                status_code=response.status_code,
                original=e,
            ) from e

    @staticmethod
    def _page(page: int, size: int) -> dict[str, int]:
        return {"page": page, "size": size}

    # Snippets

    async def list_snippets(
        self, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Snippet]:
        return await self._fetch(
            PageResponse[Snippet], "GET", "/snippets", params=self._page(page, size)
        )

    async def get_snippet(self, snippet_id: int) -> Snippet:
        return await self._fetch(Snippet, "GET", f"/snippets/{snippet_id}")

    async def create_snippet(self, request: SnippetRequest) -> Snippet:
        return await self._fetch(Snippet, "POST", "/snippets", body=request)

    async def update_snippet(self, snippet_id: int, request: SnippetRequest) -> Snippet:
        return await self._fetch(Snippet, "PUT", f"/snippets/{snippet_id}", body=request)

    async def delete_snippet(self, snippet_id: int) -> None:
        await self._request("DELETE", f"/snippets/{snippet_id}")

    async def search_snippets(
        self, keyword: str, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Snippet]:
        return await self._fetch(
            PageResponse[Snippet],
            "GET",
            "/snippets/search",
            params={"keyword": keyword, **self._page(page, size)},
        )

    async def list_snippets_by_author(
        self, author_name: str, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Snippet]:
        return await self._fetch(
            PageResponse[Snippet],
            "GET",
            f"/snippets/author/{quote(author_name, safe='')}",
            params=self._page(page, size),
        )

    async def list_snippets_by_language(
        self, language: Language, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Snippet]:
        return await self._fetch(
            PageResponse[Snippet],
            "GET",
            f"/snippets/language/{language.value}",
            params=self._page(page, size),
        )

    async def list_popular_snippets(
        self, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[Snippet]:
        return await self._fetch(
            PageResponse[Snippet], "GET", "/snippets/popular", params=self._page(page, size)
        )

    # Executions

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        return await self._fetch(ExecutionResult, "POST", "/executions/execute", body=request)

    async def get_execution(self, execution_id: int) -> ExecutionResult:
        return await self._fetch(ExecutionResult, "GET", f"/executions/{execution_id}")

    async def get_execution_history(
        self, snippet_id: int, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[ExecutionResult]:
        return await self._fetch(
            PageResponse[ExecutionResult],
            "GET",
            f"/executions/snippet/{snippet_id}",
            params=self._page(page, size),
        )

    async def get_latest_execution(self, snippet_id: int) -> ExecutionResult | None:
        """Get the most recent execution of a snippet.

        Returns:
            The latest ExecutionResult, or None if the snippet has never run.

        Raises:
            GatewayError: For any failure other than 404.
        """
        try:
            return await self._fetch(
                ExecutionResult, "GET", f"/executions/snippet/{snippet_id}/latest"
            )
        except GatewayError as e:
            if e.is_not_found:
                return None
            raise

    async def list_executions_by_status(
        self, status: ExecutionStatus, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[ExecutionResult]:
        return await self._fetch(
            PageResponse[ExecutionResult],
            "GET",
            f"/executions/status/{status.value}",
            params=self._page(page, size),
        )

    # Shares

    async def create_share(self, request: ShareRequest) -> ShareInfo:
        return await self._fetch(ShareInfo, "POST", "/shares", body=request)

    async def get_share(self, share_id: str) -> ShareInfo:
        return await self._fetch(ShareInfo, "GET", f"/shares/{quote(share_id, safe='')}")

    async def deactivate_share(self, share_id: str) -> None:
        await self._request("DELETE", f"/shares/{quote(share_id, safe='')}")

    async def list_shares_for_snippet(
        self, snippet_id: int, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[ShareInfo]:
        return await self._fetch(
            PageResponse[ShareInfo],
            "GET",
            f"/shares/snippet/{snippet_id}",
            params=self._page(page, size),
        )

    async def list_recent_shares(
        self, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[ShareInfo]:
        return await self._fetch(
            PageResponse[ShareInfo], "GET", "/shares/recent", params=self._page(page, size)
        )

    async def list_expiring_shares(
        self, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> PageResponse[ShareInfo]:
        return await self._fetch(
            PageResponse[ShareInfo], "GET", "/shares/expiring-soon", params=self._page(page, size)
        )

    async def cleanup_expired_shares(self) -> CleanupResult:
        return await self._fetch(CleanupResult, "POST", "/shares/cleanup-expired")

    async def get_share_statistics(self) -> ShareStatistics:
        return await self._fetch(ShareStatistics, "GET", "/shares/statistics")
