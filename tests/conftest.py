"""Pytest configuration and fixtures.

This module sets up test environment variables BEFORE any application
modules are imported, so the cached Settings see test values.
"""

import os

os.environ.setdefault("APP_NAME", "code-playground-test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("API_BASE_URL", "http://backend.test/api/v1")
os.environ.setdefault("RUNTIME_CONFIG_FILE", "")
os.environ.setdefault("REQUEST_TIMEOUT_SECONDS", "30")
os.environ.setdefault("EXECUTION_TIMEOUT_SECONDS", "10")
os.environ.setdefault("NOTIFIER", "playground.services.notify.queue.QueueNotifier")

from unittest.mock import AsyncMock

import pytest
from payloads import execution_payload, share_payload, snippet_payload


@pytest.fixture
def make_snippet():
    """Factory for Snippet models."""
    from playground.schemas import Snippet

    def factory(**kwargs):
        return Snippet.model_validate(snippet_payload(**kwargs))

    return factory


@pytest.fixture
def make_execution():
    """Factory for ExecutionResult models."""
    from playground.schemas import ExecutionResult

    def factory(**kwargs):
        return ExecutionResult.model_validate(execution_payload(**kwargs))

    return factory


@pytest.fixture
def make_share():
    """Factory for ShareInfo models."""
    from playground.schemas import ShareInfo

    def factory(**kwargs):
        return ShareInfo.model_validate(share_payload(**kwargs))

    return factory


@pytest.fixture
def make_page():
    """Factory for PageResponse models from model instances."""
    from playground.schemas import PageResponse

    def factory(items):
        return PageResponse(content=list(items), size=len(items), total_elements=len(items))

    return factory


@pytest.fixture
def mock_gateway():
    """Create a mock API gateway client."""
    from playground.services.gateway import ApiGatewayClient

    return AsyncMock(spec=ApiGatewayClient)


@pytest.fixture
def notifier():
    """Create a buffering notifier the tests can inspect."""
    from playground.services.notify.queue import QueueNotifier

    return QueueNotifier(max_size=50)


@pytest.fixture
def controller(mock_gateway, notifier):
    """Create a session controller backed by the mock gateway."""
    from playground.services.session_controller import WorkspaceSessionController

    return WorkspaceSessionController(mock_gateway, notifier)
