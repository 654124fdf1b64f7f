"""Application configuration using Pydantic Settings."""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Used when neither the runtime config file nor the environment provide a value
DEFAULT_API_BASE_URL = "http://localhost:8080/api/v1"

RUNTIME_API_BASE_URL_KEY = "API_BASE_URL"


def load_runtime_config(path: str) -> dict:
    """Load the runtime configuration document.

    The document is a JSON object deployers can rewrite next to a built
    bundle, e.g. ``{"API_BASE_URL": "https://playground.example.com/api/v1"}``.

    Args:
        path: Filesystem path of the JSON document.

    Returns:
        The parsed object, or an empty dict if missing or invalid.
    """
    if not path:
        return {}

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug(f"Runtime config file {path} not found")
        return {}
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read runtime config {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Runtime config {path} is not a JSON object")
        return {}
    return data


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values may also come from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Code Playground"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server hosting the session binding
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS
    cors_origins: list[str] = ["*"]

    # Backend API
    api_base_url: str = ""  # Build-time default, overridden by the runtime config file
    runtime_config_file: str = ""  # JSON document with API_BASE_URL
    request_timeout_seconds: float = 30.0

    # Execution (hint forwarded to the server, which enforces it)
    execution_timeout_seconds: int = 10

    # Paging
    snippet_page_size: int = 50
    history_page_size: int = 20

    # Editor defaults for a new document
    default_title: str = "New Code"
    default_author: str = "Anonymous"
    default_language: str = "JAVASCRIPT"

    # Notifications
    # NOTIFIER: Fully-qualified Python class name of the Notifier to use.
    #   Log only:     playground.services.notify.log.LogNotifier
    #   View polling: playground.services.notify.queue.QueueNotifier
    notifier: str = "playground.services.notify.queue.QueueNotifier"
    notification_buffer_size: int = 100

    @property
    def resolved_api_base_url(self) -> str:
        """Get the backend base address.

        Priority: runtime config file, then ``API_BASE_URL``, then the local default.
        """
        runtime_value = load_runtime_config(self.runtime_config_file).get(
            RUNTIME_API_BASE_URL_KEY
        )
        if isinstance(runtime_value, str) and runtime_value.strip():
            return runtime_value.strip()
        if self.api_base_url:
            return self.api_base_url
        return DEFAULT_API_BASE_URL


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
