"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.config import settings
from playground import __version__
from playground.routers import health, session
from playground.services.gateway import ApiGatewayClient
from playground.services.session_controller import WorkspaceSessionController

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup - one session per app instance
    gateway = ApiGatewayClient()
    app.state.session = WorkspaceSessionController(gateway)
    logger.info(f"Session started against {gateway.base_url}")
    yield
    # Shutdown - end the session and close backend connections
    await app.state.session.close()
    app.state.session = None


app = FastAPI(
    title="Code Playground",
    description="Workspace session for the code editing, execution and sharing service",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(session.router, tags=["Session"])


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
