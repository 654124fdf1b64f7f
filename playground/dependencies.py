"""FastAPI dependencies for the workspace session."""

from fastapi import HTTPException, Request, status

from playground.services.session_controller import WorkspaceSessionController


def get_session_controller(request: Request) -> WorkspaceSessionController:
    """FastAPI dependency returning the session owned by this app instance.

    The controller is created in the application lifespan and closed on
    shutdown, so its lifetime matches the served session.

    Raises:
        HTTPException: 503 if the session has not been started.
    """
    controller = getattr(request.app.state, "session", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session not started",
        )
    return controller
