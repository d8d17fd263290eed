"""
FastAPI application entry point for the DocChat runtime.

Responsibilities:
- build the SessionStore that owns one ConversationController per session
- include session routes under /chat
- map every error to the `{success: false, error: {code, message}}` envelope

Run with:

    uvicorn runtime.api.server:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from configs.logging_config import configure_logging
from configs.settings import settings
from runtime.factory import build_controller_factory
from runtime.store.session_store import SessionStore
from . import session_routes


logger = logging.getLogger(__name__)


def _envelope_error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": code, "message": message}},
    )


def create_app(session_store: SessionStore) -> FastAPI:
    app = FastAPI(title="DocChat Runtime")

    # Initialize the router module with the store, then include it.
    session_routes.init_routes(session_store=session_store)
    app.include_router(session_routes.router, prefix="/chat")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail
        if isinstance(detail, dict):
            return _envelope_error(
                exc.status_code, detail.get("code", "ERROR"), detail.get("message", "")
            )
        return _envelope_error(exc.status_code, f"HTTP_{exc.status_code}", str(detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _envelope_error(400, "BAD_REQUEST", "Invalid request body")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("[API] Unexpected error on %s %s", request.method, request.url.path)
        return _envelope_error(500, "INTERNAL_ERROR", "Internal server error")

    @app.get("/healthz")
    def health_check():
        """
        Simple health check endpoint for uptime monitoring.
        """
        return {"status": "ok", "sessions": len(session_store)}

    return app


# ---------------------------------------------------------------------------
# Default app
# ---------------------------------------------------------------------------

configure_logging(settings.log_level)

session_store = SessionStore(
    controller_factory=build_controller_factory(),
    idle_ttl=settings.session_idle_ttl,
    max_sessions=settings.max_sessions,
)
app = create_app(session_store)
