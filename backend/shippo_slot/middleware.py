"""Middleware for request validation and error handling."""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shippo_slot.errors import ErrorCode, GameError


logger = logging.getLogger(__name__)


class SessionIdMiddleware(BaseHTTPMiddleware):
    """Require the X-Session-Id header on game routes."""

    # Path prefixes that require X-Session-Id
    PROTECTED_PREFIXES = ("/state", "/round", "/reels", "/input")

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.PROTECTED_PREFIXES):
            session_id = request.headers.get("X-Session-Id")
            if not session_id:
                error = GameError(
                    ErrorCode.INVALID_REQUEST,
                    "Missing required header: X-Session-Id",
                )
                return error.to_response()
            # Store session_id in request state for handlers
            request.state.session_id = session_id

        return await call_next(request)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert GameError exceptions to protocol-compliant responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except GameError as e:
            return e.to_response()
        except Exception as e:
            logger.exception("Unhandled error on %s", request.url.path)
            error = GameError(ErrorCode.INTERNAL_ERROR, str(e))
            return error.to_response()
