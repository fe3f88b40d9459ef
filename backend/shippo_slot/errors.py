"""Error codes and exceptions of the HTTP facade."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shippo_slot.config import settings


class ErrorCode(str, Enum):
    """Protocol error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_REEL_INDEX = "INVALID_REEL_INDEX"
    SESSION_BUSY = "SESSION_BUSY"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# HTTP status mapping
ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_REEL_INDEX: 400,
    ErrorCode.SESSION_BUSY: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Whether the client may simply retry
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INVALID_REEL_INDEX: False,
    ErrorCode.SESSION_BUSY: True,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class GameError(Exception):
    """Base game error that maps to protocol error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )
