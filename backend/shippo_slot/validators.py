"""Request validators."""
from shippo_slot.errors import ErrorCode, GameError
from shippo_slot.logic.models import REEL_COUNT
from shippo_slot.protocol import InputRequest


def validate_reel_index(index: int) -> None:
    """
    Validate a reel index from the URL.

    Raises INVALID_REEL_INDEX outside [0, REEL_COUNT). The controller treats
    such an index as a programming error, so it must never reach it.
    """
    if not 0 <= index < REEL_COUNT:
        raise GameError(
            ErrorCode.INVALID_REEL_INDEX,
            f"Reel index {index} out of range [0, {REEL_COUNT}).",
        )


def validate_input_request(request: InputRequest) -> None:
    """Exactly one of code/button must be set."""
    if (request.code is None) == (request.button is None):
        raise GameError(
            ErrorCode.INVALID_REQUEST,
            "Provide exactly one of 'code' or 'button'.",
        )
