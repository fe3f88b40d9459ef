"""Protocol models for the HTTP facade."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from shippo_slot.config import settings
from shippo_slot.logic.models import Item, RoundOutcome, RoundState


# === Enums ===


class EventType(str, Enum):
    """Presenter events, in the order a round emits them."""

    ROUND_START = "roundStart"
    REEL_PHASE = "reelPhase"
    REACH = "reach"
    OUTCOME = "outcome"


class ButtonName(str, Enum):
    """On-screen buttons of the machine."""

    START = "start"
    STOP_1 = "stop-1"
    STOP_2 = "stop-2"
    STOP_3 = "stop-3"


# === Request Models ===


class InputRequest(BaseModel):
    """POST /input request body. Either a key code or a button name."""

    code: str | None = Field(default=None, description="KeyboardEvent.code, e.g. Space")
    button: ButtonName | None = Field(default=None)


# === Response Models ===


class ItemView(BaseModel):
    """Item as sent to clients."""

    spokenForm: str
    displayForm: str
    meaning: str

    @classmethod
    def from_item(cls, item: Item | None) -> "ItemView | None":
        if item is None:
            return None
        return cls(
            spokenForm=item.spoken_form,
            displayForm=item.display_form,
            meaning=item.meaning,
        )


class ReelView(BaseModel):
    """One reel in a state snapshot."""

    index: int
    phase: str
    item: ItemView | None = None


class OutcomeView(BaseModel):
    """Terminal outcome in a state snapshot."""

    result: str
    meaning: str | None = None
    grade: str | None = None
    combo: list[str] | None = None

    @classmethod
    def from_outcome(cls, outcome: RoundOutcome | None) -> "OutcomeView | None":
        if outcome is None:
            return None
        return cls(
            result=outcome.kind.value,
            meaning=outcome.meaning,
            grade=outcome.grade,
            combo=list(outcome.combo.combo) if outcome.combo else None,
        )


class SessionState(BaseModel):
    """GET /state response body and the state part of command responses."""

    roundId: str | None = None
    status: str
    reels: list[ReelView]
    stoppedCount: int = 0
    reachTriggered: bool = False
    outcome: OutcomeView | None = None

    @classmethod
    def from_round(cls, round_state: RoundState, status: str) -> "SessionState":
        return cls(
            roundId=round_state.round_id,
            status=status,
            reels=[
                ReelView(
                    index=i,
                    phase=reel.phase.value,
                    item=ItemView.from_item(reel.landed_item),
                )
                for i, reel in enumerate(round_state.reels)
            ],
            stoppedCount=round_state.stopped_count,
            reachTriggered=round_state.reach_triggered,
            outcome=OutcomeView.from_outcome(round_state.outcome),
        )


class CommandResponse(BaseModel):
    """Response of every game command."""

    protocolVersion: str = settings.protocol_version
    accepted: bool
    events: list[dict[str, Any]] = Field(default_factory=list)
    state: SessionState


class CatalogResponse(BaseModel):
    """GET /catalog response body."""

    protocolVersion: str = settings.protocol_version
    catalogHash: str
    subjects: list[ItemView]
    objects: list[ItemView]
    verbs: list[ItemView]
    jackpots: list[dict[str, Any]]
