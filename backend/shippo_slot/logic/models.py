"""Reel and round state models."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# Reel order: subject, object, verb
REEL_COUNT = 3


class ReelIndexError(IndexError):
    """Reel index outside [0, REEL_COUNT). Programming error in the caller."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Reel index {index} out of range [0, {REEL_COUNT})")


class InvalidTransitionError(RuntimeError):
    """Reel asked to make a phase transition its lifecycle does not allow."""


class Item(BaseModel):
    """One reel entry. Identity is the spoken (kana) form."""

    model_config = ConfigDict(frozen=True)

    spoken_form: str
    display_form: str
    meaning: str


class JackpotCombo(BaseModel):
    """A winning (subject, object, verb) triple of spoken forms."""

    model_config = ConfigDict(frozen=True)

    combo: tuple[str, ...]
    meaning: str
    grade: str = "OATARI"


class ReelPhase(str, Enum):
    """Lifecycle phase of a single reel."""

    IDLE = "IDLE"
    SPINNING = "SPINNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"


class GameStatus(str, Enum):
    """Global status derived from the three reels."""

    IDLE = "IDLE"
    SPINNING = "SPINNING"
    REACHING = "REACHING"
    DONE = "DONE"


class OutcomeKind(str, Enum):
    """Terminal outcome of a round."""

    JACKPOT = "JACKPOT"
    NO_WIN = "NO_WIN"


class RoundOutcome(BaseModel):
    """Result of the final evaluation."""

    kind: OutcomeKind
    combo: JackpotCombo | None = None

    @classmethod
    def jackpot(cls, combo: JackpotCombo) -> "RoundOutcome":
        return cls(kind=OutcomeKind.JACKPOT, combo=combo)

    @classmethod
    def no_win(cls) -> "RoundOutcome":
        return cls(kind=OutcomeKind.NO_WIN)

    @property
    def is_jackpot(self) -> bool:
        return self.kind == OutcomeKind.JACKPOT

    @property
    def meaning(self) -> str | None:
        return self.combo.meaning if self.combo else None

    @property
    def grade(self) -> str | None:
        return self.combo.grade if self.combo else None


class ReelState(BaseModel):
    """
    State of one reel.

    Lifecycle: IDLE -> SPINNING -> STOPPING -> STOPPED -> (reset) -> IDLE.
    Guarded transitions return False instead of raising, so duplicate
    input (key mashing, button plus key alias) is absorbed.
    """

    phase: ReelPhase = ReelPhase.IDLE
    landed_index: int | None = None
    landed_item: Item | None = None

    def begin(self) -> bool:
        """IDLE/STOPPED -> SPINNING. No-op while the reel is active."""
        if self.phase not in (ReelPhase.IDLE, ReelPhase.STOPPED):
            return False
        self.landed_index = None
        self.landed_item = None
        self.phase = ReelPhase.SPINNING
        return True

    def request_stop(self) -> bool:
        """SPINNING -> STOPPING. No-op if already stopping or stopped."""
        if self.phase != ReelPhase.SPINNING:
            return False
        self.phase = ReelPhase.STOPPING
        return True

    def finalize(self, landing_index: int, item: Item) -> None:
        """STOPPING -> STOPPED, recording the landed item."""
        if self.phase != ReelPhase.STOPPING:
            raise InvalidTransitionError(
                f"finalize() requires STOPPING, reel is {self.phase.value}"
            )
        self.landed_index = landing_index
        self.landed_item = item
        self.phase = ReelPhase.STOPPED

    def reset(self) -> None:
        """Any phase -> IDLE, clearing the landing."""
        self.phase = ReelPhase.IDLE
        self.landed_index = None
        self.landed_item = None

    @property
    def is_active(self) -> bool:
        return self.phase in (ReelPhase.SPINNING, ReelPhase.STOPPING)


class RoundState(BaseModel):
    """
    State of the current round, owned by the spin controller.

    Tracks:
    - the three reels (subject, object, verb)
    - stopped_count (always equals the number of STOPPED reels)
    - reach_triggered / reach_combo (set at most once per round)
    - outcome (set exactly once, when all reels have stopped)
    """

    round_id: str | None = None
    reels: list[ReelState] = Field(
        default_factory=lambda: [ReelState() for _ in range(REEL_COUNT)]
    )
    stopped_count: int = 0
    reach_triggered: bool = False
    reach_combo: JackpotCombo | None = None
    outcome: RoundOutcome | None = None

    def reset_for_new_round(self, round_id: str | None = None) -> None:
        """Reset all reels to IDLE and clear round results."""
        self.round_id = round_id
        for reel in self.reels:
            reel.reset()
        self.stopped_count = 0
        self.reach_triggered = False
        self.reach_combo = None
        self.outcome = None

    def is_stopped(self, index: int) -> bool:
        return self.reels[index].phase == ReelPhase.STOPPED

    def landed_items(self) -> list[Item | None]:
        """Landed items in reel order (None for reels not yet stopped)."""
        return [reel.landed_item for reel in self.reels]
