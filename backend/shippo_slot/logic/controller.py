"""Spin controller: the reel state machine of one game session."""
import logging
import uuid

from shippo_slot.logic.catalog import ReelCatalog
from shippo_slot.logic.evaluator import OutcomeEvaluator
from shippo_slot.logic.models import (
    REEL_COUNT,
    GameStatus,
    ReelIndexError,
    ReelPhase,
    RoundState,
)
from shippo_slot.logic.presenter import LoggingPresenter, Presenter
from shippo_slot.logic.rng import ProductionRNG, RNGBase


logger = logging.getLogger(__name__)


class SpinController:
    """
    Orchestrates one game session.

    Implements:
    - start_round: all three reels start spinning
    - stop_reel / stop_next_spinning: land a reel on a uniform random item
    - reach detection after the second stop (reels 0 and 1 only)
    - final Jackpot/NoWin evaluation after the third stop

    Guard violations (starting while spinning, stopping a reel that is not
    spinning) are silent no-ops that return False. An out-of-range reel
    index raises ReelIndexError.

    The controller owns its RoundState exclusively; pass a restored
    RoundState to resume a persisted session.
    """

    def __init__(
        self,
        catalog: ReelCatalog,
        presenter: Presenter | None = None,
        rng: RNGBase | None = None,
        round_state: RoundState | None = None,
    ):
        self.catalog = catalog
        self.presenter = presenter or LoggingPresenter()
        self.rng = rng or ProductionRNG()
        self.evaluator = OutcomeEvaluator(catalog)
        self._round = round_state or RoundState()

    @property
    def round_state(self) -> RoundState:
        return self._round

    @property
    def is_active(self) -> bool:
        """True while any reel is spinning or stopping."""
        return any(reel.is_active for reel in self._round.reels)

    @property
    def status(self) -> GameStatus:
        if self._round.outcome is not None:
            return GameStatus.DONE
        if self.is_active:
            if self._round.reach_triggered:
                return GameStatus.REACHING
            return GameStatus.SPINNING
        return GameStatus.IDLE

    def start_round(self) -> bool:
        """
        Start all three reels.

        Returns False without touching state while a round is still active.
        """
        if self.is_active:
            logger.debug("start_round ignored: round %s in progress", self._round.round_id)
            return False

        self._round.reset_for_new_round(round_id=str(uuid.uuid4()))
        self.presenter.on_round_start()
        for index, reel in enumerate(self._round.reels):
            reel.begin()
            self.presenter.on_reel_phase_changed(index, reel.phase, None)
        return True

    def stop_reel(self, index: int) -> bool:
        """
        Stop one reel and land it on a random item of its pool.

        Returns False if the reel is not spinning.
        """
        if isinstance(index, bool) or not 0 <= index < REEL_COUNT:
            raise ReelIndexError(index)

        reel = self._round.reels[index]
        if not reel.request_stop():
            return False
        self.presenter.on_reel_phase_changed(index, ReelPhase.STOPPING, None)

        pool = self.catalog.items_for(index)
        landing_index = self.rng.landing_index(len(pool))
        reel.finalize(landing_index, pool[landing_index])
        self._round.stopped_count += 1
        self.presenter.on_reel_phase_changed(index, reel.phase, reel.landed_item)

        self._check_round_flow()
        return True

    def stop_next_spinning(self) -> bool:
        """Stop the lowest-indexed spinning reel. False if none is spinning."""
        for index, reel in enumerate(self._round.reels):
            if reel.phase == ReelPhase.SPINNING:
                return self.stop_reel(index)
        return False

    def _check_round_flow(self) -> None:
        """Signal reach after the second stop, evaluate after the third."""
        state = self._round

        if state.stopped_count == 2 and not state.reach_triggered:
            combo = self.evaluator.find_reach(state)
            if combo is not None:
                state.reach_triggered = True
                state.reach_combo = combo
                self.presenter.on_reach(combo)

        if state.stopped_count == REEL_COUNT and state.outcome is None:
            outcome = self.evaluator.evaluate(state)
            state.outcome = outcome
            self.presenter.on_outcome(outcome, state.landed_items())
