"""Reach detection and final outcome evaluation."""
from typing import Sequence

from shippo_slot.logic.catalog import ReelCatalog
from shippo_slot.logic.models import (
    REEL_COUNT,
    Item,
    JackpotCombo,
    RoundOutcome,
    RoundState,
)


# Reach is only checked over this prefix of reels
REACH_REELS = (0, 1)


class OutcomeEvaluator:
    """
    Evaluates partial and complete landings against the jackpot list.

    Combos are scanned in catalog order and the first match wins.
    """

    def __init__(self, catalog: ReelCatalog):
        self.catalog = catalog

    def find_reach(self, round_state: RoundState) -> JackpotCombo | None:
        """
        Return the first combo whose prefix matches reels 0 and 1.

        Only meaningful with exactly two reels stopped, and those two
        being reels 0 and 1. Returns None otherwise.
        """
        if round_state.stopped_count != 2:
            return None
        if not all(round_state.is_stopped(i) for i in REACH_REELS):
            return None

        prefix = tuple(
            round_state.reels[i].landed_item.spoken_form for i in REACH_REELS
        )
        for jackpot in self.catalog.jackpots():
            if tuple(jackpot.combo[: len(REACH_REELS)]) == prefix:
                return jackpot
        return None

    def find_jackpot(self, items: Sequence[Item]) -> JackpotCombo | None:
        """Return the first combo matching all spoken forms in order."""
        spoken = tuple(item.spoken_form for item in items)
        for jackpot in self.catalog.jackpots():
            if tuple(jackpot.combo) == spoken:
                return jackpot
        return None

    def evaluate(self, round_state: RoundState) -> RoundOutcome:
        """Final evaluation once every reel has stopped."""
        if round_state.stopped_count != REEL_COUNT:
            raise ValueError(
                f"Cannot evaluate with {round_state.stopped_count}/{REEL_COUNT} reels stopped"
            )
        jackpot = self.find_jackpot(round_state.landed_items())
        if jackpot is None:
            return RoundOutcome.no_win()
        return RoundOutcome.jackpot(jackpot)
