"""Presenter interface and the built-in presenters."""
import logging
from typing import Any, Protocol, Sequence

from shippo_slot.logic.models import Item, JackpotCombo, ReelPhase, RoundOutcome
from shippo_slot.protocol import EventType, ItemView


logger = logging.getLogger(__name__)

# Particles joining subject, object and verb
SUBJECT_PARTICLE = "は"
OBJECT_PARTICLE = "を"


def format_sentence(items: Sequence[Item]) -> str:
    """Join (subject, object, verb) into a sentence: 'わたしは ごはんを たべる'."""
    subject, obj, verb = items
    return (
        f"{subject.spoken_form}{SUBJECT_PARTICLE} "
        f"{obj.spoken_form}{OBJECT_PARTICLE} "
        f"{verb.spoken_form}"
    )


class Presenter(Protocol):
    """
    Receives every state transition of the spin controller.

    Called synchronously from inside controller operations. A presenter
    must not call back into the controller.
    """

    def on_round_start(self) -> None:
        ...

    def on_reel_phase_changed(
        self, index: int, phase: ReelPhase, landed_item: Item | None
    ) -> None:
        ...

    def on_reach(self, combo: JackpotCombo) -> None:
        ...

    def on_outcome(self, outcome: RoundOutcome, items: Sequence[Item]) -> None:
        ...


class LoggingPresenter:
    """Default presenter that logs transitions."""

    def on_round_start(self) -> None:
        logger.debug("Round start")

    def on_reel_phase_changed(
        self, index: int, phase: ReelPhase, landed_item: Item | None
    ) -> None:
        if landed_item is not None:
            logger.debug("Reel %d %s on %s", index, phase.value, landed_item.spoken_form)
        else:
            logger.debug("Reel %d %s", index, phase.value)

    def on_reach(self, combo: JackpotCombo) -> None:
        logger.info("Reach! %s", "/".join(combo.combo[:2]))

    def on_outcome(self, outcome: RoundOutcome, items: Sequence[Item]) -> None:
        sentence = format_sentence(items)
        if outcome.is_jackpot:
            logger.info("%s: %s (%s)", outcome.grade, sentence, outcome.meaning)
        else:
            logger.info("HAZURE: %s", sentence)


class RecordingPresenter:
    """Collects transitions as protocol event dicts, in emission order."""

    def __init__(self):
        self.events: list[dict[str, Any]] = []

    def on_round_start(self) -> None:
        self.events.append({"type": EventType.ROUND_START.value})

    def on_reel_phase_changed(
        self, index: int, phase: ReelPhase, landed_item: Item | None
    ) -> None:
        event: dict[str, Any] = {
            "type": EventType.REEL_PHASE.value,
            "reel": index,
            "phase": phase.value,
        }
        if landed_item is not None:
            event["item"] = ItemView.from_item(landed_item).model_dump()
        self.events.append(event)

    def on_reach(self, combo: JackpotCombo) -> None:
        self.events.append({
            "type": EventType.REACH.value,
            "prefix": list(combo.combo[:2]),
        })

    def on_outcome(self, outcome: RoundOutcome, items: Sequence[Item]) -> None:
        self.events.append({
            "type": EventType.OUTCOME.value,
            "result": outcome.kind.value,
            "sentence": format_sentence(items),
            "items": [item.spoken_form for item in items],
            "meaning": outcome.meaning,
            "grade": outcome.grade,
        })

    def get_events(self, event_type: EventType) -> list[dict[str, Any]]:
        """Return recorded events of one type."""
        return [e for e in self.events if e["type"] == event_type.value]

    def clear(self) -> None:
        self.events.clear()


class CompositePresenter:
    """Fans every notification out to several presenters, in order."""

    def __init__(self, presenters: Sequence[Presenter]):
        self.presenters = list(presenters)

    def on_round_start(self) -> None:
        for presenter in self.presenters:
            presenter.on_round_start()

    def on_reel_phase_changed(
        self, index: int, phase: ReelPhase, landed_item: Item | None
    ) -> None:
        for presenter in self.presenters:
            presenter.on_reel_phase_changed(index, phase, landed_item)

    def on_reach(self, combo: JackpotCombo) -> None:
        for presenter in self.presenters:
            presenter.on_reach(combo)

    def on_outcome(self, outcome: RoundOutcome, items: Sequence[Item]) -> None:
        for presenter in self.presenters:
            presenter.on_outcome(outcome, items)
