"""Input source: maps keys and buttons to controller calls."""
from enum import Enum

from shippo_slot.logic.controller import SpinController


class Command(str, Enum):
    """Controller call an input resolves to."""

    START = "start"
    STOP_REEL = "stop_reel"
    STOP_NEXT = "stop_next"
    IGNORE = "ignore"


# While idle, any of these starts a round
START_KEYS = frozenset({"Space", "Enter", "ArrowLeft", "ArrowDown", "ArrowRight", "ArrowUp"})

# While spinning, these target one reel
REEL_KEYS: dict[str, int] = {
    "ArrowLeft": 0,
    "Digit1": 0,
    "ArrowDown": 1,
    "Digit2": 1,
    "ArrowRight": 2,
    "Digit3": 2,
}

# While spinning, these stop the lowest-indexed spinning reel
MASTER_STOP_KEYS = frozenset({"Space", "Enter"})

STOP_BUTTONS: dict[str, int] = {"stop-1": 0, "stop-2": 1, "stop-3": 2}


class KeyboardInput:
    """
    Keyboard and button mapping of the machine.

    Idle: Space, Enter or any arrow key starts a round.
    Spinning: ArrowLeft/Digit1, ArrowDown/Digit2, ArrowRight/Digit3 stop
    reels 1-3; Space/Enter stop the next spinning reel.
    Anything else is ignored.
    """

    def __init__(self, controller: SpinController):
        self.controller = controller

    def resolve_key(self, code: str) -> tuple[Command, int | None]:
        """Map a key code to a command given the current controller state."""
        if not self.controller.is_active:
            if code in START_KEYS:
                return Command.START, None
            return Command.IGNORE, None

        if code in REEL_KEYS:
            return Command.STOP_REEL, REEL_KEYS[code]
        if code in MASTER_STOP_KEYS:
            return Command.STOP_NEXT, None
        return Command.IGNORE, None

    def resolve_button(self, name: str) -> tuple[Command, int | None]:
        """Map a button name to a command. Buttons act regardless of state."""
        if name == "start":
            return Command.START, None
        if name in STOP_BUTTONS:
            return Command.STOP_REEL, STOP_BUTTONS[name]
        return Command.IGNORE, None

    def dispatch(self, command: Command, reel: int | None = None) -> bool:
        """Run a resolved command. Returns whether the controller accepted it."""
        if command == Command.START:
            return self.controller.start_round()
        if command == Command.STOP_REEL:
            return self.controller.stop_reel(reel)
        if command == Command.STOP_NEXT:
            return self.controller.stop_next_spinning()
        return False

    def handle_key(self, code: str) -> bool:
        return self.dispatch(*self.resolve_key(code))

    def press_button(self, name: str) -> bool:
        return self.dispatch(*self.resolve_button(name))
