"""Interactive terminal input for categorizing transactions."""

import logging

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl

from .session import Signal

logger = logging.getLogger(__name__)

# UI actions that are not decisions
UNDO = "undo"
RATIO_UP = "ratio_up"
RATIO_DOWN = "ratio_down"
QUIT = "quit"

# prompt_toolkit key name -> action
KEY_ACTIONS: dict[str, str] = {
    "left": Signal.LEFT.value,
    "right": Signal.RIGHT.value,
    "up": Signal.UP.value,
    "p": Signal.LEFT.value,  # personal
    "s": Signal.RIGHT.value,  # ratio split
    "h": Signal.UP.value,  # half
    "u": UNDO,
    "backspace": UNDO,
    "+": RATIO_UP,
    "=": RATIO_UP,
    "-": RATIO_DOWN,
    "q": QUIT,
    "c-c": QUIT,
    "c-d": QUIT,
}

HELP_TEXT = "← personal   ↑ 50/50   → ratio split   u undo   +/- ratio   q quit"


def action_to_signal(action: str) -> Signal | None:
    """Return the decision signal for an action, or None for other actions."""
    try:
        return Signal(action)
    except ValueError:
        return None


def build_key_bindings() -> KeyBindings:
    """Key bindings that end the prompt with the pressed key's action."""
    kb = KeyBindings()

    def bind(key: str, action: str) -> None:
        @kb.add(key)
        def _(event: KeyPressEvent) -> None:
            event.app.exit(result=action)

    for key, action in KEY_ACTIONS.items():
        bind(key, action)

    return kb


def read_action(message: str = HELP_TEXT) -> str:
    """
    Wait for a single key press and return its action.

    Unbound keys are ignored.

    Returns:
        A Signal value ("left", "right", "up") or one of UNDO, RATIO_UP,
        RATIO_DOWN, QUIT
    """
    app: Application[str] = Application(
        layout=Layout(Window(FormattedTextControl(message), height=1)),
        key_bindings=build_key_bindings(),
        full_screen=False,
    )
    action = app.run()
    logger.debug(f"Key action: {action}")
    return action


def confirm_start(count: int) -> bool:
    """
    Simple yes/no confirmation before categorizing.

    Args:
        count: Number of transactions found in the statement

    Returns:
        True if confirmed, False otherwise
    """
    try:
        response = input(f"   Categorize {count} transactions? [Y/n] ").strip().lower()
    except (KeyboardInterrupt, EOFError):
        print("\n⏭️  Cancelled")
        return False

    return response in ("", "y", "yes")
