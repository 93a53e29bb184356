"""
Keystroke decoding.

Maps single characters and ANSI escape sequences to named keys.
"""

from dataclasses import dataclass
from enum import Enum


class Key(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    SPACE = "space"
    BACKSPACE = "backspace"
    TAB = "tab"
    ESCAPE = "escape"
    CHAR = "char"
    UNKNOWN = "unknown"


# Final byte of "ESC [ x" / "ESC O x" cursor sequences
ARROW_KEYS = {
    "A": Key.UP,
    "B": Key.DOWN,
    "C": Key.RIGHT,
    "D": Key.LEFT,
}

CONTROL_KEYS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    " ": Key.SPACE,
    "\x08": Key.BACKSPACE,
    "\x7f": Key.BACKSPACE,
    "\t": Key.TAB,
    "\x1b": Key.ESCAPE,
}


@dataclass(frozen=True)
class Keystroke:
    key: Key
    char: str = ""

    @classmethod
    def from_char(cls, char: str) -> "Keystroke":
        return cls(CONTROL_KEYS.get(char, Key.CHAR), char)
