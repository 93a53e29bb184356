"""
Console package.

The rendering surface pages draw on:
- ConsoleIO: Encoding-aware reads and writes, keystroke decoding
- Console: Headers, full-width rows, password prompts and the arrow-key menu
"""

from .display import Console
from .io import ConsoleIO
from .keys import Key, Keystroke

__all__ = [
    'Console',
    'ConsoleIO',
    'Key',
    'Keystroke',
]
