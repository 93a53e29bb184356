"""
Console display operations.

Screen layout helpers (headers, full-width rows, inverted highlights) and the
interactive menu built on top of ConsoleIO.
"""

from typing import Optional, TypeVar, TYPE_CHECKING

from ..exceptions import EmptySelectionError
from ..utils.config import UIConfig, get_config
from ..utils.logger import get_logger
from .io import ConsoleIO
from .keys import Key, Keystroke

if TYPE_CHECKING:
    from telnetlib3 import TelnetReader, TelnetWriter
    from ..ui.components import SelectableList

logger = get_logger("console.display")

T = TypeVar('T')

DEFAULT_PROMPT = ": "


class Console(ConsoleIO):
    """
    Rendering surface shared by every page of one session.

    Honours the `ui` configuration: line width, ANSI support and the
    characters used for rules and password masking.
    """

    def __init__(
        self,
        reader: Optional["TelnetReader"],
        writer: Optional["TelnetWriter"],
        ui: Optional[UIConfig] = None,
    ):
        self.ui = ui or get_config().ui
        super().__init__(reader, writer, encoding=self.ui.encoding)
        self._inverted = False
        self._cursor_visible = True

    @property
    def width(self) -> int:
        return self.ui.width

    async def _update(self) -> None:
        if not self.ui.ansi:
            return
        await self.write("\x1b[7m" if self._inverted else "\x1b[0m")
        await self.write("\x1b[?25h" if self._cursor_visible else "\x1b[?25l")

    async def invert(self, inverted: Optional[bool] = None) -> None:
        """Set reverse video; None keeps the current state and reapplies it."""
        if inverted is not None:
            self._inverted = inverted
        await self._update()

    async def cursor_visible(self, visible: Optional[bool] = None) -> None:
        if visible is not None:
            self._cursor_visible = visible
        await self._update()

    async def reset(self) -> None:
        """Default colours and a visible cursor."""
        self._inverted = False
        self._cursor_visible = True
        await self._update()

    async def clear_screen(self) -> None:
        if self.ui.ansi:
            await self.write("\x1b[2J\x1b[H")
        else:
            await self.write("\r\n" * self.ui.rows)

    async def readline(
        self,
        prompt: str = DEFAULT_PROMPT,
        echo: bool = True,
        mask: Optional[str] = None,
        max_length: int = 255,
    ) -> str:
        """Read a line, showing the input field in reverse video."""
        if prompt:
            await self.write(prompt)

        await self.invert(True)
        try:
            text = await self._read_line(echo, mask, max_length)
        finally:
            await self.invert(False)

        await self.writeline()
        return text

    async def read_password(self, prompt: str = DEFAULT_PROMPT, max_length: int = 64) -> str:
        return await self.readline(prompt, mask=self.ui.password_char, max_length=max_length)

    async def print_line(self, line_char: Optional[str] = None) -> None:
        await self.writeline((line_char or self.ui.line_char) * self.width)

    async def print_alt_line(self) -> None:
        await self.print_line(self.ui.alt_line_char)

    async def print_full_width(
        self,
        text: str,
        prefix: Optional[str] = None,
        suffix: Optional[str] = None,
    ) -> None:
        """
        Print a row exactly `width` columns wide.

        The prefix sits left in two columns and the suffix right in two
        columns; the suffix defaults to the prefix.
        """
        left = prefix or " "
        right = suffix or prefix or " "
        await self.writeline(f"{left:<2}{text:<{self.width - 4}}{right:>2}")

    async def print_full_width_inverted(
        self,
        text: str,
        prefix: Optional[str] = None,
        suffix: Optional[str] = None,
    ) -> None:
        await self.invert(True)
        await self.print_full_width(text, prefix, suffix)
        await self.invert(False)

    async def print_header(self, title: str, subtitle: Optional[str] = None) -> None:
        """Clear the screen and draw the framed page title."""
        print_title = title
        if subtitle and subtitle.strip():
            print_title += f" - {subtitle}"

        await self.clear_screen()
        await self.print_line()
        await self.print_full_width(print_title, self.ui.line_char)
        await self.print_line()
        await self.writeline()

    async def print_sub_header(self, title: str) -> None:
        await self.writeline(f"  {title}")
        await self.print_alt_line()

    async def wait_for_any(self, prompt: str = "Press any key to continue") -> Keystroke:
        await self.writeline(f"\t[{prompt}]")
        return await self.read_key()

    async def show_menu(self, menu: "SelectableList[T]", title: Optional[str] = None) -> T:
        """
        Let the user pick an entry with the arrow keys.

        Up and Down move the cursor with wrap-around; Enter or Space commits
        and returns the chosen entry's producer result.
        """
        if not len(menu):
            raise EmptySelectionError("Menu has no items")

        await self.cursor_visible(False)
        while True:
            if title:
                await self.print_header(title)
            else:
                await self.clear_screen()

            for i in range(menu.count):
                if i == menu.index:
                    await self.print_full_width_inverted(menu.label_at(i), ">", "<")
                else:
                    await self.print_full_width(menu.label_at(i))

            keystroke = await self.read_key()

            if keystroke.key in (Key.ENTER, Key.SPACE):
                break
            elif keystroke.key == Key.UP:
                menu.prev_index()
            elif keystroke.key == Key.DOWN:
                menu.next_index()

        await self.reset()
        logger.debug(f"Menu selection: {menu.current_label}")
        return menu.invoke()
