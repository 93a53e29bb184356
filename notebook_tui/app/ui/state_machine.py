"""
Page navigation state machine.

The machine owns the "which screen are we on" state. Each visit asks the
page factory for a fresh page, announces its title to the rendering surface
and awaits the page's render(), which reports the next state.
"""

from enum import Enum
from typing import Callable, Dict, Mapping, Protocol, TYPE_CHECKING

from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .base import Page

logger = get_logger("ui.state_machine")


class PageState(Enum):
    """Discrete screens of the application."""

    LOGIN = "login"
    MENU = "menu"
    SHOW_NOTES = "show_notes"
    ADD_NOTE = "add_note"
    END = "end"


PageFactory = Callable[[], "Page"]


class HeaderSurface(Protocol):
    async def print_header(self, title: str) -> None: ...


class PageStateMachine:
    """
    Drives pages from LOGIN until END.

    A next state missing from the factory map ends the run. A missing entry
    for the current state is a configuration error and raises KeyError.
    Errors raised by a page propagate out of run() unchanged.
    """

    def __init__(self, pages: Mapping[PageState, PageFactory], surface: HeaderSurface):
        self.pages: Dict[PageState, PageFactory] = dict(pages)
        self.surface = surface
        self._state = PageState.LOGIN

    @property
    def state(self) -> PageState:
        return self._state

    async def run(self) -> None:
        while self._state != PageState.END:
            page = self.pages[self._state]()

            await self.surface.print_header(page.title)

            next_state = await page.render()

            if next_state not in self.pages:
                logger.debug(f"No page for {next_state}, ending run")
                next_state = PageState.END

            logger.debug(f"Transition {self._state.value} -> {next_state.value}")
            self._state = next_state
