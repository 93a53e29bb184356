"""
Base class for pages.

Provides common functionality and consistent patterns across all pages.
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from .state_machine import PageState

if TYPE_CHECKING:
    from ..console import Console
    from ..session import AppSession
    from ..storage.container import RepositoryContainer


class Page(ABC):
    """
    Abstract base class for all pages.

    Provides:
    - Standard constructor with console, session and optional repos
    - Login guard shared by the pages that need a user
    - Common UI utilities (error display, pause)
    - Abstract render() returning the next state
    """

    title: str = ""

    def __init__(
        self,
        console: "Console",
        session: "AppSession",
        repos: Optional["RepositoryContainer"] = None,
    ):
        """
        Initialize the page.

        Args:
            console: Rendering surface for this session
            session: Identity of the current user
            repos: Optional repository container (defaults to global singleton)
        """
        self.console = console
        self.session = session
        if repos is None:
            from ..storage.container import get_repos
            repos = get_repos()
        self.repos = repos

    @property
    def requires_login(self) -> bool:
        """
        Whether render() should bounce anonymous users back to LOGIN.

        Override in subclasses that are reachable before login.
        """
        return True

    async def render(self) -> PageState:
        if self.requires_login and not self.session.is_logged_in:
            return PageState.LOGIN
        return await self.show()

    @abstractmethod
    async def show(self) -> PageState:
        """
        Perform all interaction for this visit.

        Override in subclasses to implement page logic.
        """
        pass

    async def show_error(self, message: str) -> None:
        """
        Display an error message and wait for acknowledgment.

        Args:
            message: Error message to display
        """
        await self.console.writeline()
        await self.console.writeline(f"Error: {message}")
        await self.console.wait_for_any()
