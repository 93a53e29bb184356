"""
Composition of one notebook session.

Binds a console, an AppSession and the repositories into the page factory
map that drives the state machine. Each host calls run_session() once per
console.
"""

from typing import Dict, Optional

from .console import Console
from .session import AppSession
from .storage.container import RepositoryContainer, get_repos
from .ui.base import Page
from .ui.login import LoginPage
from .ui.menu import MenuPage
from .ui.notes import AddNotePage, ShowNotesPage
from .ui.state_machine import PageFactory, PageState, PageStateMachine
from .utils.logger import get_logger

logger = get_logger("app")

PAGE_CLASSES: Dict[PageState, type[Page]] = {
    PageState.LOGIN: LoginPage,
    PageState.MENU: MenuPage,
    PageState.SHOW_NOTES: ShowNotesPage,
    PageState.ADD_NOTE: AddNotePage,
}


def build_pages(
    console: Console,
    session: AppSession,
    repos: RepositoryContainer,
) -> Dict[PageState, PageFactory]:
    def factory(page_class: type[Page]) -> PageFactory:
        return lambda: page_class(console, session, repos)

    return {state: factory(page_class) for state, page_class in PAGE_CLASSES.items()}


async def run_session(
    console: Console,
    session: Optional[AppSession] = None,
    repos: Optional[RepositoryContainer] = None,
) -> None:
    """Run the page loop on one console until the user quits."""
    session = session or AppSession()
    repos = repos or get_repos()

    machine = PageStateMachine(build_pages(console, session, repos), console)

    logger.info(f"Session {session.id} started")
    try:
        await machine.run()
    finally:
        await console.reset()
        logger.info(f"Session {session.id} ended after {session.get_session_time()}")
        session.logout()
