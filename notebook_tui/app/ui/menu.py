from .base import Page
from .components import SelectableList
from .state_machine import PageState

SHOW_NOTES_LABEL = "Show notes"


class MenuPage(Page):
    title = "Notebook menu"

    async def show(self) -> PageState:
        menu: SelectableList[PageState] = SelectableList([
            (SHOW_NOTES_LABEL, lambda: PageState.SHOW_NOTES),
            ("Add note", lambda: PageState.ADD_NOTE),
            ("Quit", lambda: PageState.END),
        ])

        if not await self.repos.notes.has_notes(self.session.user_id):
            menu.remove(SHOW_NOTES_LABEL)

        return await self.console.show_menu(menu, self.title)
