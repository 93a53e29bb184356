from ..exceptions import StorageError
from ..storage.models import Note
from ..utils.config import get_config
from ..utils.logger import get_logger
from .base import Page
from .state_machine import PageState

logger = get_logger("ui.notes")


class ShowNotesPage(Page):
    title = "Notebook"

    async def print_note(self, note: Note) -> None:
        await self.console.writeline()
        await self.console.print_alt_line()
        await self.console.print_sub_header(note.title)
        await self.console.print_full_width(note.text)
        await self.console.print_alt_line()
        await self.console.writeline()

    async def show(self) -> PageState:
        notes = await self.repos.notes.get_for_user(self.session.user_id)
        for note in notes:
            await self.print_note(note)

        await self.console.wait_for_any()
        return PageState.MENU


class AddNotePage(Page):
    title = "Add note"

    async def show(self) -> PageState:
        limits = get_config().notes

        title = await self.console.readline("Title: ", max_length=limits.max_title_length)
        text = await self.console.readline("Text : ", max_length=limits.max_text_length)

        try:
            note = await self.repos.notes.create(self.session.user_id, title, text)
        except StorageError as e:
            await self.show_error(str(e))
            return PageState.MENU

        logger.info(f"Note {note.id} added by {self.session.username} (Session: {self.session.id})")
        return PageState.MENU
