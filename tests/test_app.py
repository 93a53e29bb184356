import asyncio
import io

from conftest import ENTER, UP, RecordingWriter, ScriptedReader, create_user, make_console
from telnetlib3 import BINARY, DO, ECHO, WILL

from notebook_tui.app.app import PAGE_CLASSES, build_pages, run_session
from notebook_tui.app.session import AppSession
from notebook_tui.app.stdio_transport import raw_terminal
from notebook_tui.app.telnet_server import TelnetServer
from notebook_tui.app.ui.login import LoginPage
from notebook_tui.app.ui.state_machine import PageState

LOGIN = "kalle\rpassword\r"


def test_build_pages_covers_every_page_but_end(repos):
    console, _ = make_console()
    session = AppSession()
    pages = build_pages(console, session, repos)

    assert set(pages) == set(PAGE_CLASSES)
    assert PageState.END not in pages

    first, second = pages[PageState.LOGIN](), pages[PageState.LOGIN]()
    assert isinstance(first, LoginPage)
    assert first is not second
    assert first.session is session
    assert first.repos is repos


def test_full_session_adds_and_shows_note(run_db, repos):
    script = (
        LOGIN
        + ENTER                    # "Add note" is first while there are no notes
        + "Groceries\rmilk\r"
        + ENTER                    # "Show notes"
        + " "                      # leave the note list
        + UP + ENTER               # wrap to "Quit"
    )
    session = AppSession()

    async def scenario():
        await create_user(repos)
        console, writer = make_console(script)
        await run_session(console, session, repos)
        user = await repos.users.get_by_username("kalle")
        return writer.output, await repos.notes.get_for_user(user.id)

    output, notes = run_db(scenario())

    assert [(n.title, n.text) for n in notes] == [("Groceries", "milk")]
    assert output.index("Notebook menu") < output.index("Add note")
    assert "  Groceries" in output
    assert "milk" in output
    assert not session.is_logged_in


def test_session_ends_after_too_many_failed_logins(run_db, repos):
    session = AppSession()

    async def scenario():
        console, writer = make_console("a\rb\r c\rd\r")
        await run_session(console, session, repos)
        return writer.output

    output = run_db(scenario())

    assert output.count("Invalid username or password.") == 2
    assert "Too many failed attempts. Goodbye!" in output
    assert session.failed_logins == 2


def test_telnet_shell_runs_session_and_disconnects(run_db, repos):
    server = TelnetServer()
    reader = ScriptedReader(LOGIN + UP + ENTER)
    writer = RecordingWriter(peername=("10.0.0.7", 4711))

    async def scenario():
        await create_user(repos)
        await server.shell(reader, writer)

    run_db(scenario())

    assert writer.negotiated == [(DO, BINARY), (WILL, BINARY), (WILL, ECHO)]
    assert writer.output.endswith("Goodbye!\r\n")
    assert writer.closed
    assert server.consoles == {}


def test_telnet_shell_handles_client_hangup(run_db):
    server = TelnetServer()
    writer = RecordingWriter()

    run_db(server.shell(ScriptedReader("kal"), writer))

    assert writer.closed
    assert "Goodbye!" not in writer.output
    assert server.consoles == {}


def test_telnet_shell_rejects_when_full(config):
    config.server.max_connections = 1
    server = TelnetServer()
    server.consoles["busy"] = object()
    writer = RecordingWriter()

    asyncio.run(server.shell(ScriptedReader(LOGIN), writer))

    assert "Too many users online" in writer.output
    assert writer.negotiated == []
    assert writer.closed
    assert list(server.consoles) == ["busy"]


def test_raw_terminal_ignores_non_tty():
    stream = io.StringIO()
    with raw_terminal(stream):
        stream.write("still usable")
    assert stream.getvalue() == "still usable"
