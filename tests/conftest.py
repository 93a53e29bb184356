"""Shared fixtures: scripted terminals and a throwaway SQLite database."""

import asyncio
from typing import List, Optional, Tuple

import pytest

from notebook_tui.app.console import Console
from notebook_tui.app.security.auth import AuthManager
from notebook_tui.app.storage.container import RepositoryContainer, reset_repos
from notebook_tui.app.storage.db import close_database, create_tables, init_database
from notebook_tui.app.utils.config import UIConfig, load_config, reset_config

UP = "\x1b[A"
DOWN = "\x1b[B"
ENTER = "\r"


class ScriptedReader:
    """Reader that replays a fixed keystroke script, then reports EOF."""

    def __init__(self, data: str = ""):
        self.buffer = data

    def feed(self, data: str) -> None:
        self.buffer += data

    async def read(self, n: int = 1) -> str:
        if not self.buffer:
            return ""
        chunk, self.buffer = self.buffer[:n], self.buffer[n:]
        return chunk


class RecordingWriter:
    """Writer that keeps everything written, telnetlib3-style."""

    def __init__(self, peername: Optional[Tuple[str, int]] = ("127.0.0.1", 50000)):
        self.chunks: List[str] = []
        self.negotiated: List[tuple] = []
        self.closed = False
        self.peername = peername

    def write(self, data: str) -> None:
        self.chunks.append(data)

    async def drain(self) -> None:
        pass

    def iac(self, cmd, opt) -> None:
        self.negotiated.append((cmd, opt))

    def get_extra_info(self, name, default=None):
        if name == "peername":
            return self.peername
        return default

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass

    @property
    def output(self) -> str:
        return "".join(self.chunks)


def make_console(script: str = "", ansi: bool = False, width: int = 80) -> Tuple[Console, RecordingWriter]:
    writer = RecordingWriter()
    console = Console(ScriptedReader(script), writer, ui=UIConfig(ansi=ansi, width=width))
    return console, writer


@pytest.fixture
def config(tmp_path):
    """Load a test configuration pointing at a per-test SQLite file."""
    db_path = tmp_path / "notebook.db"
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        "[db]\n"
        f'dsn = "sqlite+aiosqlite:///{db_path.as_posix()}"\n'
        "\n"
        "[security]\n"
        "argon2_time_cost = 1\n"
        "argon2_memory_cost = 8192\n"
        "argon2_parallelism = 1\n"
        "max_login_attempts = 2\n"
        "\n"
        "[ui]\n"
        "ansi = false\n"
        "\n"
        "[logging]\n"
        'file_path = ""\n'
    )

    reset_config()
    reset_repos()
    yield load_config(config_path)
    reset_config()
    reset_repos()


@pytest.fixture
def run_db(config):
    """
    Run a coroutine against a fresh database.

    Engine setup and disposal happen inside the same event loop as the test
    body, since pooled aiosqlite connections are bound to their loop.
    """

    def runner(coro):
        async def wrapped():
            await init_database()
            await create_tables()
            try:
                return await coro
            finally:
                await close_database()

        return asyncio.run(wrapped())

    return runner


@pytest.fixture
def repos(config):
    return RepositoryContainer()


async def create_user(repos: RepositoryContainer, username: str = "kalle", password: str = "password"):
    password_hash = await AuthManager().hash_password(password)
    return await repos.users.create(username=username, password_hash=password_hash)
