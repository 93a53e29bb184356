"""
End-to-end test of the console entry point through a real pseudo-terminal.

Opt-in because it spawns subprocesses:

    NOTEBOOK_E2E=1 pytest tests/test_e2e.py
"""

import os
import sys
from pathlib import Path
from typing import Optional

import pexpect
import pytest

pytestmark = pytest.mark.skipif(
    os.environ.get("NOTEBOOK_E2E") != "1",
    reason="set NOTEBOOK_E2E=1 to run end-to-end tests",
)

ROOT = Path(__file__).resolve().parent.parent
UP = "\x1b[A"


class TestConsoleEndToEnd:
    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        self.config_path = tmp_path / "config.toml"
        self.config_path.write_text(
            "[db]\n"
            f'dsn = "sqlite+aiosqlite:///{(tmp_path / "notebook.db").as_posix()}"\n'
            "\n"
            "[security]\n"
            "argon2_memory_cost = 8192\n"
            "argon2_time_cost = 1\n"
            "argon2_parallelism = 1\n"
            "\n"
            "[logging]\n"
            'file_path = ""\n'
        )
        self.env = dict(os.environ, PYTHONPATH=str(ROOT))
        self.timeout = 10
        self.child: Optional[pexpect.spawn] = None

        output, status = pexpect.run(
            f"{sys.executable} {ROOT / 'scripts' / 'seed_demo_data.py'} {self.config_path}",
            env=self.env,
            withexitstatus=True,
            timeout=60,
        )
        assert status == 0, output

        yield

        if self.child and self.child.isalive():
            self.child.close(force=True)

    def spawn(self) -> pexpect.spawn:
        self.child = pexpect.spawn(
            sys.executable,
            ["-m", "notebook_tui.app.main", str(self.config_path)],
            env=self.env,
            timeout=self.timeout,
            encoding="utf-8",
            dimensions=(24, 80),
        )
        return self.child

    def login(self, child: pexpect.spawn, username: str, password: str) -> None:
        child.expect("Log in")
        child.expect("Username: ")
        child.send(username + "\r")
        child.expect("Password: ")
        child.send(password + "\r")

    def test_show_notes_and_quit(self):
        child = self.spawn()
        self.login(child, "kalle", "password")

        child.expect("Notebook menu")
        child.expect("Show notes")
        child.send("\r")

        child.expect("This is a test")
        child.expect("Press any key to continue")
        child.send(" ")

        child.expect("Notebook menu")
        child.expect("Quit")
        child.send(UP + "\r")

        child.expect("Goodbye!")
        child.expect(pexpect.EOF)

    def test_add_note(self):
        child = self.spawn()
        self.login(child, "kalle", "password")

        child.expect("Notebook menu")
        child.expect("Quit")
        child.send("\x1b[B\r")

        child.expect("Title: ")
        child.send("Groceries\r")
        child.expect("Text : ")
        child.send("milk\r")

        child.expect("Notebook menu")
        child.expect("Quit")
        child.send("\r")
        child.expect("Groceries")
        child.expect("milk")

    def test_wrong_password_is_rejected(self):
        child = self.spawn()
        self.login(child, "kalle", "wrong")

        child.expect("Invalid username or password.")
        child.expect("Press any key to continue")
        child.send(" ")
        child.expect("Username: ")
