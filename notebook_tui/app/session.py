"""
Per-run session state.

Holds the identity of whoever is using one console, without any I/O.
Each host creates one AppSession per console and hands it to the page
factories, so identity never lives in module globals.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .utils.logger import get_logger

logger = get_logger("session")


@dataclass
class AppSession:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_id: Optional[int] = None
    username: Optional[str] = None
    failed_logins: int = 0
    connected_at: datetime = field(default_factory=datetime.now)
    remote_addr: Optional[str] = None
    remote_port: Optional[int] = None

    @property
    def is_logged_in(self) -> bool:
        return self.user_id is not None

    def login(self, user_id: int, username: str) -> None:
        self.user_id = user_id
        self.username = username
        self.failed_logins = 0
        logger.info(f"User {username} logged in (Session: {self.id})")

    def record_failed_login(self) -> int:
        self.failed_logins += 1
        return self.failed_logins

    def logout(self) -> None:
        if self.username:
            logger.info(f"User {self.username} logged out (Session: {self.id})")
        self.user_id = None
        self.username = None

    def get_session_time(self) -> str:
        """Get formatted session duration as HH:MM:SS."""
        delta = datetime.now() - self.connected_at
        hours = int(delta.total_seconds() // 3600)
        minutes = int((delta.total_seconds() % 3600) // 60)
        seconds = int(delta.total_seconds() % 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
