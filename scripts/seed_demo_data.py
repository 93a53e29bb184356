#!/usr/bin/env python3

"""
Seed the database with demo data for testing and development
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from notebook_tui.app.security.auth import AuthManager
from notebook_tui.app.storage.db import close_database, create_tables, init_database
from notebook_tui.app.storage.repositories import NoteRepository, UserRepository
from notebook_tui.app.utils.config import load_config
from notebook_tui.app.utils.logger import setup_logging

DEMO_USERS = [
    ("kalle", "password"),
]

DEMO_NOTES = {
    "kalle": [
        ("test", "This is a test"),
    ],
}


async def seed_data():
    """Seed the database with demo data"""
    logger.info("Initializing database...")
    await init_database()
    await create_tables()

    auth = AuthManager()
    user_repo = UserRepository()
    note_repo = NoteRepository()

    logger.info("Creating demo users...")

    for username, password in DEMO_USERS:
        user = await user_repo.get_by_username(username)
        if user:
            logger.info(f"  User {username} already exists")
            continue

        password_hash = await auth.hash_password(password)
        user = await user_repo.create(username=username, password_hash=password_hash)
        logger.info(f"  Created user: {username}")

        for title, text in DEMO_NOTES.get(username, []):
            await note_repo.create(user.id, title, text)
            logger.info(f"    Added note: {title}")

    await close_database()
    logger.info("Demo data seeded successfully!")


if __name__ == "__main__":
    load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    logger = setup_logging()
    asyncio.run(seed_data())
