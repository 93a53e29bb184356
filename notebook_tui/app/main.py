#!/usr/bin/env python3
"""
Local console entry point.

Usage:
    python -m notebook_tui.app.main [config.toml]

Runs one notebook session on the controlling terminal.
"""

import asyncio
import signal
import sys
from pathlib import Path

from .app import run_session
from .console import Console
from .exceptions import ConnectionClosedError
from .stdio_transport import StdioReaderWriter, raw_terminal
from .storage.db import close_database, create_tables, init_database
from .utils.config import load_config
from .utils.logger import get_logger, setup_logging

logger = get_logger("main")


async def setup_database() -> None:
    logger.info("Initializing database...")
    await init_database()

    try:
        await create_tables()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        raise


async def run_console_session(adapter: StdioReaderWriter) -> None:
    console = Console(reader=adapter, writer=adapter)
    try:
        await run_session(console)
    except ConnectionClosedError:
        logger.info("Input closed, ending session")
    else:
        await console.writeline("Goodbye!")


async def main_async() -> None:
    await setup_database()

    adapter = await StdioReaderWriter.create()

    shutdown_event = asyncio.Event()

    def signal_handler(sig):
        logger.info(f"Received signal {sig}")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGHUP, signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

    # Cancellation wraps the session task; the page loop itself knows nothing of it
    session_task = asyncio.create_task(run_console_session(adapter))
    shutdown_task = asyncio.create_task(shutdown_event.wait())

    try:
        done, pending = await asyncio.wait(
            [session_task, shutdown_task],
            return_when=asyncio.FIRST_COMPLETED
        )

        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if session_task in done:
            # Surface page errors to main()
            session_task.result()
    finally:
        await close_database()
        adapter.close()
        await adapter.wait_closed()
        logger.info("Console shutdown complete")


def main() -> None:
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.toml"

    if not Path(config_path).exists() and Path("config.example.toml").exists():
        config_path = "config.example.toml"

    load_config(config_path)
    setup_logging()
    logger.info(f"Configuration loaded from {config_path}")

    try:
        with raw_terminal():
            asyncio.run(main_async())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
