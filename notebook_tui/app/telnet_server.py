"""
Multi-session telnet host.

Every connection gets its own Console, AppSession and page state machine;
nothing is shared between connections except the repositories.
"""

import asyncio
from typing import Dict, Optional

import telnetlib3
from telnetlib3 import BINARY, DO, ECHO, WILL

from .app import run_session
from .console import Console
from .exceptions import ConnectionClosedError
from .session import AppSession
from .storage.db import close_database, create_tables, init_database
from .utils.config import get_config
from .utils.logger import get_logger

logger = get_logger("telnet")


class TelnetServer:
    def __init__(self):
        self.config = get_config()
        self.consoles: Dict[str, Console] = {}
        self._server: Optional[asyncio.Server] = None
        self._running = False

    async def negotiate(self, writer: telnetlib3.TelnetWriter) -> None:
        """Ask for 8-bit transparency and take over echo from the client."""
        writer.iac(DO, BINARY)
        writer.iac(WILL, BINARY)
        writer.iac(WILL, ECHO)
        await writer.drain()

    async def shell(self, reader: telnetlib3.TelnetReader, writer: telnetlib3.TelnetWriter) -> None:
        session = AppSession()
        peer = writer.get_extra_info("peername")
        if peer:
            session.remote_addr, session.remote_port = peer[0], peer[1]

        if len(self.consoles) >= self.config.server.max_connections:
            logger.warning(f"Rejecting {session.remote_addr}: connection limit reached")
            writer.write("Too many users online, try again later.\r\n")
            writer.close()
            return

        console = Console(reader=reader, writer=writer)
        self.consoles[session.id] = console

        logger.info(f"New connection from {session.remote_addr}:{session.remote_port} (Session: {session.id})")

        try:
            await self.negotiate(writer)
            await run_session(console, session)
            await console.writeline("Goodbye!")
        except ConnectionClosedError:
            logger.info(f"Session {session.id} closed by client")
        except asyncio.CancelledError:
            logger.info(f"Session {session.id} cancelled")
        except Exception as e:
            logger.error(f"Session {session.id} error: {e}", exc_info=True)
            await console.writeline("\r\nAn error occurred. Disconnecting...")
        finally:
            await console.disconnect()
            del self.consoles[session.id]
            logger.info(f"Session {session.id} ended")

    async def start(self) -> None:
        if self._running:
            logger.warning("Server already running")
            return

        host = self.config.server.host
        port = self.config.server.port

        logger.info(f"Starting telnet server on {host}:{port}")

        self._server = await telnetlib3.create_server(
            host=host,
            port=port,
            shell=self.shell,
            connect_maxwait=3.0,
            timeout=self.config.server.connection_timeout,
            encoding='latin-1',  # Byte-transparent transport layer
            encoding_errors='replace',
            force_binary=True,
        )

        self._running = True
        logger.info(f"Telnet server listening on {host}:{port}")

    async def stop(self) -> None:
        if not self._running:
            return

        logger.info("Stopping telnet server...")
        self._running = False

        for console in list(self.consoles.values()):
            await console.disconnect()

        if self._server:
            self._server.close()
            await self._server.wait_closed()

        logger.info("Telnet server stopped")

    async def run(self) -> None:
        await self.start()
        try:
            while self._running:
                await asyncio.sleep(1)
        finally:
            await self.stop()


async def main_async() -> None:
    await init_database()
    await create_tables()

    server = TelnetServer()
    try:
        await server.run()
    finally:
        await close_database()


def main() -> None:
    import sys

    from .utils.config import load_config
    from .utils.logger import setup_logging

    load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    setup_logging()

    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
