"""
Stdio transport adapter for the local console.

Provides a telnetlib3-compatible reader/writer interface for stdin/stdout,
so the local terminal is driven by the same Console code as telnet sessions.
"""
import asyncio
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Iterator, Optional

from .utils.logger import get_logger

logger = get_logger("stdio_transport")


class StdioWriteProtocol(asyncio.Protocol):
    """Simple protocol for stdout write pipe."""

    def __init__(self):
        self._transport = None

    def connection_made(self, transport):
        self._transport = transport

    def connection_lost(self, exc):
        self._transport = None


@contextmanager
def raw_terminal(stream=None) -> Iterator[None]:
    """
    Put the terminal in cbreak mode for the duration of the block.

    Keys arrive one at a time without local echo; the Console echoes input
    itself. Does nothing when the stream is not a TTY.
    """
    stream = stream or sys.stdin
    if not stream.isatty():
        yield
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("Terminal settings restored")


class StdioReaderWriter:
    """Adapter providing telnetlib3-like reader/writer interface for stdio.

    Key differences from telnet:
    - No protocol negotiation (the terminal is configured by raw_terminal())
    - Bytes pass through unchanged as latin-1 characters
    """

    def __init__(self, reader: asyncio.StreamReader, write_transport):
        self._reader = reader
        self._write_transport = write_transport
        self._char_buffer: str = ""
        self._closed = False
        self._eof = False
        self._read_task: Optional[asyncio.Task] = None
        self._data_available = asyncio.Event()

    @classmethod
    async def create(cls) -> 'StdioReaderWriter':
        """Create a StdioReaderWriter connected to stdin/stdout.

        Uses asyncio's pipe APIs to wrap file descriptors for raw byte safety.
        """
        loop = asyncio.get_running_loop()

        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await loop.connect_read_pipe(lambda: protocol, sys.stdin.buffer)

        write_transport, _ = await loop.connect_write_pipe(
            StdioWriteProtocol, sys.stdout.buffer
        )

        instance = cls(reader, write_transport)
        instance._start_read_loop()
        return instance

    def _start_read_loop(self) -> None:
        """Start background task to read from stdin into buffers"""
        self._read_task = asyncio.create_task(self._read_loop())

    async def _read_loop(self) -> None:
        """Continuously read from stdin into the character buffer"""
        try:
            while not self._closed:
                data = await self._reader.read(4096)
                if not data:
                    self._eof = True
                    self._data_available.set()
                    break

                # latin-1 keeps bytes intact; the Console re-decodes lines
                self._char_buffer += data.decode('latin-1')
                self._data_available.set()

        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Read loop error: {e}")
            self._eof = True
            self._data_available.set()

    async def read(self, n: int = 1) -> str:
        """Read up to n characters.

        Returns empty string on EOF/close.
        """
        if self._closed or (self._eof and not self._char_buffer):
            return ""

        while not self._char_buffer and not self._closed and not self._eof:
            await self._data_available.wait()
            self._data_available.clear()

        if not self._char_buffer:
            return ""

        result = self._char_buffer[:n]
        self._char_buffer = self._char_buffer[n:]
        return result

    def write(self, data) -> None:
        """Write data to stdout.

        Accepts both str and bytes. Strings are encoded as latin-1
        (byte-transparent, matching the telnet transport layer).
        """
        if self._closed:
            return

        if isinstance(data, str):
            data = data.encode('latin-1', errors='replace')

        self._write_transport.write(data)

    async def drain(self) -> None:
        """Flush the write buffer (no-op for pipe transport)"""
        pass

    def close(self) -> None:
        """Close the transport"""
        self._closed = True
        self._data_available.set()

        if self._read_task:
            self._read_task.cancel()

        if self._write_transport:
            self._write_transport.close()

    async def wait_closed(self) -> None:
        """Wait for close to complete (no-op for pipe transport)"""
        pass
