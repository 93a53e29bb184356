"""
Console I/O operations.

Handles text encoding over a byte-transparent transport and keystroke input.
Readers and writers follow the telnetlib3 stream interface, so the same code
serves a telnet connection and the local terminal.
"""

import asyncio
from typing import Optional

from telnetlib3 import TelnetReader, TelnetWriter

from ..exceptions import ConnectionClosedError
from ..utils.logger import get_logger
from .keys import ARROW_KEYS, Key, Keystroke

logger = get_logger("console.io")

# How long to wait for the rest of an escape sequence before treating ESC as a key
ESCAPE_TIMEOUT = 0.05


class ConsoleIO:
    """
    Text I/O over a latin-1 transport.

    Output text is encoded with the console encoding and sent as latin-1
    characters; input characters are latin-1 bytes re-decoded on line reads.
    """

    def __init__(
        self,
        reader: Optional[TelnetReader],
        writer: Optional[TelnetWriter],
        encoding: str = "utf-8",
    ):
        self.reader = reader
        self.writer = writer
        self.encoding = encoding
        self._after_cr = False
        self._pushback: Optional[str] = None

    async def write(self, data: str) -> None:
        if not self.writer:
            return

        transport_str = data.encode(self.encoding, errors='replace').decode('latin-1')
        self.writer.write(transport_str)
        await self.writer.drain()

    async def writeline(self, text: str = "") -> None:
        """Write text followed by CRLF."""
        await self.write(f"{text}\r\n")

    async def _echo(self, char: str) -> None:
        if not self.writer:
            return
        self.writer.write(char)
        await self.writer.drain()

    async def read_char(self) -> str:
        """
        Read one transport character.

        A LF or NUL right after CR is dropped, so Enter reads as one key
        whatever line ending the terminal sends.
        """
        if self._pushback is not None:
            char, self._pushback = self._pushback, None
            return char

        while True:
            if not self.reader:
                raise ConnectionClosedError("No input stream")

            char = await self.reader.read(1)
            if not char:
                raise ConnectionClosedError("Input stream closed")

            if self._after_cr and char in ("\n", "\x00"):
                self._after_cr = False
                continue

            self._after_cr = char == "\r"
            return char

    async def _read_follow_up(self) -> Optional[str]:
        try:
            return await asyncio.wait_for(self.read_char(), timeout=ESCAPE_TIMEOUT)
        except asyncio.TimeoutError:
            return None

    async def _read_escape_sequence(self) -> Keystroke:
        """
        Decode what follows an ESC.

        A bare ESC is Key.ESCAPE; a character that does not start a sequence
        is pushed back so the next read sees it. Cursor sequences other than
        the arrows come back as Key.UNKNOWN.
        """
        introducer = await self._read_follow_up()
        if introducer not in ("[", "O"):
            self._pushback = introducer
            return Keystroke(Key.ESCAPE, "\x1b")

        final = await self._read_follow_up()
        # Sequences like ESC [ 3 ~ carry numeric parameters before the final byte
        while final is not None and (final.isdigit() or final == ";"):
            final = await self._read_follow_up()

        if final in ARROW_KEYS:
            return Keystroke(ARROW_KEYS[final])
        return Keystroke(Key.UNKNOWN)

    async def read_key(self) -> Keystroke:
        char = await self.read_char()
        if char == "\x1b":
            return await self._read_escape_sequence()
        return Keystroke.from_char(char)

    def _pop_char(self, buffer: bytearray) -> None:
        if not buffer:
            return
        if self.encoding.replace("-", "").lower() == "utf8":
            # Drop UTF-8 continuation bytes along with their lead byte
            while len(buffer) > 1 and (buffer[-1] & 0xC0) == 0x80:
                buffer.pop()
        buffer.pop()

    def _sequence_length(self, lead: int) -> int:
        """Bytes in the character starting with `lead`."""
        if self.encoding.replace("-", "").lower() != "utf8":
            return 1
        if 0xC0 <= lead < 0xE0:
            return 2
        if 0xE0 <= lead < 0xF0:
            return 3
        if 0xF0 <= lead < 0xF8:
            return 4
        return 1

    async def _read_line(self, echo: bool, mask: Optional[str], max_length: int) -> str:
        """
        Edit one line until Enter or a bare Escape.

        max_length counts characters, so a multibyte character is either
        kept whole or dropped whole.
        """
        byte_buffer = bytearray()
        pending = bytearray()
        length = 0
        while True:
            char = await self.read_char()
            byte_val = ord(char)

            if byte_val == 13 or byte_val == 10:
                break
            elif byte_val == 27:
                keystroke = await self._read_escape_sequence()
                if keystroke.key == Key.ESCAPE:
                    break
            elif byte_val == 8 or byte_val == 127:
                pending.clear()
                if byte_buffer:
                    self._pop_char(byte_buffer)
                    length -= 1
                    if echo:
                        await self.write("\x08 \x08")
            elif byte_val >= 32:
                # A truncated sequence is dropped when the next character starts
                if pending and (byte_val & 0xC0) != 0x80:
                    pending.clear()

                if byte_val > 255:
                    pending.extend(char.encode(self.encoding, errors='replace'))
                else:
                    pending.append(byte_val)

                if len(pending) < self._sequence_length(pending[0]):
                    continue

                if length < max_length:
                    byte_buffer.extend(pending)
                    length += 1
                    if echo:
                        if mask:
                            await self.write(mask)
                        else:
                            await self._echo(pending.decode('latin-1'))
                pending.clear()

        return bytes(byte_buffer).decode(self.encoding, errors='replace')

    async def disconnect(self) -> None:
        if self.writer:
            self.writer.close()
            if hasattr(self.writer, "wait_closed"):
                await self.writer.wait_closed()

        self.reader = None
        self.writer = None
