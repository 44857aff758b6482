"""
Secure Line Editor
===================

Byte-at-a-time line editor for secrets. Input is read in raw mode (no
echo, no line buffering); every mutating keystroke erases and redraws
the line as::

    <prompt> [한글] [CAPS] ********

The mask is byte-granular: a three-byte UTF-8 character shows three
marks. The locale indicator lights when the last appended byte has the
high bit set; the caps-lock indicator is queried live on each redraw.

Transitions while ``ACTIVE``:

    ===================  ===============================================
    CR / LF              commit, -> TERMINATED
    BS / DEL             drop last byte if any, redraw
    ETX (Ctrl+C)         interrupt: restore terminal, exit program
    0x20-0x7E, >= 0x80   append, redraw
    other control bytes  ignored
    ===================  ===============================================
"""

from __future__ import annotations

import contextlib
import enum
import sys
from typing import Optional, TextIO

from rich.color import ColorSystem
from rich.style import Style

from shared.config import EditorConfig
from shared.logger import CryptLogger

from clipcrypt.core.errors import SessionInterrupted
from clipcrypt.terminal.indicators import KeyboardStateDetector
from clipcrypt.terminal.raw_mode import RawTerminal
from clipcrypt.terminal.reader import ByteReader

CR = 0x0D
LF = 0x0A
BS = 0x08
DEL = 0x7F
ETX = 0x03

ERASE_LINE = "\r\033[K"
INTERRUPT_MESSAGE = "Program interrupted. Restoring terminal..."


class EditorState(str, enum.Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"


class KeyAction(str, enum.Enum):
    COMMIT = "commit"
    ERASE = "erase"
    APPEND = "append"
    INTERRUPT = "interrupt"
    IGNORE = "ignore"


def classify(byte: int) -> KeyAction:
    """Map one input byte to the editor action it triggers."""
    if byte in (CR, LF):
        return KeyAction.COMMIT
    if byte in (BS, DEL):
        return KeyAction.ERASE
    if byte == ETX:
        return KeyAction.INTERRUPT
    if 0x20 <= byte <= 0x7E or byte >= 0x80:
        return KeyAction.APPEND
    return KeyAction.IGNORE


class SecureLineEditor:
    """Collects one line of input with live masking.

    Usage::

        editor = SecureLineEditor("Enter Secret Key: ")
        secret = editor.read_line(reader)

    Args:
        prompt:   Text written before the input.
        masked:   Draw mask marks (``True``) or echo the text (``False``).
        detector: Caps-lock / script probe. Built from *config* if omitted.
        config:   Editor cosmetics (mask char, indicator labels, style).
        output:   Text stream to draw on; defaults to the current ``sys.stdout``.
    """

    def __init__(
        self,
        prompt: str,
        *,
        masked: bool = True,
        detector: Optional[KeyboardStateDetector] = None,
        config: Optional[EditorConfig] = None,
        output: Optional[TextIO] = None,
        logger: Optional[CryptLogger] = None,
    ) -> None:
        self.prompt = prompt
        self.masked = masked
        self.config = config or EditorConfig()
        self.detector = detector or KeyboardStateDetector(self.config.caps_lock_glob)
        self._output = output
        self.logger = logger or CryptLogger("editor", console_output=False)

        self._buffer = bytearray()
        self._locale_active = False
        self.state = EditorState.ACTIVE

        style = Style.parse(self.config.indicator_style)
        self._locale_badge = style.render(self.config.locale_label, color_system=ColorSystem.STANDARD)
        self._caps_badge = style.render(self.config.caps_label, color_system=ColorSystem.STANDARD)

    # ------------------------------------------------------------------ #
    #  State
    # ------------------------------------------------------------------ #

    @property
    def buffer(self) -> bytes:
        return bytes(self._buffer)

    @property
    def locale_active(self) -> bool:
        return self._locale_active

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def feed(self, byte: int) -> KeyAction:
        """Apply one input byte and return the action it triggered.

        ``INTERRUPT`` is reported but not acted on here; the driver loop
        owns terminal restoration and program exit.
        """
        if self.state is EditorState.TERMINATED:
            raise RuntimeError("editor already terminated")

        action = classify(byte)
        if action is KeyAction.COMMIT:
            self.state = EditorState.TERMINATED
        elif action is KeyAction.ERASE:
            if self._buffer:
                del self._buffer[-1]
                self._locale_active = False
                self.redraw()
        elif action is KeyAction.APPEND:
            self._buffer.append(byte)
            self._locale_active = self.detector.is_non_latin_byte(byte)
            self.redraw()
        return action

    # ------------------------------------------------------------------ #
    #  Rendering
    # ------------------------------------------------------------------ #

    def render_line(self) -> str:
        """Return the escape sequence that repaints the whole line."""
        if not self.masked:
            return ERASE_LINE + self.prompt + self._buffer.decode("utf-8", errors="replace")

        badges = []
        if self._locale_active:
            badges.append(self._locale_badge)
        if self.detector.caps_lock_on():
            badges.append(self._caps_badge)
        status = " " + " ".join(badges) + " " if badges else " "
        return ERASE_LINE + self.prompt + status + self.config.mask_char * len(self._buffer)

    def redraw(self) -> None:
        self._write(self.render_line())

    def _write(self, text: str) -> None:
        out = self.output
        out.write(text)
        out.flush()

    # ------------------------------------------------------------------ #
    #  Driver loop
    # ------------------------------------------------------------------ #

    def read_bytes(self, reader: ByteReader) -> bytes:
        """Run the editor over *reader* until Enter and return the raw buffer.

        The terminal behind ``reader.fd`` is held in raw mode only inside
        the loop and is restored before this method returns or raises.

        Raises:
            InputError: The stream failed or ended.
            SessionInterrupted: Ctrl+C or a cancel signal arrived.
        """
        self._write(self.prompt)
        interrupted = False
        cancel = reader.cancel
        hold = cancel.deferring() if cancel is not None else contextlib.nullcontext()

        with hold, RawTerminal(reader.fd, logger=self.logger):
            while self.state is EditorState.ACTIVE:
                byte = reader.read_byte()
                if byte is None or self.feed(byte) is KeyAction.INTERRUPT:
                    interrupted = True
                    break

        # A signal held back while Enter was being handled still counts.
        if interrupted or (cancel is not None and cancel.cancelled):
            self._write("\n" + INTERRUPT_MESSAGE + "\n")
            self.logger.info("Input interrupted")
            signum = cancel.signum if cancel is not None else None
            raise SessionInterrupted(signum, announced=True)

        self._write("\n")
        return self.buffer

    def read_line(self, reader: ByteReader) -> str:
        """Like :meth:`read_bytes`, decoded as UTF-8.

        Byte-granular deletion can leave a truncated sequence at the end;
        it decodes to U+FFFD rather than failing.
        """
        return self.read_bytes(reader).decode("utf-8", errors="replace")
