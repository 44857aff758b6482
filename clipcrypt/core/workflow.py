"""
ClipCrypt Session Workflow
===========================

Sequences one interactive session:

    mode prompt -> secret (masked) -> text (masked) -> encrypt/decrypt
    -> clipboard copy -> auto-clear

The workflow is single-threaded and synchronous; the only thing that
outlives it is the auto-clear job handed to the clipboard scheduler.
The derived key lives inside a :class:`CipherEngine` that is dropped as
soon as the output is computed.
"""

from __future__ import annotations

from typing import Optional

from shared.config import ClipCryptConfig
from shared.logger import CryptLogger

from clipcrypt.clipboard.manager import ClipboardLifecycle
from clipcrypt.core.engine import CipherEngine
from clipcrypt.core.errors import NoClipboardTool
from clipcrypt.core.models import Mode, OperationResult
from clipcrypt.output.console import ClipCryptConsoleOutput
from clipcrypt.terminal.editor import SecureLineEditor
from clipcrypt.terminal.indicators import KeyboardStateDetector
from clipcrypt.terminal.reader import ByteReader

MODE_PROMPT = "Mode: "
SECRET_PROMPT = "Enter Secret Key: "


class CryptWorkflow:
    """Runs encrypt/decrypt sessions against one input source.

    Args:
        config:    Loaded configuration.
        reader:    Byte source shared by every prompt of the session.
        display:   Console output formatter.
        clipboard: Clipboard lifecycle; ``None`` disables clipboard delivery.
        detector:  Keyboard probe; built from the editor config if omitted.
    """

    def __init__(
        self,
        config: ClipCryptConfig,
        reader: ByteReader,
        display: ClipCryptConsoleOutput,
        *,
        clipboard: Optional[ClipboardLifecycle] = None,
        detector: Optional[KeyboardStateDetector] = None,
        auto_clear: Optional[bool] = None,
        auto_clear_delay: Optional[float] = None,
        logger: Optional[CryptLogger] = None,
    ) -> None:
        self.config = config
        self.reader = reader
        self.display = display
        self.clipboard = clipboard
        self.detector = detector or KeyboardStateDetector(config.editor.caps_lock_glob)
        self.auto_clear = config.clipboard.auto_clear if auto_clear is None else auto_clear
        self.auto_clear_delay = (
            config.clipboard.auto_clear_delay if auto_clear_delay is None else auto_clear_delay
        )
        self.logger = logger or CryptLogger("workflow", console_output=False)

    def _editor(self, prompt: str, *, masked: bool = True) -> SecureLineEditor:
        return SecureLineEditor(
            prompt,
            masked=masked,
            detector=self.detector,
            config=self.config.editor,
            logger=self.logger,
        )

    # ------------------------------------------------------------------ #
    #  Steps
    # ------------------------------------------------------------------ #

    def ask_mode(self) -> Mode:
        """Show the menu and parse the answer.

        Raises:
            InvalidModeError: The answer is not 1, 2, encrypt or decrypt.
        """
        self.display.display_menu()
        return Mode.parse(self._editor(MODE_PROMPT, masked=False).read_line(self.reader))

    def read_secret(self) -> str:
        if self.detector.caps_lock_on():
            self.display.display_caps_lock_warning()
        secret = self._editor(SECRET_PROMPT).read_line(self.reader)
        if self.detector.contains_hangul(secret):
            self.display.display_hangul_warning()
        return secret

    def compute(self, mode: Mode, secret: str, text: str) -> str:
        engine = CipherEngine(secret, logger=self.logger)
        with self.logger.operation(mode.value), self.logger.timed(mode.value):
            if mode is Mode.ENCRYPT:
                return engine.encrypt(text)
            return engine.decrypt(text)

    def deliver(self, result: OperationResult) -> OperationResult:
        """Copy the output and schedule the auto-clear.

        A missing clipboard is recorded on *result* rather than raised,
        so the caller can still show the output.
        """
        if self.clipboard is None:
            return result

        try:
            self.clipboard.copy(result.output)
        except NoClipboardTool as exc:
            self.logger.warning("Clipboard unavailable", kind=exc.kind)
            result.clipboard_error = str(exc)
            return result
        result.copied = True

        if self.auto_clear and result.output:
            try:
                result.auto_clear_scheduled = self.clipboard.schedule_auto_clear(
                    result.output, self.auto_clear_delay
                )
            except OSError as exc:
                self.logger.warning("Could not start auto-clear worker: %s", exc)
        return result

    # ------------------------------------------------------------------ #
    #  Session
    # ------------------------------------------------------------------ #

    def run(self, mode: Optional[Mode] = None) -> OperationResult:
        """Run one full session.

        Raises:
            InputError, InvalidModeError, CryptoError: Propagated for the
                CLI to report. ``SessionInterrupted`` exits the program.
        """
        if mode is None:
            mode = self.ask_mode()
        self.logger.info("Session started", mode=mode.value)

        secret = self.read_secret()
        text = self._editor(mode.text_prompt).read_line(self.reader)
        output = self.compute(mode, secret, text)
        del secret, text

        return self.deliver(OperationResult(mode=mode, output=output))
