"""
ClipCrypt Console Output
=========================

Rich-based presentation of the interactive session: the mode menu,
warnings, per-kind error messages and the final result.

Uses the shared :class:`~shared.console.CryptConsole` for consistent
styling.
"""

from __future__ import annotations

from typing import Optional

from rich.text import Text

from shared.console import CryptConsole
from clipcrypt.core.errors import ClipCryptError, NoClipboardTool, user_message_for
from clipcrypt.core.models import Mode, OperationResult

CAPS_LOCK_WARNING = "WARNING: CAPS LOCK is ON"
HANGUL_SECRET_WARNING = (
    "Secret key contains Hangul characters; check your input method."
)


class ClipCryptConsoleOutput:
    """Console formatters for the ClipCrypt session.

    Args:
        console:        Shared console. Created if not provided.
        uniform_errors: Collapse decrypt failures into one message.
    """

    def __init__(
        self,
        console: Optional[CryptConsole] = None,
        *,
        uniform_errors: bool = False,
    ) -> None:
        self.console = console or CryptConsole()
        self.uniform_errors = uniform_errors

    def display_menu(self) -> None:
        self.console.menu([mode.label for mode in Mode])

    def display_caps_lock_warning(self) -> None:
        self.console.alert(CAPS_LOCK_WARNING)

    def display_hangul_warning(self) -> None:
        self.console.warning(HANGUL_SECRET_WARNING)

    def display_error(self, error: ClipCryptError) -> None:
        self.console.error(user_message_for(error, uniform=self.uniform_errors))

    def display_result(self, result: OperationResult) -> None:
        """Report where the result went.

        When the clipboard was unavailable the result itself is printed,
        since it would otherwise be lost.
        """
        if result.copied:
            message = "Success! Result copied to clipboard."
            if result.auto_clear_scheduled:
                message += " It will be cleared automatically."
            self.console.success(message)
            return

        if result.clipboard_error is not None:
            self.console.error(f"{NoClipboardTool.user_message} ({result.clipboard_error})")

        # soft_wrap keeps long ciphertext on one selectable line
        self.console.print(
            Text.assemble(("Result: ", "crypt.highlight"), result.output),
            soft_wrap=True,
        )
