"""
ClipCrypt Error Taxonomy
=========================

Every failure the tool can report is a subclass of :class:`ClipCryptError`.
Each class carries a stable ``kind`` string (used in logs) and a
``user_message`` shown by the console layer, so the user can tell a
wrong key from garbled input from a missing clipboard.

Recoverability:
    - :class:`InputError`, :class:`KeyDerivationError`: fatal.
    - :class:`InvalidModeError`: the user must restart.
    - :class:`InvalidBase64`, :class:`InvalidCiphertext`,
      :class:`DecryptionFailed`: recoverable, the session can be reset.
    - :class:`NoClipboardTool`, :class:`ClipboardToolFailed`: recoverable,
      the result is printed instead.
"""

from __future__ import annotations

from typing import Sequence


class ClipCryptError(Exception):
    """Base class for all ClipCrypt errors."""

    kind: str = "clipcrypt_error"
    user_message: str = "Operation failed."

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail or self.user_message)


# ===================================================================== #
#  Input / workflow
# ===================================================================== #


class InputError(ClipCryptError):
    """The input stream failed (EOF, read error, raw-mode failure)."""

    kind = "input_error"
    user_message = "Error reading input."


class InvalidModeError(ClipCryptError):
    kind = "invalid_mode"
    user_message = "Invalid mode. Please enter 1 or 2."


# ===================================================================== #
#  Cryptography
# ===================================================================== #


class CryptoError(ClipCryptError):
    """Base for encryption/decryption failures."""

    kind = "crypto_error"
    user_message = "Cryptographic operation failed."


class KeyDerivationError(CryptoError):
    kind = "key_derivation_failed"
    user_message = "Could not derive an encryption key."


class InvalidBase64(CryptoError):
    kind = "invalid_base64"
    user_message = "Input is not valid base64. Check that it was pasted completely."


class InvalidCiphertext(CryptoError):
    kind = "invalid_ciphertext"
    user_message = "Ciphertext is too short or malformed."


class DecryptionFailed(CryptoError):
    kind = "decryption_failed"
    user_message = "Decryption failed: wrong secret key or corrupted data."


# ===================================================================== #
#  Clipboard
# ===================================================================== #


class ClipboardError(ClipCryptError):
    kind = "clipboard_error"
    user_message = "Clipboard operation failed."


class ClipboardToolFailed(ClipboardError):
    """A single clipboard tool failed (missing binary, exit code, pipe, timeout)."""

    kind = "clipboard_tool_failed"

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool}: {reason}")


class NoClipboardTool(ClipboardError):
    """Every configured clipboard tool was tried and none succeeded."""

    kind = "no_clipboard_tool"
    user_message = "No clipboard tool available."

    def __init__(self, attempts: Sequence[ClipboardToolFailed] = ()) -> None:
        self.attempts = list(attempts)
        detail = "; ".join(str(a) for a in self.attempts) or "no tools configured"
        super().__init__(detail)


GENERIC_DECRYPT_MESSAGE = "Decryption failed."


def user_message_for(error: ClipCryptError, *, uniform: bool = False) -> str:
    """Return the message to display for *error*.

    With *uniform* set, every decrypt-side failure collapses into one
    generic message; the detailed ``kind`` is still available for logs.
    """
    if uniform and isinstance(error, (InvalidBase64, InvalidCiphertext, DecryptionFailed)):
        return GENERIC_DECRYPT_MESSAGE
    return error.user_message


class SessionInterrupted(SystemExit):
    """Raised when the user interrupts the session.

    During a prompt it is raised after the terminal is restored and the
    interrupt message printed (``announced``); outside a prompt the
    signal handler raises it directly.

    Subclasses :class:`SystemExit` so it terminates the program unless a
    caller deliberately intercepts it.
    """

    EXIT_CODE = 130

    def __init__(self, signum: int | None = None, *, announced: bool = False) -> None:
        self.signum = signum
        self.announced = announced
        super().__init__(self.EXIT_CODE)
