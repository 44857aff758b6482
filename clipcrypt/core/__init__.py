"""
ClipCrypt Core Module
======================

Cipher engine, data models and error taxonomy. The session workflow
lives in :mod:`clipcrypt.core.workflow` and is imported directly.
"""

from clipcrypt.core.engine import CipherEngine, decrypt, derive_key, encrypt
from clipcrypt.core.errors import (
    ClipCryptError,
    ClipboardError,
    ClipboardToolFailed,
    CryptoError,
    DecryptionFailed,
    InputError,
    InvalidBase64,
    InvalidCiphertext,
    InvalidModeError,
    KeyDerivationError,
    NoClipboardTool,
    SessionInterrupted,
)
from clipcrypt.core.models import AutoClearJob, Mode, OperationResult

__all__ = [
    "AutoClearJob",
    "CipherEngine",
    "ClipCryptError",
    "ClipboardError",
    "ClipboardToolFailed",
    "CryptoError",
    "DecryptionFailed",
    "InputError",
    "InvalidBase64",
    "InvalidCiphertext",
    "InvalidModeError",
    "KeyDerivationError",
    "Mode",
    "NoClipboardTool",
    "OperationResult",
    "SessionInterrupted",
    "decrypt",
    "derive_key",
    "encrypt",
]
