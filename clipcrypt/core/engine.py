"""
ClipCrypt Cipher Engine
========================

Passphrase-based authenticated encryption of a single text value.

Key derivation is one SHA-256 digest of the UTF-8 passphrase bytes, used
directly as an AES-256 key. There is no salt: the same passphrase always
yields the same key, which is what lets two parties share ciphertext
with nothing but the passphrase.

Wire format (standard padded base64)::

    base64( nonce[12] || ciphertext[n] || tag[16] )

References:
    - NIST SP 800-38D (2007). Recommendation for Block Cipher Modes of
      Operation: Galois/Counter Mode (GCM) and GMAC.
    - FIPS 180-4 (2015). Secure Hash Standard.
    - cryptography.io AEAD documentation.
      https://cryptography.io/en/latest/hazmat/primitives/aead/
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import secrets
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from shared.logger import CryptLogger

from clipcrypt.core.errors import (
    DecryptionFailed,
    InvalidBase64,
    InvalidCiphertext,
    KeyDerivationError,
)
from clipcrypt.core.models import KEY_SIZE, NONCE_SIZE


def derive_key(passphrase: str) -> bytes:
    """Derive the 32-byte key for *passphrase* (SHA-256, deterministic)."""
    return hashlib.sha256(passphrase.encode("utf-8")).digest()


class CipherEngine:
    """AES-256-GCM encryptor bound to one passphrase.

    The key is derived once at construction and held only for the
    lifetime of the engine; create a new engine for each secret entry.

    Usage::

        engine = CipherEngine("correct horse")
        token = engine.encrypt("hello world")
        engine.decrypt(token)   # 'hello world'
    """

    def __init__(self, passphrase: str, *, logger: Optional[CryptLogger] = None) -> None:
        self._key = derive_key(passphrase)
        if len(self._key) != KEY_SIZE:
            raise KeyDerivationError(f"derived key has {len(self._key)} bytes")
        try:
            self._aead = AESGCM(self._key)
        except ValueError as exc:
            raise KeyDerivationError(str(exc)) from exc
        self.logger = logger or CryptLogger("engine", console_output=False)

    # ------------------------------------------------------------------ #
    #  Encryption
    # ------------------------------------------------------------------ #

    def encrypt(self, plaintext: str) -> str:
        """Encrypt *plaintext* and return the base64 envelope.

        An empty plaintext returns an empty string without touching the
        cipher. Every call draws a fresh random nonce.
        """
        if plaintext == "":
            return ""

        nonce = secrets.token_bytes(NONCE_SIZE)
        sealed = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        envelope = base64.b64encode(nonce + sealed).decode("ascii")

        self.logger.debug(
            "Encrypted %d plaintext bytes", len(plaintext.encode("utf-8")),
            envelope_length=len(envelope),
        )
        return envelope

    # ------------------------------------------------------------------ #
    #  Decryption
    # ------------------------------------------------------------------ #

    def decrypt(self, encoded: str) -> str:
        """Authenticate and decrypt a base64 envelope.

        Empty input returns an empty string. Nothing is returned unless
        the authentication tag verifies.

        Raises:
            InvalidBase64: *encoded* is not strict standard base64.
            InvalidCiphertext: Decoded data is shorter than the nonce, or
                the authenticated plaintext is not UTF-8.
            DecryptionFailed: Wrong key or tampered data.
        """
        if encoded == "":
            return ""

        try:
            data = base64.b64decode(encoded.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            self.logger.debug("Rejected envelope", kind=InvalidBase64.kind)
            raise InvalidBase64(str(exc)) from exc

        if len(data) < NONCE_SIZE:
            self.logger.debug("Rejected envelope", kind=InvalidCiphertext.kind, length=len(data))
            raise InvalidCiphertext(f"{len(data)} bytes, need at least {NONCE_SIZE}")

        nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            plaintext = self._aead.decrypt(nonce, sealed, None)
        except (InvalidTag, ValueError) as exc:
            self.logger.debug("Authentication failed", kind=DecryptionFailed.kind)
            raise DecryptionFailed(type(exc).__name__) from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidCiphertext("authenticated payload is not UTF-8 text") from exc


# ===================================================================== #
#  Convenience wrappers
# ===================================================================== #


def encrypt(passphrase: str, plaintext: str) -> str:
    """Encrypt *plaintext* under *passphrase* with a fresh engine."""
    return CipherEngine(passphrase).encrypt(plaintext)


def decrypt(passphrase: str, encoded: str) -> str:
    """Decrypt *encoded* under *passphrase* with a fresh engine."""
    return CipherEngine(passphrase).decrypt(encoded)
