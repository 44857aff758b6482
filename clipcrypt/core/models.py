"""
ClipCrypt Core Data Models
===========================

Pydantic models shared by the workflow, the clipboard lifecycle and the
console output layer.

Secret material never lives in these models longer than one operation:
an :class:`OperationResult` holds the computed output only so the
console can fall back to printing it when no clipboard is available.

References:
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from clipcrypt.core.errors import InvalidModeError


# ===================================================================== #
#  Constants
# ===================================================================== #

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class Mode(str, enum.Enum):
    """Operation selected at the mode prompt."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"

    @property
    def label(self) -> str:
        return self.value.title()

    @property
    def text_prompt(self) -> str:
        return f"Enter text to {self.value}: "

    @classmethod
    def parse(cls, choice: str) -> Mode:
        """Parse a menu answer: ``1``/``2`` or the mode name.

        Raises:
            InvalidModeError: For anything else.
        """
        value = choice.strip().lower()
        if value in ("1", cls.ENCRYPT.value):
            return cls.ENCRYPT
        if value in ("2", cls.DECRYPT.value):
            return cls.DECRYPT
        raise InvalidModeError(f"unrecognised mode {choice!r}")


# ===================================================================== #
#  Models
# ===================================================================== #


class AutoClearJob(BaseModel):
    """Instruction handed to a scheduler: clear the clipboard if it still
    holds ``original_text``.

    Serialised as JSON on the detached worker's stdin.
    """

    model_config = ConfigDict(frozen=True)

    original_text: str = Field(..., min_length=1)
    tools: list[str] = Field(default_factory=list)
    exec_timeout: float = Field(default=4.0, gt=0)


class OperationResult(BaseModel):
    """Outcome of one encrypt/decrypt session."""

    mode: Mode
    output: str = Field(default="", repr=False)
    copied: bool = False
    auto_clear_scheduled: bool = False
    clipboard_error: Optional[str] = None
