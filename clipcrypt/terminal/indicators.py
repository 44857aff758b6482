"""
Keyboard State Indicators
==========================

Best-effort probes for the live indicators drawn by the secure line
editor: the caps-lock LED (read from sysfs) and the script of what is
being typed. Every probe degrades to "off" on any error.
"""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Optional

_HANGUL_RANGES: tuple[tuple[int, int], ...] = (
    (0xAC00, 0xD7A3),  # syllables
    (0x3131, 0x318E),  # compatibility jamo
    (0x3200, 0x32FF),  # enclosed CJK letters
)

DEFAULT_CAPS_LOCK_GLOB = "/sys/class/leds/input*::capslock/brightness"


class KeyboardStateDetector:
    """Reads caps-lock state and classifies typed characters.

    The LED path is resolved once at construction so each query costs a
    single small file read.
    """

    def __init__(self, caps_lock_glob: str = DEFAULT_CAPS_LOCK_GLOB) -> None:
        matches = sorted(glob.glob(caps_lock_glob))
        self.caps_lock_path: Optional[Path] = Path(matches[0]) if matches else None

    def caps_lock_on(self) -> bool:
        if self.caps_lock_path is None:
            return False
        try:
            return self.caps_lock_path.read_text(encoding="ascii").strip() == "1"
        except (OSError, UnicodeDecodeError):
            return False

    @staticmethod
    def is_non_latin_byte(byte: int) -> bool:
        """A high-bit byte is part of a multi-byte (non-ASCII) sequence."""
        return byte >= 0x80

    @staticmethod
    def is_hangul(char: str) -> bool:
        code = ord(char)
        return any(lo <= code <= hi for lo, hi in _HANGUL_RANGES)

    def contains_hangul(self, text: str) -> bool:
        return any(self.is_hangul(ch) for ch in text)
