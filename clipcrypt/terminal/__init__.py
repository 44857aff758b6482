"""
ClipCrypt Terminal Module
==========================

Raw-mode secure line editor and the byte sources, cancellation token and
keyboard probes it is built from.
"""

from clipcrypt.terminal.editor import EditorState, KeyAction, SecureLineEditor
from clipcrypt.terminal.indicators import KeyboardStateDetector
from clipcrypt.terminal.raw_mode import CancelToken, RawTerminal, TerminalHandle
from clipcrypt.terminal.reader import FdByteReader, StreamByteReader, open_reader

__all__ = [
    "CancelToken",
    "EditorState",
    "FdByteReader",
    "KeyAction",
    "KeyboardStateDetector",
    "RawTerminal",
    "SecureLineEditor",
    "StreamByteReader",
    "TerminalHandle",
    "open_reader",
]
