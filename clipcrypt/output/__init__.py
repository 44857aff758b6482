"""
ClipCrypt Output Module
========================
"""

from clipcrypt.output.console import ClipCryptConsoleOutput

__all__ = ["ClipCryptConsoleOutput"]
