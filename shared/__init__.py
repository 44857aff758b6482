"""
ClipCrypt Shared Module
=======================

Configuration, logging and console infrastructure used by the
``clipcrypt`` package.
"""

from shared.config import ClipCryptConfig

__all__ = ["ClipCryptConfig"]
