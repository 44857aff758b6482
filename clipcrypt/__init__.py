"""
ClipCrypt -- Clipboard Text Encryption Tool
============================================

Encrypts or decrypts a short line of text with a passphrase-derived
AES-256-GCM key and delivers the result through the system clipboard,
clearing it again after a delay.

Modules:
    - clipcrypt.core: cipher engine, models, errors and session workflow
    - clipcrypt.terminal: raw-mode secure line editor
    - clipcrypt.clipboard: clipboard tools, lifecycle and auto-clear
    - clipcrypt.output: console presentation
    - clipcrypt.cli: Click-based command-line interface
"""

__version__ = "1.0.0"
__tool_name__ = "clipcrypt"
