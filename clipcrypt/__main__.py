"""
ClipCrypt Entry Point
======================

Allows running the CLI via: python -m clipcrypt
"""

from clipcrypt.cli import main

if __name__ == "__main__":
    main()
