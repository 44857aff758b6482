"""
ClipCrypt Console Interface
============================

Rich-powered console abstraction giving every ClipCrypt screen the same
banner, menu and severity-coloured message styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- consistent palette across all ClipCrypt output
# ---------------------------------------------------------------------------
_CRYPT_THEME = Theme(
    {
        "crypt.banner": "bold bright_cyan",
        "crypt.section": "bold bright_magenta",
        "crypt.success": "bold green",
        "crypt.warning": "bold yellow",
        "crypt.error": "bold red",
        "crypt.info": "bold bright_blue",
        "crypt.dim": "dim white",
        "crypt.highlight": "bold bright_white",
        "crypt.alert": "bold red",
    }
)

_BANNER_TITLE = "Text Encryption Tool"
_TAGLINE = "AES-256-GCM  |  clipboard delivery  |  auto-clear"


class CryptConsole:
    """Unified console interface for ClipCrypt.

    Wraps :class:`rich.console.Console` with the helpers the interactive
    session needs.

    Usage::

        con = CryptConsole()
        con.banner()
        con.menu(["Encrypt", "Decrypt"])
        con.success("Result copied to clipboard.")
    """

    def __init__(self, *, quiet: bool = False, record: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress banner and informational output.
            record: Enable Rich recording (used by tests).
        """
        self._quiet = quiet
        self._console = Console(
            theme=_CRYPT_THEME,
            record=record,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    @property
    def quiet(self) -> bool:
        return self._quiet

    # ------------------------------------------------------------------ #
    #  Banner and menu
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the ClipCrypt title panel."""
        if self._quiet:
            return
        body = Text.from_markup(
            f"[crypt.banner]=== {_BANNER_TITLE} ===[/crypt.banner]\n"
            f"[crypt.dim]{_TAGLINE}  |  v{version}[/crypt.dim]"
        )
        self._console.print(
            Panel(Align.center(body), border_style="bright_cyan", padding=(0, 2))
        )

    def menu(self, options: Sequence[str]) -> None:
        """Print a numbered option list."""
        for idx, label in enumerate(options, start=1):
            self._console.print(f"[crypt.highlight]{idx}.[/crypt.highlight] {label}")

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[crypt.success][✔] SUCCESS:[/crypt.success] {message}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[crypt.warning][⚠] WARNING:[/crypt.warning] {message}"
        )

    def alert(self, message: str) -> None:
        """Print a bare red alert line (used for the caps-lock warning)."""
        self._console.print(f"[crypt.alert]{message}[/crypt.alert]")

    def error(self, message: str) -> None:
        self._console.print(
            f"[crypt.error][✘] ERROR:[/crypt.error] {message}"
        )

    def info(self, message: str) -> None:
        if self._quiet:
            return
        self._console.print(
            f"[crypt.info][ℹ] INFO:[/crypt.info] {message}"
        )

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
