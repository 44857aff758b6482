"""
Clipboard Tool Definitions
===========================

External programs ClipCrypt can drive to set and read the system
clipboard, and a single helper that runs one of them and turns every
way it can fail into a :class:`~clipcrypt.core.errors.ClipboardToolFailed`.
"""

from __future__ import annotations

import subprocess
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from clipcrypt.core.errors import ClipboardToolFailed

Runner = Callable[..., subprocess.CompletedProcess]


class ClipboardTool(BaseModel):
    """One clipboard program and the argv used to copy, read and clear."""

    model_config = ConfigDict(frozen=True)

    name: str
    copy_args: list[str] = Field(default_factory=list)
    read_command: list[str]
    clear_command: Optional[list[str]] = None

    @property
    def copy_command(self) -> list[str]:
        return [self.name, *self.copy_args]


KNOWN_TOOLS: dict[str, ClipboardTool] = {
    "wl-copy": ClipboardTool(
        name="wl-copy",
        read_command=["wl-paste", "--no-newline"],
        clear_command=["wl-copy", "--clear"],
    ),
    "xclip": ClipboardTool(
        name="xclip",
        copy_args=["-selection", "clipboard"],
        read_command=["xclip", "-selection", "clipboard", "-o"],
    ),
    "xsel": ClipboardTool(
        name="xsel",
        copy_args=["--clipboard", "--input"],
        read_command=["xsel", "--clipboard", "--output"],
    ),
    "pbcopy": ClipboardTool(name="pbcopy", read_command=["pbpaste"]),
}


def resolve_tools(names: Sequence[str]) -> list[ClipboardTool]:
    """Look up tool definitions by name, preserving order.

    Raises:
        ValueError: A name is not in :data:`KNOWN_TOOLS`.
    """
    unknown = [n for n in names if n not in KNOWN_TOOLS]
    if unknown:
        raise ValueError(
            f"Unknown clipboard tool(s): {', '.join(unknown)}. "
            f"Known: {', '.join(KNOWN_TOOLS)}"
        )
    return [KNOWN_TOOLS[n] for n in names]


def run_tool(
    tool_name: str,
    argv: list[str],
    *,
    input_text: Optional[str] = None,
    capture: bool = False,
    timeout: float,
    runner: Runner = subprocess.run,
) -> str:
    """Run *argv* to completion within *timeout* seconds.

    Stdout is discarded unless *capture* is set: ``xclip`` leaves a
    background child holding the selection, and waiting on its stdout
    would block until the timeout.

    Returns:
        Captured stdout decoded as UTF-8 (empty when not capturing).

    Raises:
        ClipboardToolFailed: Missing binary, timeout, I/O error or a
            non-zero exit status.
    """
    try:
        completed = runner(
            argv,
            input=input_text.encode("utf-8") if input_text is not None else None,
            stdin=None if input_text is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ClipboardToolFailed(tool_name, f"{argv[0]} not installed") from exc
    except subprocess.TimeoutExpired as exc:
        raise ClipboardToolFailed(tool_name, f"timed out after {timeout:g}s") from exc
    except OSError as exc:
        raise ClipboardToolFailed(tool_name, str(exc)) from exc

    if completed.returncode != 0:
        raise ClipboardToolFailed(tool_name, f"exit status {completed.returncode}")

    if not capture:
        return ""
    return (completed.stdout or b"").decode("utf-8", errors="replace")
