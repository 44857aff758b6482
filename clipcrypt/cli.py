"""
ClipCrypt CLI
==============

Click-based command-line interface. With no subcommand an interactive
session asks for the mode; ``encrypt`` and ``decrypt`` skip the menu.

Usage::

    python -m clipcrypt
    python -m clipcrypt encrypt
    python -m clipcrypt decrypt --no-clipboard
    python -m clipcrypt clear

Exit status is 0 on success and 1 on any input, cryptographic or
clipboard failure. An interrupted session exits with 130. With ``--loop``
the session repeats until interrupted or until input ends.

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
import time
import tomllib
from typing import Optional

import click
from pydantic import ValidationError

from shared.config import ClipCryptConfig
from shared.console import CryptConsole
from shared.logger import CryptLogger

from clipcrypt import __version__
from clipcrypt.clipboard.manager import ClipboardLifecycle, run_auto_clear_job
from clipcrypt.core.errors import (
    ClipCryptError,
    ClipboardError,
    CryptoError,
    InvalidModeError,
    SessionInterrupted,
)
from clipcrypt.core.models import AutoClearJob, Mode
from clipcrypt.core.workflow import CryptWorkflow
from clipcrypt.output.console import ClipCryptConsoleOutput
from clipcrypt.terminal.editor import INTERRUPT_MESSAGE
from clipcrypt.terminal.raw_mode import CancelToken
from clipcrypt.terminal.reader import open_reader

# With --loop these return to the mode menu instead of ending the run.
RESETTABLE_ERRORS = (CryptoError, InvalidModeError)


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group(invoke_without_command=True)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to ClipCrypt configuration file (TOML).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and informational output.",
)
@click.option(
    "--no-clipboard",
    is_flag=True,
    default=False,
    help="Print the result instead of copying it.",
)
@click.option(
    "--no-auto-clear",
    is_flag=True,
    default=False,
    help="Do not clear the clipboard after a delay.",
)
@click.option(
    "--delay",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds before the clipboard is cleared (overrides config).",
)
@click.option(
    "--loop",
    is_flag=True,
    default=False,
    help="Return to the mode menu after each result or decryption error.",
)
@click.version_option(__version__, prog_name="clipcrypt")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    quiet: bool,
    no_clipboard: bool,
    no_auto_clear: bool,
    delay: Optional[float],
    loop: bool,
) -> None:
    """ClipCrypt -- encrypt or decrypt a line of text to the clipboard.

    The secret key and text are typed with masked input; the result is
    copied to the clipboard and wiped again after a short delay.
    """
    ctx.ensure_object(dict)
    console = CryptConsole(quiet=quiet)

    try:
        crypt_config = ClipCryptConfig.load(config)
    except (OSError, tomllib.TOMLDecodeError, TypeError) as exc:
        console.error(f"Could not load configuration: {exc}")
        ctx.exit(1)

    logger = CryptLogger.from_config("cli", crypt_config)
    ctx.obj["config"] = crypt_config
    ctx.obj["console"] = console
    ctx.obj["logger"] = logger
    ctx.obj["use_clipboard"] = not no_clipboard
    ctx.obj["auto_clear"] = False if no_auto_clear else None
    ctx.obj["delay"] = delay
    ctx.obj["loop"] = loop

    if ctx.invoked_subcommand is None:
        ctx.exit(_run_session(ctx, mode=None))


def _build_clipboard(ctx: click.Context) -> ClipboardLifecycle:
    config: ClipCryptConfig = ctx.obj["config"]
    try:
        return ClipboardLifecycle.from_config(
            config.clipboard,
            logger=CryptLogger.from_config("clipboard", config),
        )
    except ValueError as exc:
        ctx.obj["console"].error(str(exc))
        ctx.exit(1)


def _run_session(ctx: click.Context, mode: Optional[Mode]) -> int:
    """Run one interactive session and return the process exit status."""
    config: ClipCryptConfig = ctx.obj["config"]
    console: CryptConsole = ctx.obj["console"]
    logger: CryptLogger = ctx.obj["logger"]
    display = ClipCryptConsoleOutput(
        console, uniform_errors=config.global_settings.uniform_errors
    )
    clipboard = _build_clipboard(ctx) if ctx.obj["use_clipboard"] else None

    loop: bool = ctx.obj["loop"]

    console.banner(version=__version__)

    try:
        with CancelToken(install_signals=True) as token:
            workflow = CryptWorkflow(
                config,
                open_reader(sys.stdin, token),
                display,
                clipboard=clipboard,
                auto_clear=ctx.obj["auto_clear"],
                auto_clear_delay=ctx.obj["delay"],
                logger=CryptLogger.from_config("workflow", config),
            )
            while True:
                try:
                    result = workflow.run(mode)
                except ClipCryptError as exc:
                    logger.error("Session failed", kind=exc.kind)
                    display.display_error(exc)
                    if loop and isinstance(exc, RESETTABLE_ERRORS):
                        console.print()
                        continue
                    return 1

                display.display_result(result)
                if not loop:
                    break
                console.print()
    except SessionInterrupted as exc:
        if not exc.announced:
            console.alert(INTERRUPT_MESSAGE)
        raise

    if clipboard is not None and not result.copied:
        return 1
    return 0


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.pass_context
def encrypt(ctx: click.Context) -> None:
    """Encrypt a line of text (skips the mode menu)."""
    ctx.exit(_run_session(ctx, Mode.ENCRYPT))


@cli.command()
@click.pass_context
def decrypt(ctx: click.Context) -> None:
    """Decrypt a base64 envelope (skips the mode menu)."""
    ctx.exit(_run_session(ctx, Mode.DECRYPT))


@cli.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Empty the system clipboard."""
    console: CryptConsole = ctx.obj["console"]
    try:
        tool = _build_clipboard(ctx).clear()
    except ClipboardError as exc:
        console.error(f"{exc.user_message} ({exc})")
        ctx.exit(1)
    console.success(f"Clipboard cleared via {tool}.")


@cli.command("paste-check")
@click.pass_context
def paste_check(ctx: click.Context) -> None:
    """Report whether the clipboard can be read (contents are not shown)."""
    console: CryptConsole = ctx.obj["console"]
    try:
        content = _build_clipboard(ctx).read()
    except ClipboardError as exc:
        console.error(f"{exc.user_message} ({exc})")
        ctx.exit(1)
    console.success(f"Clipboard readable; holds {len(content)} characters.")


@cli.command("auto-clear", hidden=True)
@click.option("--delay", type=float, required=True)
@click.pass_context
def auto_clear(ctx: click.Context, delay: float) -> None:
    """Detached worker: wait, then clear the clipboard if unchanged.

    Reads an AutoClearJob as JSON from stdin.
    """
    logger = CryptLogger.from_config("autoclear", ctx.obj["config"])
    try:
        job = AutoClearJob.model_validate_json(sys.stdin.buffer.read())
    except ValidationError as exc:
        logger.error("Invalid auto-clear job: %s", exc.error_count())
        ctx.exit(1)

    time.sleep(delay)
    try:
        cleared = run_auto_clear_job(job, logger=logger)
    except (ClipboardError, ValueError) as exc:
        logger.error("Auto-clear failed: %s", exc)
        ctx.exit(1)
    logger.info("Auto-clear finished", cleared=cleared)


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the ClipCrypt CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
