"""
Raw Terminal Mode and Cancellation
===================================

:class:`RawTerminal` puts an input descriptor into raw mode for the
duration of a ``with`` block and hands back a :class:`TerminalHandle`
that owns the saved attributes. Restoration happens exactly once: the
handle's guard makes every later call a no-op, whichever exit path
(Enter, interrupt, read error) reaches it first.

:class:`CancelToken` turns asynchronous termination signals into an
ordinary readable descriptor (a self-pipe), so the input loop can
``select`` on "byte available" and "cancel requested" together and run
its cleanup in a fixed order. Outside a prompt there is no loop to wake,
and the handler raises :class:`SessionInterrupted` where the signal lands.

References:
    - termios(3), tty(3) manual pages.
    - Bernstein, D. J. The self-pipe trick. https://cr.yp.to/docs/selfpipe.html
"""

from __future__ import annotations

import contextlib
import os
import signal
import termios
import threading
import tty
from typing import Any, Callable, Iterator, Optional

from shared.logger import CryptLogger

from clipcrypt.core.errors import InputError, SessionInterrupted

_CANCEL_SIGNALS: tuple[int, ...] = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


# ===================================================================== #
#  Terminal handle
# ===================================================================== #


class TerminalHandle:
    """Owns the saved terminal attributes of one raw-mode acquisition.

    Attributes:
        fd:    Descriptor the attributes belong to, or ``None``.
        saved: ``termios`` attribute list captured before entering raw
               mode, or ``None`` when the input is not a terminal.
    """

    def __init__(
        self,
        fd: Optional[int],
        saved: Optional[list[Any]],
        *,
        logger: Optional[CryptLogger] = None,
    ) -> None:
        self.fd = fd
        self.saved = saved
        self._lock = threading.Lock()
        self._restored = False
        self.logger = logger or CryptLogger("terminal", console_output=False)

    @property
    def is_raw(self) -> bool:
        return self.saved is not None and not self._restored

    @property
    def restored(self) -> bool:
        return self._restored

    def restore(self) -> bool:
        """Restore the saved attributes once.

        A failing ``tcsetattr`` is logged rather than raised, so it never
        masks an exception already leaving the raw-mode block, and the
        handle stays unrestored.

        Returns:
            ``True`` if this call performed the restoration, ``False`` if
            it had already happened, failed, or there was nothing to restore.
        """
        with self._lock:
            if self._restored or self.fd is None or self.saved is None:
                return False
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.saved)
            except termios.error as exc:
                self.logger.warning("Could not restore terminal: %s", exc, fd=self.fd)
                return False
            self._restored = True
        return True


class RawTerminal:
    """Scoped raw-mode acquisition.

    Usage::

        with RawTerminal(sys.stdin.fileno()) as handle:
            ...  # unbuffered, unechoed input
        # attributes restored here, on every exit path

    A descriptor that is not a TTY (pipe, file, ``None``) yields a handle
    with nothing saved, so callers need no special case for tests or
    redirected input.
    """

    def __init__(self, fd: Optional[int], *, logger: Optional[CryptLogger] = None) -> None:
        self._fd = fd
        self._handle: Optional[TerminalHandle] = None
        self.logger = logger or CryptLogger("terminal", console_output=False)

    def __enter__(self) -> TerminalHandle:
        if self._fd is None or not os.isatty(self._fd):
            self._handle = TerminalHandle(self._fd, None, logger=self.logger)
            return self._handle

        try:
            saved = termios.tcgetattr(self._fd)
        except termios.error as exc:
            raise InputError(f"failed to get terminal state: {exc}") from exc

        self._handle = TerminalHandle(self._fd, saved, logger=self.logger)
        try:
            tty.setraw(self._fd)
        except termios.error as exc:
            self._handle.restore()
            raise InputError(f"failed to make terminal raw: {exc}") from exc

        self.logger.debug("Entered raw mode", fd=self._fd)
        return self._handle

    def __exit__(self, *exc: Any) -> None:
        if self._handle is not None and self._handle.restore():
            self.logger.debug("Restored terminal", fd=self._fd)


# ===================================================================== #
#  Cancellation
# ===================================================================== #


class CancelToken:
    """Self-pipe cancellation flag, safe to trip from a signal handler.

    Entering the token as a context manager optionally routes SIGINT,
    SIGTERM and SIGHUP to :meth:`cancel`; the previous handlers are put
    back and the pipe closed on exit. Inside :meth:`deferring` a signal
    only trips the token; anywhere else the handler also raises
    :class:`SessionInterrupted`.
    """

    def __init__(self, *, install_signals: bool = False) -> None:
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self._cancelled = False
        self._closed = False
        self._install_signals = install_signals
        self._deferring = False
        self._previous: dict[int, Any] = {}
        self.signum: Optional[int] = None

    def fileno(self) -> int:
        """Descriptor that becomes readable once :meth:`cancel` is called."""
        return self._read_fd

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, signum: Optional[int] = None) -> None:
        if self._cancelled or self._closed:
            return
        self._cancelled = True
        self.signum = signum
        try:
            os.write(self._write_fd, b"\x00")
        except BlockingIOError:
            # Pipe already holds a wake-up byte.
            pass

    @contextlib.contextmanager
    def deferring(self) -> Iterator[CancelToken]:
        """Hold signals as a pending cancel while a prompt is reading."""
        self._deferring = True
        try:
            yield self
        finally:
            self._deferring = False

    def _handler(self) -> Callable[[int, Any], None]:
        def handle(signum: int, frame: Any) -> None:
            self.cancel(signum)
            if not self._deferring:
                raise SessionInterrupted(signum)
        return handle

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        os.close(self._read_fd)
        os.close(self._write_fd)

    def __enter__(self) -> CancelToken:
        if self._install_signals and threading.current_thread() is threading.main_thread():
            handler = self._handler()
            for signum in _CANCEL_SIGNALS:
                self._previous[signum] = signal.signal(signum, handler)
        return self

    def __exit__(self, *exc: Any) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()
        self.close()
