"""
Byte Sources for the Secure Line Editor
========================================

The editor consumes one byte at a time from a :class:`ByteReader`.
``read_byte`` returns the next byte as an ``int``, or ``None`` once
cancellation has been requested. End of input and read failures raise
:class:`~clipcrypt.core.errors.InputError`.
"""

from __future__ import annotations

import io
import os
import select
from typing import BinaryIO, Optional, Protocol

from clipcrypt.core.errors import InputError
from clipcrypt.terminal.raw_mode import CancelToken


class ByteReader(Protocol):
    fd: Optional[int]
    cancel: Optional[CancelToken]

    def read_byte(self) -> Optional[int]:
        ...


class FdByteReader:
    """Reads from a file descriptor, waking early when *cancel* trips."""

    def __init__(self, fd: int, cancel: Optional[CancelToken] = None) -> None:
        self.fd = fd
        self.cancel = cancel

    def read_byte(self) -> Optional[int]:
        watch = [self.fd]
        if self.cancel is not None:
            watch.append(self.cancel.fileno())

        while True:
            if self.cancel is not None and self.cancel.cancelled:
                return None
            try:
                readable, _, _ = select.select(watch, [], [])
            except OSError as exc:
                raise InputError(f"failed to wait for input: {exc}") from exc

            # Cancellation wins over a byte that arrived at the same time.
            if self.cancel is not None and (
                self.cancel.cancelled or self.cancel.fileno() in readable
            ):
                return None
            if self.fd not in readable:
                continue

            try:
                chunk = os.read(self.fd, 1)
            except BlockingIOError:
                continue
            except OSError as exc:
                raise InputError(f"failed to read input: {exc}") from exc
            if not chunk:
                raise InputError("failed to read input: end of stream")
            return chunk[0]


class StreamByteReader:
    """Reads from a binary stream that has no usable descriptor.

    Cancellation is only observed between bytes.
    """

    fd: Optional[int] = None

    def __init__(self, stream: BinaryIO, cancel: Optional[CancelToken] = None) -> None:
        self._stream = stream
        self.cancel = cancel

    def read_byte(self) -> Optional[int]:
        if self.cancel is not None and self.cancel.cancelled:
            return None
        try:
            chunk = self._stream.read(1)
        except OSError as exc:
            raise InputError(f"failed to read input: {exc}") from exc
        if not chunk:
            raise InputError("failed to read input: end of stream")
        return chunk[0]


def open_reader(stream, cancel: Optional[CancelToken] = None) -> ByteReader:
    """Pick the right reader for *stream* (usually ``sys.stdin``)."""
    try:
        fd = stream.fileno()
    except (AttributeError, io.UnsupportedOperation, ValueError):
        return StreamByteReader(getattr(stream, "buffer", stream), cancel)
    return FdByteReader(fd, cancel)
