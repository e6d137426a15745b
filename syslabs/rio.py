"""Robust byte-stream I/O: short-count-safe reads and writes plus a buffered line reader."""

from __future__ import annotations

from typing import Union

RIO_BUFSIZE = 8192
MAXLINE = 8192
MAXBUF = 8192
LISTENQ = 1024

BytesLike = Union[bytes, bytearray, memoryview]


def _raw_read(stream, size: int) -> bytes:
    """Read at most ``size`` bytes with a single call; b"" means end of stream."""
    if hasattr(stream, "recv"):
        data = stream.recv(size)
    elif hasattr(stream, "read1"):
        data = stream.read1(size)
    else:
        data = stream.read(size)
    if data is None:
        raise BlockingIOError("stream has no data available")
    return bytes(data)


def read_n(stream, n: int) -> bytes:
    """Read up to ``n`` bytes without buffering, stopping early only at end of stream."""
    if n < 0:
        raise ValueError("byte count must not be negative")
    parts = []
    remaining = n
    while remaining > 0:
        chunk = _raw_read(stream, remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def write_n(stream, data: BytesLike) -> int:
    """Write all of ``data``, retrying short writes; return the number of bytes written."""
    view = memoryview(data).cast("B")
    total = len(view)
    offset = 0
    while offset < total:
        pending = view[offset:]
        if hasattr(stream, "send"):
            written = stream.send(pending)
        else:
            written = stream.write(pending)
            if written is None:
                written = len(pending)
        if written <= 0:
            raise OSError("write made no progress")
        offset += written
    return total


class RioReader:
    """A buffered reader over a socket or binary stream."""

    def __init__(self, stream):
        self._stream = stream
        self._buf = b""
        self._pos = 0

    def _available(self) -> int:
        return len(self._buf) - self._pos

    def _fill(self) -> bool:
        data = _raw_read(self._stream, RIO_BUFSIZE)
        if not data:
            return False
        self._buf = data
        self._pos = 0
        return True

    def read(self, n: int) -> bytes:
        """Return at most ``n`` bytes, refilling the buffer once if it is empty."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        if self._available() <= 0 and not self._fill():
            return b""
        chunk = self._buf[self._pos:self._pos + n]
        self._pos += len(chunk)
        return chunk

    def readn(self, n: int) -> bytes:
        """Return ``n`` bytes, or fewer only when the stream ends first."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        parts = []
        remaining = n
        while remaining > 0:
            chunk = self.read(remaining)
            if not chunk:
                break
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def readline(self, maxlen: int = MAXLINE) -> bytes:
        """Return the next line with its newline, holding at most ``maxlen - 1`` bytes.

        Returns b"" at end of stream when nothing was read.
        """
        limit = maxlen - 1
        parts = []
        taken = 0
        while taken < limit:
            if self._available() <= 0 and not self._fill():
                break
            window = self._buf[self._pos:self._pos + (limit - taken)]
            newline = window.find(b"\n")
            if newline >= 0:
                window = window[:newline + 1]
            parts.append(window)
            taken += len(window)
            self._pos += len(window)
            if newline >= 0:
                break
        return b"".join(parts)