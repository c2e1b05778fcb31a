"""
Buffered byte-level access to the binary streams the codec reads and writes.
"""
from typing import BinaryIO

from .errors import StreamError

BUFFER_SIZE = 4096


class ByteReader:
    """
    Pulls single bytes out of a binary stream, reading ahead in chunks.

    End of stream is reported as a StreamError, as is any OSError raised by
    the underlying stream.
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = BUFFER_SIZE):
        self._stream = stream
        self._buffer_size = buffer_size
        self._buf = b""
        self._pos = 0

    def _fill(self) -> bool:
        try:
            chunk = self._stream.read(self._buffer_size)
        except OSError as e:
            raise StreamError(f"QOI.decode: Read failed: {e}") from e
        self._buf = chunk or b""
        self._pos = 0
        return len(self._buf) > 0

    def read_byte(self) -> int:
        if self._pos >= len(self._buf) and not self._fill():
            raise StreamError("QOI.decode: Unexpected end of stream")
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def read(self, n: int) -> bytes:
        """Read exactly n bytes."""
        out = bytearray()
        while len(out) < n:
            if self._pos >= len(self._buf) and not self._fill():
                raise StreamError("QOI.decode: Unexpected end of stream")
            take = self._buf[self._pos : self._pos + n - len(out)]
            self._pos += len(take)
            out.extend(take)
        return bytes(out)


class ByteWriter:
    """Collects bytes in a bytearray and hands them to the stream in chunks."""

    def __init__(self, stream: BinaryIO, buffer_size: int = BUFFER_SIZE):
        self._stream = stream
        self._buffer_size = buffer_size
        self._buf = bytearray()

    def write(self, data: bytes) -> None:
        self._buf.extend(data)
        if len(self._buf) >= self._buffer_size:
            self.flush()

    def flush(self) -> None:
        if not self._buf:
            return
        try:
            self._stream.write(bytes(self._buf))
        except OSError as e:
            raise StreamError(f"QOI.encode: Write failed: {e}") from e
        self._buf.clear()
