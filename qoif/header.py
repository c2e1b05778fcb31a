import struct
from typing import BinaryIO, NamedTuple

from .errors import ChannelError, FormatError, StreamError
from .types import QOI_HEADER_SIZE, QOI_MAGIC


class Header(NamedTuple):
    width: int
    height: int
    channels: int
    colorspace: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def pack_header(width: int, height: int, channels: int = 4, colorspace: int = 0) -> bytes:
    """
    Build the 14 byte descriptor.

    magic(4), width(4), height(4), channels(1), colorspace(1), big endian.
    """
    if not (0 <= width < 4294967296):
        raise ValueError("QOI.encode: Invalid width")
    if not (0 <= height < 4294967296):
        raise ValueError("QOI.encode: Invalid height")
    if channels not in (3, 4):
        raise ChannelError(f"QOI.encode: Invalid channels {channels}, must be 3 or 4")
    if not (0 <= colorspace <= 255):
        raise ValueError("QOI.encode: Invalid colorspace")

    return QOI_MAGIC + struct.pack(">IIBB", width, height, channels, colorspace)


def unpack_header(data: bytes) -> Header:
    # Anything not starting with the magic is a format error, even if short.
    if data[:4] != QOI_MAGIC:
        raise FormatError("QOI.decode: The signature of the QOI file is invalid")
    if len(data) < QOI_HEADER_SIZE:
        raise StreamError("QOI.decode: File too short for header")

    width, height, channels, colorspace = struct.unpack(">IIBB", data[4:QOI_HEADER_SIZE])
    if channels not in (3, 4):
        raise ChannelError(
            f"QOI.decode: The number of channels declared in the file is invalid: {channels}"
        )
    return Header(width, height, channels, colorspace)


def write_header(
    stream: BinaryIO, width: int, height: int, channels: int = 4, colorspace: int = 0
) -> None:
    data = pack_header(width, height, channels, colorspace)
    try:
        stream.write(data)
    except OSError as e:
        raise StreamError(f"QOI.encode: Write failed: {e}") from e


def read_header(stream: BinaryIO) -> Header:
    """Read and validate the descriptor at the current stream position."""
    try:
        data = stream.read(QOI_HEADER_SIZE) or b""
        # short reads are legal on raw streams
        while 0 < len(data) < QOI_HEADER_SIZE:
            more = stream.read(QOI_HEADER_SIZE - len(data))
            if not more:
                break
            data += more
    except OSError as e:
        raise StreamError(f"QOI.decode: Read failed: {e}") from e
    return unpack_header(data)
