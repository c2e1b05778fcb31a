import io
from typing import BinaryIO, Iterator

import numpy as np

from .cache import PixelCache
from .errors import StreamError
from .header import Header, read_header
from .opcodes import Index, Run8, Run16, read_opcode
from .stream import ByteReader
from .types import OPAQUE_BLACK, Pixel


class Decoder(Iterator[Pixel]):
    """
    Pull-style pixel decoder: each next() yields one pixel of the image.

    Iteration ends after header.pixel_count pixels. If the stream runs out
    first a StreamError is raised; pixels already yielded stay valid and
    the decoder stops for good.
    """

    def __init__(self, header: Header, reader: ByteReader):
        self.header = header
        self._reader = reader
        self.current = OPAQUE_BLACK
        self.remaining = header.pixel_count
        self.cache = PixelCache()
        self.run = 0

    def __iter__(self) -> "Decoder":
        return self

    def __next__(self) -> Pixel:
        if self.remaining <= 0:
            raise StopIteration
        self.remaining -= 1

        if self.run > 0:
            self.run -= 1
            return self.current

        try:
            op = read_opcode(self._reader)
        except StreamError:
            self.remaining = 0
            raise

        if isinstance(op, Index):
            self.current = self.cache.lookup(op.index)
        elif isinstance(op, (Run8, Run16)):
            self.run = op.length - 1
        else:
            self.current = op.apply(self.current)
            self.cache.store(self.current)
        return self.current


def decode_header(stream: BinaryIO) -> tuple[int, int]:
    header = read_header(stream)
    return header.width, header.height


def decode_image(stream: BinaryIO) -> np.ndarray:
    """
    Decode a qoif stream into an (height, width, 4) uint8 array.

    The channel count stored in the header does not change the output.
    """
    return decode_pixels(read_header(stream), stream)


def decode_pixels(header: Header, stream: BinaryIO) -> np.ndarray:
    """Decode the opcode stream that follows an already-read header."""
    if header.pixel_count == 0:
        return np.zeros((header.height, header.width, 4), dtype=np.uint8)

    # sized by the pixels the stream delivers, not by the header
    data = bytearray()
    for px in Decoder(header, ByteReader(stream)):
        data.extend(px)
    return np.frombuffer(data, dtype=np.uint8).reshape(header.height, header.width, 4)


class QOIDecoder:
    """
    A class to decode qoif files into raw pixel data.
    """

    @staticmethod
    def decode(file_data: bytes, byte_offset: int = 0, byte_length: int = None) -> dict:
        """
        Decode a qoif file given as a bytes/bytearray object.

        :param file_data: Bytes containing the qoif file.
        :param byte_offset: Offset to the start of the qoif file in file_data.
        :param byte_length: Length of the qoif file in bytes.
        :return: Dictionary containing width, height, colorspace, channels, and data (RGBA bytes).
        """
        if byte_length is None:
            byte_length = len(file_data) - byte_offset

        stream = io.BytesIO(file_data[byte_offset : byte_offset + byte_length])
        header = read_header(stream)
        pixels = decode_pixels(header, stream)

        return {
            "width": header.width,
            "height": header.height,
            "colorspace": header.colorspace,
            "channels": 4,
            "data": pixels.tobytes(),
        }
