import io
from typing import BinaryIO, Sequence, Union

import numpy as np
from PIL import Image

from .cache import PixelCache, RunTracker
from .header import write_header
from .opcodes import Index, run_opcode, select_opcode
from .stream import ByteWriter
from .types import OPAQUE_BLACK, QOI_PADDING, Pixel, px_hash


class Encoder:
    """
    Push-style pixel encoder. Call encode() once per pixel in row-major
    order, then finish() exactly once.
    """

    def __init__(self, writer: ByteWriter):
        self._writer = writer
        self.prev = OPAQUE_BLACK
        self.cache = PixelCache()
        self.run = RunTracker()

    def _write_run(self) -> None:
        length = self.run.flush()
        if length is not None:
            self._writer.write(run_opcode(length).to_bytes())

    def encode(self, color: Sequence[int]) -> None:
        if len(color) == 3:
            px = Pixel(color[0], color[1], color[2], 255)
        else:
            px = Pixel(*color)

        if px == self.prev:
            full = self.run.extend()
            if full:
                self._write_run()
            return

        # The pending run belongs to the previous colour.
        self._write_run()

        pos = px_hash(px)
        if self.cache.lookup(pos) == px:
            self._writer.write(Index(pos).to_bytes())
            self.prev = px
            return

        self.cache.store(px)
        self._writer.write(select_opcode(self.prev, px).to_bytes())
        self.prev = px

    def finish(self) -> None:
        self._write_run()
        self._writer.flush()


def _as_rgba(pixels) -> tuple[np.ndarray, int]:
    """Return the pixel buffer as an (h, w, 4) uint8 array plus its channel count."""
    if isinstance(pixels, Image.Image):
        has_alpha = pixels.mode in ("RGBA", "LA", "PA", "RGBa", "La") or (
            "transparency" in pixels.info
        )
        return np.asarray(pixels.convert("RGBA")), 4 if has_alpha else 3

    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(
            "QOI.encode: Pixel buffer must have shape (height, width, 3 or 4)"
        )
    if arr.dtype != np.uint8:
        if not np.issubdtype(arr.dtype, np.integer):
            raise ValueError("QOI.encode: Channel values must be integers")
        if arr.size and (arr.min() < 0 or arr.max() > 255):
            raise ValueError("QOI.encode: Channel values must be in 0..255")
        arr = arr.astype(np.uint8)

    channels = arr.shape[2]
    if channels == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate((arr, alpha), axis=2)
    return arr, channels


def encode_image(stream: BinaryIO, pixels, colorspace: int = 0) -> None:
    """
    Encode a pixel buffer to stream: header, opcode stream, padding.

    :param stream: Binary file-like object opened for writing.
    :param pixels: numpy array of shape (height, width, 3 or 4) or a PIL image.
    :param colorspace: Stored in the header as is.
    """
    rgba, channels = _as_rgba(pixels)
    height, width = rgba.shape[:2]

    write_header(stream, width, height, channels, colorspace)

    writer = ByteWriter(stream)
    enc = Encoder(writer)
    for row in rgba:
        for color in row.tolist():
            enc.encode(color)
    enc.finish()

    writer.write(QOI_PADDING)
    writer.flush()


class QOIEncoder:
    @staticmethod
    def encode(color_data: Union[bytes, bytearray, Sequence[int]], description: dict) -> bytes:
        """
        Encode raw pixel bytes into a qoif file.

        :param color_data: Bytes-like object (bytes, bytearray, list of ints) containing pixel data.
        :param description: Dictionary containing 'width', 'height', 'channels', 'colorspace'.
        :return: bytes object containing the qoif file content.
        """
        width = description.get("width")
        height = description.get("height")
        channels = description.get("channels")
        colorspace = description.get("colorspace", 0)

        if channels not in (3, 4):
            raise ValueError("QOI.encode: Invalid description.channels, must be 3 or 4")

        if len(color_data) != width * height * channels:
            raise ValueError("QOI.encode: The length of colorData is incorrect")

        pixels = np.frombuffer(bytes(color_data), dtype=np.uint8).reshape(
            height, width, channels
        )
        out = io.BytesIO()
        encode_image(out, pixels, colorspace)
        return out.getvalue()
