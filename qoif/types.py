from typing import NamedTuple

# Opcode tags
QOI_INDEX = 0x00  # 00xxxxxx
QOI_RUN_8 = 0x40  # 010xxxxx
QOI_RUN_16 = 0x60  # 011xxxxx
QOI_DIFF_8 = 0x80  # 10xxxxxx
QOI_DIFF_16 = 0xC0  # 110xxxxx
QOI_DIFF_24 = 0xE0  # 1110xxxx
QOI_COLOR = 0xF0  # 1111xxxx

QOI_MASK_2 = 0xC0
QOI_MASK_3 = 0xE0
QOI_MASK_4 = 0xF0

QOI_MAGIC = b"qoif"
QOI_HEADER_SIZE = 14
QOI_PADDING = b"\x00\x00\x00\x00"

QOI_CACHE_SIZE = 64
QOI_RUN_8_MAX = 32
QOI_RUN_16_MAX = 0x2020  # 8224 = 0x1FFF + 33


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int


# Starting value of the previous/current pixel register on both sides.
# The cache starts all zero, this does not.
OPAQUE_BLACK = Pixel(0, 0, 0, 255)
ZERO = Pixel(0, 0, 0, 0)


def px_hash(px: Pixel) -> int:
    """Cache slot of a pixel."""
    return (px.r ^ px.g ^ px.b ^ px.a) % QOI_CACHE_SIZE
