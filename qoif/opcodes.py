"""
The seven opcodes of a qoif pixel stream.

Each opcode is a small frozen dataclass that knows its tag bits, how to
serialize itself and, where it changes the current pixel, how to apply
itself to it. The tags form a prefix code over the first byte:

    INDEX   00xxxxxx
    RUN_8   010xxxxx
    RUN_16  011xxxxx xxxxxxxx
    DIFF_8  10rrggbb
    DIFF_16 110rrrrr ggggbbbb
    DIFF_24 1110rrrr rgggggbb bbbaaaaa
    COLOR   1111RGBA [r] [g] [b] [a]

so every byte value selects exactly one opcode.
"""
from dataclasses import dataclass
from typing import Optional, Type, Union

from .stream import ByteReader
from .types import (
    QOI_COLOR,
    QOI_DIFF_8,
    QOI_DIFF_16,
    QOI_DIFF_24,
    QOI_INDEX,
    QOI_MASK_2,
    QOI_MASK_3,
    QOI_MASK_4,
    QOI_RUN_8,
    QOI_RUN_8_MAX,
    QOI_RUN_16,
    QOI_RUN_16_MAX,
    Pixel,
)


@dataclass(frozen=True)
class Index:
    index: int

    tag = QOI_INDEX
    mask = QOI_MASK_2

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return 0

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Index":
        return cls(b1 & 0x3F)

    def to_bytes(self) -> bytes:
        return bytes((self.tag | self.index,))


@dataclass(frozen=True)
class Run8:
    length: int  # 1..32

    tag = QOI_RUN_8
    mask = QOI_MASK_3

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return 0

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Run8":
        return cls((b1 & 0x1F) + 1)

    def to_bytes(self) -> bytes:
        return bytes((self.tag | (self.length - 1),))


@dataclass(frozen=True)
class Run16:
    length: int  # 33..8224

    tag = QOI_RUN_16
    mask = QOI_MASK_3

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return 1

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Run16":
        return cls((((b1 & 0x1F) << 8) | payload[0]) + QOI_RUN_8_MAX + 1)

    def to_bytes(self) -> bytes:
        v = self.length - (QOI_RUN_8_MAX + 1)
        return bytes((self.tag | (v >> 8), v & 0xFF))


@dataclass(frozen=True)
class Diff8:
    dr: int
    dg: int
    db: int

    tag = QOI_DIFF_8
    mask = QOI_MASK_2

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return 0

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Diff8":
        return cls(((b1 >> 4) & 0x03) - 2, ((b1 >> 2) & 0x03) - 2, (b1 & 0x03) - 2)

    def to_bytes(self) -> bytes:
        return bytes(
            (self.tag | ((self.dr + 2) << 4) | ((self.dg + 2) << 2) | (self.db + 2),)
        )

    def apply(self, px: Pixel) -> Pixel:
        return Pixel(
            (px.r + self.dr) & 0xFF, (px.g + self.dg) & 0xFF, (px.b + self.db) & 0xFF, px.a
        )


@dataclass(frozen=True)
class Diff16:
    dr: int
    dg: int
    db: int

    tag = QOI_DIFF_16
    mask = QOI_MASK_3

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return 1

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Diff16":
        b2 = payload[0]
        return cls((b1 & 0x1F) - 16, (b2 >> 4) - 8, (b2 & 0x0F) - 8)

    def to_bytes(self) -> bytes:
        v = (self.tag << 8) | ((self.dr + 16) << 8) | ((self.dg + 8) << 4) | (self.db + 8)
        return v.to_bytes(2, "big")

    def apply(self, px: Pixel) -> Pixel:
        return Pixel(
            (px.r + self.dr) & 0xFF, (px.g + self.dg) & 0xFF, (px.b + self.db) & 0xFF, px.a
        )


@dataclass(frozen=True)
class Diff24:
    dr: int
    dg: int
    db: int
    da: int

    tag = QOI_DIFF_24
    mask = QOI_MASK_4

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return 2

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Diff24":
        # four 5 bit fields packed into the low 20 bits
        v = ((b1 & 0x0F) << 16) | (payload[0] << 8) | payload[1]
        return cls(
            ((v >> 15) & 0x1F) - 16,
            ((v >> 10) & 0x1F) - 16,
            ((v >> 5) & 0x1F) - 16,
            (v & 0x1F) - 16,
        )

    def to_bytes(self) -> bytes:
        v = (
            (self.tag << 16)
            | ((self.dr + 16) << 15)
            | ((self.dg + 16) << 10)
            | ((self.db + 16) << 5)
            | (self.da + 16)
        )
        return v.to_bytes(3, "big")

    def apply(self, px: Pixel) -> Pixel:
        return Pixel(
            (px.r + self.dr) & 0xFF,
            (px.g + self.dg) & 0xFF,
            (px.b + self.db) & 0xFF,
            (px.a + self.da) & 0xFF,
        )


@dataclass(frozen=True)
class Color:
    """Literal values for the channels that changed; None means keep."""

    r: Optional[int] = None
    g: Optional[int] = None
    b: Optional[int] = None
    a: Optional[int] = None

    tag = QOI_COLOR
    mask = QOI_MASK_4

    @classmethod
    def payload_size(cls, b1: int) -> int:
        return bin(b1 & 0x0F).count("1")

    @classmethod
    def from_bytes(cls, b1: int, payload: bytes) -> "Color":
        values = iter(payload)
        r = next(values) if b1 & 0x08 else None
        g = next(values) if b1 & 0x04 else None
        b = next(values) if b1 & 0x02 else None
        a = next(values) if b1 & 0x01 else None
        return cls(r, g, b, a)

    @property
    def flags(self) -> int:
        return (
            (0x08 if self.r is not None else 0)
            | (0x04 if self.g is not None else 0)
            | (0x02 if self.b is not None else 0)
            | (0x01 if self.a is not None else 0)
        )

    def to_bytes(self) -> bytes:
        out = bytearray((self.tag | self.flags,))
        out.extend(v for v in (self.r, self.g, self.b, self.a) if v is not None)
        return bytes(out)

    def apply(self, px: Pixel) -> Pixel:
        return Pixel(
            px.r if self.r is None else self.r,
            px.g if self.g is None else self.g,
            px.b if self.b is None else self.b,
            px.a if self.a is None else self.a,
        )


Opcode = Union[Index, Run8, Run16, Diff8, Diff16, Diff24, Color]
OPCODES = (Index, Run8, Run16, Diff8, Diff16, Diff24, Color)


def opcode_for(b1: int) -> Type[Opcode]:
    """Pick the opcode class whose tag bits match the first byte."""
    for cls in OPCODES:
        if b1 & cls.mask == cls.tag:
            return cls
    # The tags cover all 256 values, see test_prefix_code.
    raise AssertionError(f"no opcode for byte {b1:#04x}")


def read_opcode(reader: ByteReader) -> Opcode:
    b1 = reader.read_byte()
    cls = opcode_for(b1)
    size = cls.payload_size(b1)
    payload = reader.read(size) if size else b""
    return cls.from_bytes(b1, payload)


def run_opcode(length: int) -> Union[Run8, Run16]:
    if not (0 < length <= QOI_RUN_16_MAX):
        raise ValueError(f"QOI.encode: Invalid run length {length}")
    if length <= QOI_RUN_8_MAX:
        return Run8(length)
    return Run16(length)


def select_opcode(prev: Pixel, px: Pixel) -> Opcode:
    """
    Choose the smallest opcode that takes prev to px.

    Deltas are plain differences of the channel values; anything that does
    not fit a DIFF form falls back to COLOR with only the changed channels.
    """
    dr = px.r - prev.r
    dg = px.g - prev.g
    db = px.b - prev.b
    da = px.a - prev.a

    if -16 <= dr <= 15 and -16 <= dg <= 15 and -16 <= db <= 15 and -16 <= da <= 15:
        if da == 0 and -2 <= dr <= 1 and -2 <= dg <= 1 and -2 <= db <= 1:
            return Diff8(dr, dg, db)
        if da == 0 and -8 <= dg <= 7 and -8 <= db <= 7:
            return Diff16(dr, dg, db)
        return Diff24(dr, dg, db, da)

    return Color(
        px.r if dr else None,
        px.g if dg else None,
        px.b if db else None,
        px.a if da else None,
    )
