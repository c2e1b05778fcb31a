import io

import pytest

from qoif.opcodes import (
    OPCODES,
    Color,
    Diff8,
    Diff16,
    Diff24,
    Index,
    Run8,
    Run16,
    opcode_for,
    read_opcode,
    run_opcode,
    select_opcode,
)
from qoif.stream import ByteReader
from qoif.types import Pixel


def test_prefix_code():
    # every possible first byte selects exactly one opcode
    for b1 in range(256):
        matches = [cls for cls in OPCODES if b1 & cls.mask == cls.tag]
        assert len(matches) == 1, f"{b1:#04x} matches {matches}"
        assert opcode_for(b1) is matches[0]


@pytest.mark.parametrize(
    "op, encoded",
    [
        (Index(0), b"\x00"),
        (Index(63), b"\x3f"),
        (Run8(1), b"\x40"),
        (Run8(32), b"\x5f"),
        (Run16(33), b"\x60\x00"),
        (Run16(8224), b"\x7f\xff"),
        (Diff8(1, 0, 0), b"\xba"),
        (Diff8(-2, -2, -2), b"\x80"),
        (Diff16(-16, -8, -8), b"\xc0\x00"),
        (Diff16(15, 7, 7), b"\xdf\xff"),
        (Diff24(10, 10, 10, 0), b"\xed\x6b\x50"),
        (Diff24(-16, -16, -16, -16), b"\xe0\x00\x00"),
        (Diff24(15, 15, 15, 15), b"\xef\xff\xff"),
        (Color(r=200), b"\xf8\xc8"),
        (Color(g=1, a=2), b"\xf5\x01\x02"),
        (Color(1, 2, 3, 4), b"\xff\x01\x02\x03\x04"),
    ],
)
def test_wire_format(op, encoded):
    assert op.to_bytes() == encoded
    assert read_opcode(ByteReader(io.BytesIO(encoded))) == op


def test_color_payload_size():
    assert Color.payload_size(0xF0) == 0
    assert Color.payload_size(0xF8) == 1
    assert Color.payload_size(0xFA) == 2
    assert Color.payload_size(0xFF) == 4


def test_run_opcode_picks_form():
    assert run_opcode(1) == Run8(1)
    assert run_opcode(32) == Run8(32)
    assert run_opcode(33) == Run16(33)
    assert run_opcode(8224) == Run16(8224)
    with pytest.raises(ValueError):
        run_opcode(8225)
    with pytest.raises(ValueError):
        run_opcode(0)


PREV = Pixel(100, 100, 100, 255)


def test_select_diff8():
    op = select_opcode(PREV, Pixel(101, 100, 100, 255))
    assert op == Diff8(1, 0, 0)
    assert len(op.to_bytes()) == 1

    assert select_opcode(PREV, Pixel(98, 101, 98, 255)) == Diff8(-2, 1, -2)


def test_select_diff16():
    assert select_opcode(PREV, Pixel(84, 100, 100, 255)) == Diff16(-16, 0, 0)
    assert select_opcode(PREV, Pixel(115, 107, 92, 255)) == Diff16(15, 7, -8)
    assert select_opcode(PREV, Pixel(102, 100, 100, 255)) == Diff16(2, 0, 0)


def test_select_diff24():
    op = select_opcode(PREV, Pixel(115, 108, 100, 255))
    assert op == Diff24(15, 8, 0, 0)
    assert len(op.to_bytes()) == 3


def test_r_delta_of_16_leaves_diff_range():
    # +16 is one past the widest 5 bit field
    op = select_opcode(PREV, Pixel(116, 100, 100, 255))
    assert op == Color(r=116)


def test_alpha_change_never_diff8():
    op = select_opcode(PREV, Pixel(101, 100, 100, 254))
    assert op == Diff24(1, 0, 0, -1)

    op = select_opcode(PREV, Pixel(101, 100, 100, 128))
    assert op == Color(r=101, a=128)


def test_color_fallback_flags_only_changed_channels():
    op = select_opcode(PREV, Pixel(200, 100, 100, 255))
    assert op == Color(r=200)
    assert op.to_bytes() == b"\xf8\xc8"


def test_deltas_are_not_wrapped():
    # 255 -> 0 is a delta of -255, not +1
    op = select_opcode(Pixel(255, 0, 0, 255), Pixel(0, 0, 0, 255))
    assert op == Color(r=0)


def test_apply_wraps():
    assert Diff8(1, -2, 0).apply(Pixel(255, 1, 7, 9)) == Pixel(0, 255, 7, 9)
    assert Diff16(-16, 7, -8).apply(Pixel(5, 250, 3, 9)) == Pixel(245, 1, 251, 9)
    assert Diff24(0, 0, 0, 15).apply(Pixel(0, 0, 0, 250)) == Pixel(0, 0, 0, 9)
    assert Color(g=77).apply(Pixel(1, 2, 3, 4)) == Pixel(1, 77, 3, 4)
