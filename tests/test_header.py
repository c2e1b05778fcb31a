import io

import pytest

from qoif import ChannelError, FormatError, StreamError, decode_header, read_header, write_header
from qoif.header import Header, pack_header


def header_bytes(width=2, height=1, channels=4, colorspace=0):
    return pack_header(width, height, channels, colorspace)


def test_layout():
    data = pack_header(0x01020304, 0x0A0B0C0D, 3, 7)
    assert data == b"qoif\x01\x02\x03\x04\x0a\x0b\x0c\x0d\x03\x07"


def test_write_read():
    out = io.BytesIO()
    write_header(out, 640, 480, 4, 1)
    out.seek(0)
    assert read_header(out) == Header(640, 480, 4, 1)


def test_decode_header():
    assert decode_header(io.BytesIO(header_bytes(17, 3))) == (17, 3)


def test_pixel_count():
    assert Header(17, 3, 4, 0).pixel_count == 51


@pytest.mark.parametrize(
    "data", [b"", b"q", b"qoi", b"QOIF" + b"\x00" * 10, b"\x89PNG\r\n\x1a\n" + b"\x00" * 8]
)
def test_bad_magic(data):
    with pytest.raises(FormatError):
        decode_header(io.BytesIO(data))


@pytest.mark.parametrize("channels", [0, 1, 2, 5, 255])
def test_bad_channels(channels):
    data = b"qoif" + b"\x00\x00\x00\x02\x00\x00\x00\x01" + bytes((channels, 0))
    with pytest.raises(ChannelError):
        decode_header(io.BytesIO(data))


def test_truncated_after_magic():
    with pytest.raises(StreamError):
        decode_header(io.BytesIO(b"qoif\x00\x00\x00"))


def test_colorspace_is_passthrough():
    assert read_header(io.BytesIO(header_bytes(colorspace=200))).colorspace == 200


def test_write_rejects_bad_channels():
    out = io.BytesIO()
    with pytest.raises(ChannelError):
        write_header(out, 1, 1, 2)
    assert out.getvalue() == b""


def test_write_rejects_bad_size():
    with pytest.raises(ValueError):
        pack_header(2**32, 1)
    with pytest.raises(ValueError):
        pack_header(1, -1)


def test_errors_are_value_errors():
    assert issubclass(FormatError, ValueError)
    assert issubclass(StreamError, IOError)
