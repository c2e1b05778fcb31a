from .decoder import Decoder, QOIDecoder, decode_header, decode_image, decode_pixels
from .encoder import Encoder, QOIEncoder, encode_image
from .errors import ChannelError, FormatError, QOIError, StreamError
from .header import Header, read_header, write_header
from .types import Pixel
from .utils import load_image

__all__ = [
    "ChannelError",
    "Decoder",
    "Encoder",
    "FormatError",
    "Header",
    "Pixel",
    "QOIDecoder",
    "QOIEncoder",
    "QOIError",
    "StreamError",
    "decode_header",
    "decode_image",
    "decode_pixels",
    "encode_image",
    "load_image",
    "read_header",
    "write_header",
]
