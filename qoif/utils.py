import numpy as np
from PIL import Image

from .decoder import decode_pixels
from .header import read_header
from .types import QOI_MAGIC

RAW_EXTENSIONS = ("dng", "cr2", "nef", "arw", "raw")


def is_qoif(filepath: str) -> bool:
    with open(filepath, "rb") as f:
        return f.read(len(QOI_MAGIC)) == QOI_MAGIC


def load_image(filepath: str) -> tuple[np.ndarray, dict]:
    """Load an image and return pixel data as numpy array + description."""

    if is_qoif(filepath):
        with open(filepath, "rb") as f:
            header = read_header(f)
            pixels = decode_pixels(header, f)
        return pixels, {
            "width": header.width,
            "height": header.height,
            "channels": 4,
            "colorspace": header.colorspace,
        }

    ext = filepath.lower().split(".")[-1]

    if ext in RAW_EXTENSIONS:
        # RAW formats - requires the optional rawpy dependency
        import rawpy

        with rawpy.imread(filepath) as raw:
            rgb = raw.postprocess()
        img = Image.fromarray(rgb)
    else:
        # Standard formats (PNG, JPEG, etc.)
        img = Image.open(filepath)

    # Keep alpha where the source has any, otherwise drop to RGB
    if img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info:
        img = img.convert("RGBA")
        channels = 4
    else:
        img = img.convert("RGB")
        channels = 3

    return np.array(img), {
        "width": img.size[0],
        "height": img.size[1],
        "channels": channels,
        "colorspace": 0,
    }
