#! Our codec is pure Python and Pillow's PNG encoder is C, so the timings are only a rough guide.
#! The size comparison is the interesting part.

import io
import sys
import time

import numpy as np
from PIL import Image

from qoif import decode_image, encode_image, load_image

INPUT_IMAGE = "fruits.png"
OUTPUT_QOI = "fruits.qoi"
OUTPUT_PNG = "fruits_reconverted.png"


def time_compare(pixel_data: np.ndarray):
    # Encode to qoif in pure Python (our implementation)
    start_time = time.time()
    with open(OUTPUT_QOI, "wb") as f:
        encode_image(f, pixel_data)
    end_time = time.time()
    with open(OUTPUT_QOI, "rb") as f:
        encoded = f.read()
    print(f"Saved QOI to {OUTPUT_QOI} in {end_time - start_time:.2f} seconds")
    print(f"Encoded QOI to {len(encoded)} bytes")

    start_time = time.time()
    decoded = decode_image(io.BytesIO(encoded))
    end_time = time.time()
    print(f"Decoded QOI in {end_time - start_time:.2f} seconds")
    assert np.array_equal(decoded[..., : pixel_data.shape[2]], pixel_data), (
        "Decoded image does not match original!"
    )

    # Encode to PNG in C using Pillow
    start_time = time.time()
    image = Image.fromarray(pixel_data)
    image.save(OUTPUT_PNG, format="PNG")
    end_time = time.time()
    with open(OUTPUT_PNG, "rb") as f:
        png_size = len(f.read())
    print(f"Saved PNG to {OUTPUT_PNG} in {end_time - start_time:.2f} seconds")
    print(f"Encoded PNG to {png_size} bytes")


if __name__ == "__main__":
    input_image = sys.argv[1] if len(sys.argv) > 1 else INPUT_IMAGE
    pixel_data, desc = load_image(input_image)
    print(
        f"Loaded image {input_image}: {desc['width']}x{desc['height']} Channels: {desc['channels']}"
    )
    print(f"Original {input_image} {pixel_data.nbytes} bytes")

    time_compare(pixel_data)
