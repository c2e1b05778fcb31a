import argparse
import sys

from PIL import Image

from qoif import decode_image, encode_image, load_image
from qoif.utils import is_qoif


def png_to_qoi(png_path, qoi_path):
    pixel_data, desc = load_image(png_path)

    with open(qoi_path, "wb") as f:
        encode_image(f, pixel_data, desc["colorspace"])
    print(f"Converted {png_path} to {qoi_path}")


def qoi_to_png(qoi_path, png_path):
    with open(qoi_path, "rb") as f:
        decoded = decode_image(f)

    img = Image.fromarray(decoded)
    img.save(png_path, format="PNG")
    print(f"Converted {qoi_path} to {png_path}")


def convert(infile, outfile):
    """Convert between PNG (or anything Pillow reads) and qoif, by output extension."""
    if outfile.lower().endswith(".png"):
        if is_qoif(infile):
            qoi_to_png(infile, outfile)
        else:
            pixel_data, _ = load_image(infile)
            Image.fromarray(pixel_data).save(outfile, format="PNG")
            print(f"Converted {infile} to {outfile}")
    elif outfile.lower().endswith(".qoi"):
        png_to_qoi(infile, outfile)
    else:
        raise ValueError("Only png or qoi files are supported.")


def main(argv=None):
    arg_parser = argparse.ArgumentParser(
        prog="qoiconv",
        description="Convert images to and from the qoif format.",
        epilog="The input may be a qoif file or any image Pillow can read; "
        "the output type is chosen by extension (.png or .qoi).",
    )
    arg_parser.add_argument("infile", help="File to read")
    arg_parser.add_argument("outfile", help="File to write, will be overwritten")
    args = arg_parser.parse_args(argv)

    try:
        convert(args.infile, args.outfile)
    except (OSError, ValueError) as e:
        print(f"Error converting {args.infile}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
