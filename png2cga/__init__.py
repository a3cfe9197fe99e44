"""
PNG to CGA Converter
====================

Reduce any image to the eight colours of the 3-bit RGB cube (black, red,
green, blue, yellow, magenta, cyan, white) and write it as ``.cga`` text:
one digit ``1``-``8`` per pixel, every row terminated by ``;``.

- **Matching** happens in CIELAB space (nearest palette entry).
- **Dithering** is Floyd-Steinberg error diffusion in one raster pass.
"""

__version__ = "1.0.0"

from png2cga.color_utils import rgb_to_lab
from png2cga.config import ConvertConfig
from png2cga.dithering import (
    InvalidDimensionsError,
    QuantizeResult,
    dither_image,
    make_pixel_buffer,
    quantize,
)
from png2cga.image_io import (
    format_rows,
    load_rgb,
    parse_rows,
    read_cga,
    write_cga,
)
from png2cga.palette import CgaColor, Palette, nearest_index

__all__ = [
    "CgaColor",
    "ConvertConfig",
    "InvalidDimensionsError",
    "Palette",
    "QuantizeResult",
    "dither_image",
    "format_rows",
    "load_rgb",
    "make_pixel_buffer",
    "nearest_index",
    "parse_rows",
    "quantize",
    "read_cga",
    "rgb_to_lab",
    "write_cga",
]
