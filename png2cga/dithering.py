"""Floyd-Steinberg error-diffusion dithering onto the CGA palette.

A single raster pass visits every pixel top-to-bottom, left-to-right.  Each
pixel is replaced by its nearest palette colour and the quantisation error
is pushed into the four neighbours the scan has not reached yet, so the
colour read for every pixel already carries the error of all earlier ones.
The visiting order is therefore part of the result: the scan is sequential
and is not vectorised across pixels.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from png2cga.palette import CgaColor, Palette, nearest_index

logger = logging.getLogger(__name__)

# (dx, dy, weight) - right, below-left, below, below-right
FLOYD_STEINBERG: tuple[tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


class InvalidDimensionsError(ValueError):
    """Width or height is non-positive, or does not match the pixel data."""


@dataclass(frozen=True, eq=False)
class QuantizeResult:
    """Output of one dithering scan.

    Attributes:
        indices:   (H, W) uint8 - internal palette index (0-7) per pixel.
        histogram: (8,) int64 - pixels assigned to each palette index.
    """

    indices: np.ndarray
    histogram: np.ndarray

    @property
    def codes(self) -> np.ndarray:
        """Indices as written to ``.cga`` files (1-8)."""
        return self.indices.astype(np.uint8) + 1

    def counts(self) -> dict[CgaColor, int]:
        return {colour: int(self.histogram[colour]) for colour in CgaColor}


def make_pixel_buffer(
    flat: Sequence[Sequence[int]] | np.ndarray,
    width: int,
    height: int,
) -> np.ndarray:
    """Build a mutable (H, W, 3) buffer from row-major RGB triples.

    Raises:
        InvalidDimensionsError: if *width* or *height* is not positive, or
            *flat* does not hold exactly ``width * height`` triples.
    """
    if width <= 0 or height <= 0:
        msg = f"Image dimensions must be positive, got {width}x{height}"
        raise InvalidDimensionsError(msg)

    arr = np.asarray(flat, dtype=np.int32).reshape(-1, 3)
    if len(arr) != width * height:
        msg = (
            f"Expected {width * height} pixels for {width}x{height}, "
            f"got {len(arr)}"
        )
        raise InvalidDimensionsError(msg)
    return np.clip(arr, 0, 255).reshape(height, width, 3)


def diffuse_error(
    buffer: np.ndarray,
    x: int,
    y: int,
    error: np.ndarray,
) -> int:
    """Spread *error* from (x, y) into the unvisited neighbours.

    Each written channel becomes ``value + error * weight`` truncated toward
    zero and clamped to [0, 255].  Neighbours outside the buffer are skipped
    and their share of the error is dropped.

    Returns:
        Number of neighbour pixels written.
    """
    h, w = buffer.shape[:2]
    written = 0
    for dx, dy, weight in FLOYD_STEINBERG:
        nx, ny = x + dx, y + dy
        if nx < 0 or nx >= w or ny >= h:
            continue
        adjusted = np.trunc(buffer[ny, nx] + error * weight)
        buffer[ny, nx] = np.clip(adjusted, 0, 255)
        written += 1
    return written


def quantize(buffer: np.ndarray, palette: Palette | None = None) -> QuantizeResult:
    """Dither *buffer* in place onto *palette*.

    On return every pixel of *buffer* holds a palette colour.

    Args:
        buffer:  (H, W, 3) integer - mutable pixel buffer.
        palette: Defaults to :meth:`Palette.default`.

    Returns:
        :class:`QuantizeResult` with the index buffer and histogram.  A
        zero-sized buffer yields an empty index buffer and a zero histogram.
    """
    if buffer.ndim != 3 or buffer.shape[2] != 3:
        msg = f"Expected an (H, W, 3) buffer, got shape {buffer.shape}"
        raise ValueError(msg)
    if not np.issubdtype(buffer.dtype, np.integer):
        msg = f"Pixel buffer must hold integers, got {buffer.dtype}"
        raise ValueError(msg)
    if palette is None:
        palette = Palette.default()

    h, w = buffer.shape[:2]
    indices = np.zeros((h, w), dtype=np.uint8)
    histogram = np.zeros(len(palette), dtype=np.int64)

    logger.info("Dithering %dx%d = %d pixels ...", w, h, w * h)
    t0 = time.perf_counter()
    for y in range(h):
        for x in range(w):
            old = buffer[y, x].astype(np.int64)
            idx = nearest_index(old, palette)
            new = palette.rgb[idx]
            buffer[y, x] = new
            indices[y, x] = idx
            histogram[idx] += 1
            diffuse_error(buffer, x, y, old - new)
    logger.info("Scan finished  (%.1f s)", time.perf_counter() - t0)

    return QuantizeResult(indices=indices, histogram=histogram)


def dither_image(
    image: np.ndarray,
    palette: Palette | None = None,
) -> tuple[QuantizeResult, np.ndarray]:
    """Dither a copy of an (H, W, 3) uint8 image.

    Returns:
        The :class:`QuantizeResult` and the dithered (H, W, 3) uint8 image.
        *image* itself is left untouched.
    """
    h, w = image.shape[:2]
    buffer = make_pixel_buffer(image.reshape(-1, 3), w, h)
    result = quantize(buffer, palette)
    return result, buffer.astype(np.uint8)
