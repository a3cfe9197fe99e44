"""Image loading, ``.cga`` text rows, previews and comparison panels."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from png2cga.palette import CgaColor, Palette


def load_rgb(path: str | Path) -> np.ndarray:
    """Load an image as (H, W, 3) uint8 RGB.

    No resizing is applied; an alpha channel, if any, is discarded.
    """
    with Image.open(path) as img:
        return np.array(img.convert("RGB"), dtype=np.uint8)


# -- .cga text rows ----------------------------------------------------

def format_rows(indices: np.ndarray, terminator: str = ";") -> list[str]:
    """Render an (H, W) index buffer as text rows.

    Each pixel becomes the digit ``index + 1``; each row ends with
    *terminator* (no newline).
    """
    return [
        "".join(chr(ord("0") + int(i) + 1) for i in row) + terminator
        for row in indices
    ]


def parse_rows(lines: Iterable[str], terminator: str = ";") -> np.ndarray:
    """Inverse of :func:`format_rows`.

    Blank lines are ignored.

    Returns:
        (H, W) uint8 array of internal indices (0-7).

    Raises:
        ValueError: on a missing terminator, a digit outside 1-8, or rows
            of unequal length.
    """
    rows: list[list[int]] = []
    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        if not line.endswith(terminator):
            msg = f"Line {lineno}: missing row terminator {terminator!r}"
            raise ValueError(msg)
        body = line[: len(line) - len(terminator)]
        try:
            row = [CgaColor.from_code(int(ch)).value for ch in body]
        except ValueError as exc:
            msg = f"Line {lineno}: invalid colour code in {body!r}"
            raise ValueError(msg) from exc
        if rows and len(row) != len(rows[0]):
            msg = (
                f"Line {lineno}: expected {len(rows[0])} pixels, "
                f"got {len(row)}"
            )
            raise ValueError(msg)
        rows.append(row)

    if not rows:
        return np.zeros((0, 0), dtype=np.uint8)
    return np.array(rows, dtype=np.uint8)


def write_cga(
    indices: np.ndarray,
    path: str | Path,
    terminator: str = ";",
) -> None:
    """Write an index buffer as a ``.cga`` text file."""
    with open(path, "w", encoding="ascii", newline="\n") as fh:
        for row in format_rows(indices, terminator):
            fh.write(row + "\n")


def read_cga(path: str | Path, terminator: str = ";") -> np.ndarray:
    """Read a ``.cga`` text file back into (H, W) internal indices."""
    with open(path, encoding="ascii") as fh:
        return parse_rows(fh, terminator)


# -- Previews ----------------------------------------------------------

MAX_PREVIEW_SIDE = 2048


def preview_size(
    width: int,
    height: int,
    pixel_upscale: int,
    max_side: int = MAX_PREVIEW_SIDE,
) -> tuple[int, int]:
    """Compute the (w, h) of a preview image.

    Pixels are repeated *pixel_upscale* times, lowered to the largest whole
    factor that keeps the longest side within *max_side*.  Images already
    longer than *max_side* are shrunk proportionally (minimum 1).
    """
    longest = max(width, height)
    if longest * pixel_upscale <= max_side:
        return width * pixel_upscale, height * pixel_upscale
    if longest <= max_side:
        scale = max_side // longest
        return width * scale, height * scale
    return (
        max(1, round(width * max_side / longest)),
        max(1, round(height * max_side / longest)),
    )


def render_indices(indices: np.ndarray, palette: Palette | None = None) -> np.ndarray:
    """Map (H, W) palette indices to an (H, W, 3) uint8 image."""
    if palette is None:
        palette = Palette.default()
    return palette.rgb[indices].astype(np.uint8)


def save_upscaled(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 8,
    max_side: int = MAX_PREVIEW_SIDE,
) -> None:
    """Save an array as a nearest-neighbour-upscaled image.

    The longest side is capped at *max_side* (see :func:`preview_size`).
    """
    img = Image.fromarray(array.astype(np.uint8))
    h, w = array.shape[:2]
    img = img.resize(preview_size(w, h, pixel_upscale, max_side), Image.NEAREST)
    img.save(path)


def make_comparison_grid(
    original: np.ndarray,
    dithered: np.ndarray,
    output_path: str | Path,
    pixel_upscale: int = 8,
    max_side: int = MAX_PREVIEW_SIDE,
) -> None:
    """Create a 2-panel comparison: Original | CGA.

    Each panel is sized by :func:`preview_size`.
    """
    h, w = original.shape[:2]
    panel_w, panel_h = preview_size(w, h, pixel_upscale, max_side)
    label_height = 36

    panels = [
        Image.fromarray(original).resize((panel_w, panel_h), Image.NEAREST),
        Image.fromarray(dithered).resize((panel_w, panel_h), Image.NEAREST),
    ]
    labels = ["Original", f"CGA {w}x{h}"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
