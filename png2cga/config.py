"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ConvertConfig:
    """All tuneable parameters for a conversion run.

    Attributes:
        row_terminator:  Text appended to every row of a ``.cga`` file.
        output_suffix:   File extension of the indexed text output.
        pixel_upscale:   Each pixel becomes n x n in preview images.
        max_preview_side: Longest side of any preview image (upscale is lowered
                         to fit; the .cga output is never resized).
        preview_format:  Image format for preview files.
        save_preview:    Write an upscaled rendering of the 8-colour result.
        save_comparison: Write an Original | CGA side-by-side panel.
        input_dir:       Folder to scan for source images.
        output_dir:      Folder for results.
    """

    # Text output
    row_terminator: str = ";"
    output_suffix: str = ".cga"

    # Preview
    pixel_upscale: int = 8
    max_preview_side: int = 2048
    preview_format: str = "png"
    save_preview: bool = True
    save_comparison: bool = False

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".gif"}
    )
