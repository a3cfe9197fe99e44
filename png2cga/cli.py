"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from png2cga.config import ConvertConfig
from png2cga.dithering import InvalidDimensionsError, QuantizeResult, dither_image
from png2cga.image_io import (
    load_rgb,
    make_comparison_grid,
    read_cga,
    render_indices,
    save_upscaled,
    write_cga,
)
from png2cga.palette import CgaColor, Palette

app = typer.Typer(
    name="png2cga",
    help="Convert images to the 8-colour CGA text format.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger("png2cga")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _report(histogram: np.ndarray, title: str = "Conversion Complete") -> Table:
    table = Table(title=f"=== {title} ===", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Colour")
    table.add_column("Pixels", justify="right")
    for colour in CgaColor:
        table.add_row(str(colour.code), colour.label, f"{histogram[colour]} pixels")
    return table


def _convert_file(
    source: Path,
    output: Path,
    cfg: ConvertConfig,
    palette: Palette,
    preview: Path | None = None,
    comparison: Path | None = None,
) -> QuantizeResult:
    image = load_rgb(source)
    h, w = image.shape[:2]
    logger.info("Loaded %s: %dx%d", source.name, w, h)

    result, dithered = dither_image(image, palette)
    write_cga(result.indices, output, cfg.row_terminator)
    logger.debug("Wrote %s", output)

    if preview is not None:
        save_upscaled(dithered, preview, cfg.pixel_upscale, cfg.max_preview_side)
        logger.debug("Preview saved to %s", preview)
    if comparison is not None:
        make_comparison_grid(
            image, dithered, comparison, cfg.pixel_upscale, cfg.max_preview_side,
        )
        logger.debug("Comparison saved to %s", comparison)
    return result


# Defaults come from ConvertConfig - single source of truth
_DEFAULTS = ConvertConfig()


# -- convert command ---------------------------------------------------

@app.command()
def convert(
    source: Path = typer.Argument(..., help="Image to convert"),
    output: Path = typer.Argument(..., help="Destination .cga file"),
    preview: Path | None = typer.Option(
        None, "--preview", help="Also save an upscaled 8-colour preview image",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Preview upscale factor",
    ),
    max_preview: int = typer.Option(
        _DEFAULTS.max_preview_side, "--max-preview",
        help="Longest side of preview images in pixels",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Convert a single image to a .cga file."""
    _setup_logging(verbose)
    cfg = ConvertConfig(pixel_upscale=upscale, max_preview_side=max_preview)

    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        result = _convert_file(source, output, cfg, Palette.default(), preview=preview)
    except (OSError, InvalidDimensionsError) as exc:
        logger.error("Failed to convert %s: %s", source, exc)
        raise typer.Exit(1) from exc

    console.print(_report(result.histogram))


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    save_preview: bool = typer.Option(
        _DEFAULTS.save_preview, "--preview/--no-preview",
        help="Save upscaled 8-colour previews",
    ),
    save_comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save Original | CGA comparison panels",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Preview upscale factor",
    ),
    max_preview: int = typer.Option(
        _DEFAULTS.max_preview_side, "--max-preview",
        help="Longest side of preview images in pixels",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Convert every image in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)

    cfg = ConvertConfig(
        pixel_upscale=upscale,
        max_preview_side=max_preview,
        save_preview=save_preview,
        save_comparison=save_comparison,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .png / .jpg / ... files there and re-run.\n")
        raise typer.Exit(0)

    output_dir.mkdir(parents=True, exist_ok=True)

    console.print(Panel.fit(
        f"[bold]PNG2CGA[/bold]\n"
        f"Images: {len(images)}  |  Preview: {cfg.save_preview}  |  "
        f"Comparison: {cfg.save_comparison}",
        border_style="cyan",
    ))

    palette = Palette.default()
    totals = np.zeros(len(palette), dtype=np.int64)
    failed = 0

    for idx, img_path in enumerate(images, 1):
        stem = img_path.stem
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t0 = time.perf_counter()

        out_path = output_dir / f"{stem}{cfg.output_suffix}"
        preview = (
            output_dir / f"{stem}_preview.{cfg.preview_format}"
            if cfg.save_preview else None
        )
        comparison = (
            output_dir / f"{stem}_comparison.{cfg.preview_format}"
            if cfg.save_comparison else None
        )

        try:
            result = _convert_file(
                img_path, out_path, cfg, palette,
                preview=preview, comparison=comparison,
            )
        except (OSError, InvalidDimensionsError) as exc:
            logger.error("Skipping %s: %s", img_path.name, exc)
            failed += 1
            continue

        totals += result.histogram
        h, w = result.indices.shape
        console.print(
            f"  [green]✓[/green] {out_path.name}  "
            f"[dim]{w}x{h} = {w * h} px  time={time.perf_counter() - t0:.1f}s[/dim]"
        )

    console.print(_report(totals, title="Batch Complete"))
    if failed:
        console.print(f"[red]{failed} image(s) failed[/red]")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


# -- preview command ---------------------------------------------------

@app.command()
def preview(
    source: Path = typer.Argument(..., help="A .cga file"),
    output: Path = typer.Argument(..., help="Destination image"),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Pixel upscale factor",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Render a .cga file back to an image."""
    _setup_logging(verbose)

    try:
        indices = read_cga(source, _DEFAULTS.row_terminator)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read %s: %s", source, exc)
        raise typer.Exit(1) from exc

    if indices.size == 0:
        logger.error("%s contains no pixels", source)
        raise typer.Exit(1)

    save_upscaled(
        render_indices(indices), output, upscale, _DEFAULTS.max_preview_side,
    )
    h, w = indices.shape
    counts = np.bincount(indices.ravel(), minlength=len(CgaColor))
    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]{w}x{h} = {w * h} px, {np.count_nonzero(counts)} colours used[/dim]"
    )


if __name__ == "__main__":
    app()
