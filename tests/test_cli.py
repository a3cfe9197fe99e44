"""End-to-end tests for the Typer command-line interface."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from png2cga.cli import app

runner = CliRunner()


def _write_png(path: Path, array: np.ndarray) -> Path:
    Image.fromarray(array.astype(np.uint8)).save(path)
    return path


@pytest.fixture
def red_green(tmp_path: Path) -> Path:
    return _write_png(
        tmp_path / "rg.png", np.array([[[255, 0, 0], [0, 255, 0]]]),
    )


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    rng = np.random.default_rng(3)
    return _write_png(
        tmp_path / "photo.png", rng.integers(0, 256, (5, 7, 3), dtype=np.uint8),
    )


class TestConvert:
    def test_red_green(self, tmp_path: Path, red_green: Path) -> None:
        out = tmp_path / "rg.cga"
        result = runner.invoke(app, ["convert", str(red_green), str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text() == "23;\n"
        assert "Conversion Complete" in result.output

    def test_rows_and_preview(self, tmp_path: Path, photo: Path) -> None:
        out = tmp_path / "sub" / "photo.cga"
        prev = tmp_path / "photo_preview.png"
        result = runner.invoke(
            app,
            ["convert", str(photo), str(out), "--preview", str(prev), "-u", "2"],
        )
        assert result.exit_code == 0, result.output
        lines = out.read_text().splitlines()
        assert len(lines) == 5
        for line in lines:
            assert len(line) == 8
            assert line.endswith(";")
            assert set(line[:-1]) <= set("12345678")
        assert Image.open(prev).size == (14, 10)

    def test_preview_capped(self, tmp_path: Path, photo: Path) -> None:
        prev = tmp_path / "capped.png"
        result = runner.invoke(
            app,
            [
                "convert", str(photo), str(tmp_path / "p.cga"),
                "--preview", str(prev), "-u", "8", "--max-preview", "20",
            ],
        )
        assert result.exit_code == 0, result.output
        assert Image.open(prev).size == (14, 10)
        assert len((tmp_path / "p.cga").read_text().splitlines()) == 5

    def test_missing_input(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["convert", str(tmp_path / "nope.png"), str(tmp_path / "x.cga")],
        )
        assert result.exit_code == 1
        assert not (tmp_path / "x.cga").exists()

    def test_not_an_image(self, tmp_path: Path) -> None:
        bogus = tmp_path / "bogus.png"
        bogus.write_text("not a png")
        result = runner.invoke(app, ["convert", str(bogus), str(tmp_path / "x.cga")])
        assert result.exit_code == 1


class TestBatch:
    def test_converts_folder(self, tmp_path: Path) -> None:
        src = tmp_path / "in"
        src.mkdir()
        _write_png(src / "a.png", np.zeros((4, 4, 3)))
        _write_png(src / "b.png", np.full((2, 3, 3), 255))
        (src / "notes.txt").write_text("ignored")
        dst = tmp_path / "out"

        result = runner.invoke(
            app,
            ["batch", "-i", str(src), "-o", str(dst), "--comparison", "-u", "1"],
        )
        assert result.exit_code == 0, result.output
        assert (dst / "a.cga").read_text() == "1111;\n" * 4
        assert (dst / "b.cga").read_text() == "888;\n" * 2
        assert (dst / "a_preview.png").exists()
        assert (dst / "b_comparison.png").exists()
        assert not (dst / "notes.cga").exists()

    def test_no_preview(self, tmp_path: Path) -> None:
        src = tmp_path / "in"
        src.mkdir()
        _write_png(src / "a.png", np.zeros((2, 2, 3)))
        dst = tmp_path / "out"
        result = runner.invoke(
            app, ["batch", "-i", str(src), "-o", str(dst), "--no-preview"],
        )
        assert result.exit_code == 0, result.output
        assert (dst / "a.cga").exists()
        assert not (dst / "a_preview.png").exists()

    def test_empty_folder(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["batch", "-i", str(tmp_path / "empty"), "-o", str(tmp_path / "o")],
        )
        assert result.exit_code == 0
        assert "No images found" in result.output

    def test_bad_file_fails_run(self, tmp_path: Path) -> None:
        src = tmp_path / "in"
        src.mkdir()
        _write_png(src / "good.png", np.zeros((2, 2, 3)))
        (src / "bad.png").write_text("garbage")
        dst = tmp_path / "out"
        result = runner.invoke(app, ["batch", "-i", str(src), "-o", str(dst)])
        assert result.exit_code == 1
        assert (dst / "good.cga").exists()


class TestPreview:
    def test_renders(self, tmp_path: Path) -> None:
        cga = tmp_path / "x.cga"
        cga.write_text("18;\n23;\n45;\n")
        out = tmp_path / "x.png"
        result = runner.invoke(app, ["preview", str(cga), str(out), "-u", "3"])
        assert result.exit_code == 0, result.output
        img = np.array(Image.open(out).convert("RGB"))
        assert img.shape == (9, 6, 3)
        assert tuple(img[0, 3]) == (255, 255, 255)
        assert tuple(img[3, 0]) == (255, 0, 0)

    def test_malformed(self, tmp_path: Path) -> None:
        cga = tmp_path / "x.cga"
        cga.write_text("19;\n")
        result = runner.invoke(app, ["preview", str(cga), str(tmp_path / "x.png")])
        assert result.exit_code == 1

    def test_empty(self, tmp_path: Path) -> None:
        cga = tmp_path / "x.cga"
        cga.write_text("")
        result = runner.invoke(app, ["preview", str(cga), str(tmp_path / "x.png")])
        assert result.exit_code == 1
