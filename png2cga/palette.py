"""The fixed 8-colour palette and nearest-colour matching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache

import numpy as np

from png2cga.color_utils import rgb_to_lab, squared_lab_distance


class CgaColor(IntEnum):
    """The 3-bit RGB cube, in output order.

    The member value is the internal index (0-7); :attr:`code` is the
    digit written to ``.cga`` files (1-8).
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    BLUE = 3
    YELLOW = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7

    @property
    def rgb(self) -> tuple[int, int, int]:
        return _RGB[self.value]

    @property
    def code(self) -> int:
        return self.value + 1

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_code(cls, code: int) -> CgaColor:
        if not 1 <= code <= len(cls):
            msg = f"Colour code must be in 1..{len(cls)}, got {code}"
            raise ValueError(msg)
        return cls(code - 1)


_RGB: tuple[tuple[int, int, int], ...] = (
    (0, 0, 0),
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
)


@dataclass(frozen=True, eq=False)
class Palette:
    """RGB table plus its Lab conversion, computed once at construction.

    Attributes:
        rgb: (8, 3) int32 - palette colours, read-only.
        lab: (8, 3) float64 - ``rgb_to_lab(rgb)``, read-only.
    """

    rgb: np.ndarray
    lab: np.ndarray

    @classmethod
    def from_rgb(cls, colours: np.ndarray) -> Palette:
        """Build a palette from an (N, 3) RGB table.

        Internal helper behind :meth:`default`; any other table is only used
        by tests (e.g. duplicate entries to exercise tie-breaking).
        """
        rgb = np.array(colours, dtype=np.int32).reshape(-1, 3)
        lab = rgb_to_lab(rgb)
        rgb.flags.writeable = False
        lab.flags.writeable = False
        return cls(rgb=rgb, lab=lab)

    @classmethod
    def default(cls) -> Palette:
        """The shared CGA palette (built on first use)."""
        return _default_palette()

    def __len__(self) -> int:
        return len(self.rgb)


@lru_cache(maxsize=1)
def _default_palette() -> Palette:
    return Palette.from_rgb(np.array([c.rgb for c in CgaColor]))


def nearest_index(rgb: np.ndarray, palette: Palette) -> int:
    """Index of the palette entry closest to *rgb* in Lab space.

    Distances are squared Euclidean; on a tie the lowest index wins.
    """
    dist = squared_lab_distance(rgb_to_lab(rgb), palette.lab)
    return int(np.argmin(dist))

