"""Colour-space conversion and distance computation."""

from __future__ import annotations

import numpy as np
from skimage.color import xyz2lab

# RGB -> XYZ (sRGB primaries, D65). Channels are taken as already linear:
# no sRGB gamma decoding is applied.
_RGB_TO_XYZ = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ],
    dtype=np.float64,
)


def rgb_to_xyz(rgb: np.ndarray) -> np.ndarray:
    """Convert (..., 3) RGB in [0, 255] to (..., 3) float64 XYZ."""
    arr = np.asarray(rgb, dtype=np.float64) / 255.0
    return arr @ _RGB_TO_XYZ.T


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert (..., 3) RGB in [0, 255] to (..., 3) float64 CIELAB.

    The XYZ -> Lab step uses the D65 / 2 degree white point
    (0.95047, 1.0, 1.08883) and the CIE piecewise cube root with the
    0.008856 threshold.
    """
    xyz = rgb_to_xyz(rgb)
    shape = xyz.shape
    return xyz2lab(xyz.reshape(1, -1, 3)).reshape(shape)


def squared_lab_distance(lab: np.ndarray, palette_lab: np.ndarray) -> np.ndarray:
    """Squared Euclidean distance from Lab colour(s) to each palette entry.

    Args:
        lab:         (..., 3) float64 - the colour(s) being matched.
        palette_lab: (K, 3) float64 - precomputed palette coordinates.

    Returns:
        (..., K) float64 - ``dL² + da² + db²`` per entry.
    """
    diff = np.asarray(lab)[..., np.newaxis, :] - palette_lab
    return np.sum(diff ** 2, axis=-1)
