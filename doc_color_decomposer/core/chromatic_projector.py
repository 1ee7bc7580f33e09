"""
Chromatic Projector

Maps linear-light RGB onto the plane orthogonal to the neutral (gray) axis by
central projection from the white point, then expresses the result in a fixed
orthonormal (alpha, beta) basis of that plane. Lightness is discarded: every
color on a ray leaving white lands on the same point.

Usage:
    points = project(to_linear(unpack_rgb(keys)))
    hues = hue_angles(points)
"""

from __future__ import annotations

from typing import Union

import numpy as np

WHITE = np.array([1.0, 1.0, 1.0])
NEUTRAL_AXIS = WHITE / np.sqrt(3.0)

# Rows: alpha axis, beta axis of the chromatic plane
PLANE_BASIS = np.array(
    [
        [-1.0 / np.sqrt(2.0), 1.0 / np.sqrt(2.0), 0.0],
        [1.0 / np.sqrt(6.0), 1.0 / np.sqrt(6.0), -2.0 / np.sqrt(6.0)],
    ]
)

# Projected coordinates are snapped to this grid before taking angles
PROJECTION_SCALE = 255.0

N_HUE_BINS = 360


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """
    Pack 8-bit RGB triplets into 24-bit integer keys.

    Args:
        rgb: (..., 3) array, channel order R, G, B

    Returns:
        (...) uint32 array of (r << 16) | (g << 8) | b
    """
    rgb = np.asarray(rgb).astype(np.uint32)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


def unpack_rgb(keys: Union[int, np.ndarray]) -> np.ndarray:
    """Inverse of pack_rgb: (...) keys -> (..., 3) uint8 RGB."""
    keys = np.asarray(keys, dtype=np.uint32)
    return np.stack([(keys >> 16) & 0xFF, (keys >> 8) & 0xFF, keys & 0xFF], axis=-1).astype(np.uint8)


def project(rgb_linear: np.ndarray) -> np.ndarray:
    """
    Central projection of linear RGB points onto the chromatic plane.

    P = W - (n·W / n·(p - W)) (p - W), rotated into (alpha, beta).
    Points with n·(p - W) == 0 (only white inside the unit cube) map to the
    origin exactly.

    Args:
        rgb_linear: (3,) or (N, 3) linear-light RGB in [0, 1]

    Returns:
        (2,) or (N, 2) float64 (alpha, beta) coordinates
    """
    points = np.asarray(rgb_linear, dtype=np.float64)
    single = points.ndim == 1
    points = np.atleast_2d(points)

    offset = points - WHITE
    depth = offset @ NEUTRAL_AXIS
    is_white = depth == 0.0

    scale = np.zeros_like(depth)
    scale[~is_white] = (NEUTRAL_AXIS @ WHITE) / depth[~is_white]
    on_plane = WHITE - scale[:, np.newaxis] * offset

    proj = on_plane @ PLANE_BASIS.T
    proj[is_white] = 0.0

    return proj[0] if single else proj


def hue_angles(points: np.ndarray) -> np.ndarray:
    """
    Integer hue angle phi in [0, 360) of projected points.

    phi = round(atan2(beta, alpha) * 180 / pi + 360) mod 360, rounding half
    away from zero. Coordinates are first snapped to the 1/255 grid so that
    neutral colors (numerically ~0 projections) share the origin's angle 0.

    Args:
        points: (N, 2) or (2,) projected coordinates

    Returns:
        int64 array of hue angles
    """
    pts = np.rint(np.atleast_2d(np.asarray(points, dtype=np.float64)) * PROJECTION_SCALE)
    # atan2(-0.0, -0.0) is -pi
    pts = pts + 0.0
    degrees = np.degrees(np.arctan2(pts[:, 1], pts[:, 0])) + 360.0
    hues = np.floor(degrees + 0.5).astype(np.int64) % N_HUE_BINS
    return hues
