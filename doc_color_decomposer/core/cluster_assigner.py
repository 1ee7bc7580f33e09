"""
Cluster Assigner

Every hue bin belongs to its circularly nearest surviving peak. On an exact
distance tie the peak with the lower hue, i.e. the lower cluster index, wins.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from doc_color_decomposer.core.chromatic_projector import N_HUE_BINS
from doc_color_decomposer.utils.color_space import to_linear, to_srgb

WHITE_RGB = np.array([255, 255, 255], dtype=np.uint8)


def circular_distance(a: np.ndarray, b: np.ndarray, period: int = N_HUE_BINS) -> np.ndarray:
    diff = np.abs(np.asarray(a, dtype=np.int64) - np.asarray(b, dtype=np.int64)) % period
    return np.minimum(diff, period - diff)


def assign_clusters(peaks: Sequence[int]) -> np.ndarray:
    """
    Map each of the 360 hue angles to the index of its nearest peak.

    Args:
        peaks: ascending peak hue angles (at least one)

    Returns:
        (360,) int64 cluster index per hue angle
    """
    peaks = np.asarray(peaks, dtype=np.int64)
    if peaks.size == 0:
        raise ValueError("at least one peak is required")

    hues = np.arange(N_HUE_BINS)
    distances = circular_distance(hues[:, np.newaxis], peaks[np.newaxis, :])
    # argmin keeps the first minimum -> lowest peak index wins ties
    return np.argmin(distances, axis=1).astype(np.int64)


def color_clusters(hues: np.ndarray, hue_to_cluster: np.ndarray) -> np.ndarray:
    """Cluster index of every distinct color from its hue angle."""
    return np.asarray(hue_to_cluster)[np.asarray(hues, dtype=np.int64)]


def cluster_mean_colors(rgb: np.ndarray, counts: np.ndarray, labels: np.ndarray, n_groups: int) -> np.ndarray:
    """
    Count-weighted mean color of every group, averaged in linear light.

    Args:
        rgb: (K, 3) uint8 sRGB distinct colors
        counts: (K,) pixel counts
        labels: (K,) group index of each color, in [0, n_groups)
        n_groups: number of groups

    Returns:
        (n_groups, 3) uint8 sRGB; empty groups are white
    """
    linear = to_linear(np.asarray(rgb, dtype=np.uint8))
    weights = np.asarray(counts, dtype=np.float64)
    labels = np.asarray(labels, dtype=np.int64)

    totals = np.bincount(labels, weights=weights, minlength=n_groups)
    sums = np.stack(
        [np.bincount(labels, weights=weights * linear[:, c], minlength=n_groups) for c in range(3)],
        axis=1,
    )

    means = np.ones((n_groups, 3), dtype=np.float64)
    occupied = totals > 0
    means[occupied] = sums[occupied] / totals[occupied, np.newaxis]

    out = to_srgb(means)
    out[~occupied] = WHITE_RGB
    return out


def hue_mean_colors(rgb: np.ndarray, counts: np.ndarray, hues: np.ndarray) -> np.ndarray:
    """Mean sRGB color of every hue bin, (360, 3) uint8."""
    return cluster_mean_colors(rgb, counts, hues, N_HUE_BINS)
