"""
Hue Histogrammer

Accumulates pixel counts of distinct colors into a circular 360-bin histogram
of hue angle and smooths it with a wraparound Gaussian.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import cv2
import numpy as np
from scipy.ndimage import convolve1d

from doc_color_decomposer.core.chromatic_projector import N_HUE_BINS

logger = logging.getLogger(__name__)


@dataclass
class HueHistogram:
    raw: np.ndarray  # (360,) float64 pixel counts per hue
    smoothed: np.ndarray  # (360,) float64 circular Gaussian blur of raw
    working: np.ndarray  # (360,) int64 rounded smoothed counts, fed to the peak detector
    kernel_size: int


def build_histogram(hues: np.ndarray, counts: np.ndarray) -> np.ndarray:
    """
    Sum color counts per hue angle.

    Args:
        hues: (K,) int hue angle of each distinct color, in [0, 360)
        counts: (K,) pixel count of each distinct color

    Returns:
        (360,) float64 histogram
    """
    hues = np.asarray(hues, dtype=np.int64)
    if hues.size and (hues.min() < 0 or hues.max() >= N_HUE_BINS):
        raise ValueError("hue angles must lie in [0, 360)")
    return np.bincount(hues, weights=np.asarray(counts, dtype=np.float64), minlength=N_HUE_BINS)


def smooth_histogram(hist: np.ndarray, kernel_size: int) -> np.ndarray:
    """
    Circular Gaussian blur with OpenCV's sigma rule for the given width.

    The kernel is centered, so peaks are not shifted, and bin 359 is treated
    as the neighbour of bin 0.
    """
    if kernel_size <= 0 or kernel_size % 2 == 0:
        raise ValueError(f"kernel_size must be odd and positive, got {kernel_size}")
    if kernel_size == 1:
        return np.asarray(hist, dtype=np.float64).copy()

    kernel = cv2.getGaussianKernel(kernel_size, 0).ravel()
    return convolve1d(np.asarray(hist, dtype=np.float64), kernel, mode="wrap")


def working_histogram(smoothed: np.ndarray) -> np.ndarray:
    """Smoothed counts rounded to integers for extremum detection."""
    return np.rint(smoothed).astype(np.int64)


def compute_hue_histogram(hues: np.ndarray, counts: np.ndarray, kernel_size: int) -> HueHistogram:
    raw = build_histogram(hues, counts)
    smoothed = smooth_histogram(raw, kernel_size)
    working = working_histogram(smoothed)
    logger.debug(f"Hue histogram: {int(np.count_nonzero(raw))} occupied bins, kernel={kernel_size}")
    return HueHistogram(raw=raw, smoothed=smoothed, working=working, kernel_size=kernel_size)
