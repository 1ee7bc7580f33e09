"""
Extremum / Peak Detector for circular histograms

Extrema are found from forward differences with explicit modulo arithmetic,
so a peak or valley straddling bin 359/0 is handled like any other. Flat runs
collapse to their midpoint. The extremum list is rotated to start on a valley,
after which valleys and peaks alternate and every odd position is a candidate
peak whose prominence against both neighbouring valleys is tested against the
tolerance.

Usage:
    extrema = find_extrema(hist)
    peaks = find_peaks(hist, tolerance=35)
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

logger = logging.getLogger(__name__)


def find_extrema(hist: np.ndarray) -> List[int]:
    """
    Locate local minima and maxima of a circular histogram.

    Args:
        hist: (N,) histogram, index N-1 adjacent to index 0

    Returns:
        Ascending extremum indices rotated so that the first one is a valley.
        Empty for a constant histogram.
    """
    # python scalars: no unsigned wraparound or overflow in the deltas
    values = np.asarray(hist).tolist()
    n = len(values)
    if n == 0:
        return []

    extrema: List[int] = []
    prev_delta = values[0] - values[n - 1]
    for i in range(n):
        curr_delta = values[(i + 1) % n] - values[i]

        if prev_delta != 0 and curr_delta == 0:
            # flat run starting at i; j is the first index past it
            j = i + 1
            while values[j % n] == values[i]:
                j += 1
            next_delta = values[j % n] - values[i]
            if prev_delta * next_delta < 0:
                extrema.append(((i + j) // 2) % n)
        elif prev_delta * curr_delta < 0:
            extrema.append(i)

        prev_delta = curr_delta

    extrema.sort()

    if len(extrema) >= 2 and values[extrema[0]] > values[extrema[1]]:
        extrema = extrema[1:] + extrema[:1]

    return extrema


def find_peaks(hist: np.ndarray, tolerance: float) -> List[int]:
    """
    Peaks whose height above both neighbouring valleys is at least tolerance.

    When the histogram has fewer than two extrema, or no candidate survives,
    the single global maximum (lowest index on ties) is returned so that the
    caller always gets at least one cluster.

    Args:
        hist: (N,) circular histogram
        tolerance: minimum prominence

    Returns:
        Ascending peak indices, never empty for a non-empty histogram
    """
    extrema = find_extrema(hist)
    values = np.asarray(hist).tolist()

    if len(extrema) < 2:
        logger.warning(f"Degenerate histogram ({len(extrema)} extrema); using a single cluster")
        return [int(np.argmax(values))]

    peaks = []
    for k in range(1, len(extrema), 2):
        peak = extrema[k]
        left_height = values[peak] - values[extrema[k - 1]]
        right_height = values[peak] - values[extrema[(k + 1) % len(extrema)]]
        if min(left_height, right_height) >= tolerance:
            peaks.append(int(peak))

    if not peaks:
        logger.warning(f"No peak reaches tolerance {tolerance}; using a single cluster")
        return [int(np.argmax(values))]

    peaks.sort()
    logger.debug(f"Peaks {peaks} out of {len(extrema)} extrema (tolerance={tolerance})")
    return peaks
