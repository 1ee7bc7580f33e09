"""
Color Frequency Table

Distinct colors of an image weighted by their pixel count. Colors are keyed by
a packed 24-bit RGB integer; the table also keeps, for every pixel, the index
of its color in the key array so later stages can map per-color results back
onto the image without hashing again.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from doc_color_decomposer.core.chromatic_projector import pack_rgb, unpack_rgb
from doc_color_decomposer.utils.image_utils import validate_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorFrequencyTable:
    """Immutable Color -> count map of one image."""

    keys: np.ndarray  # (K,) uint32 packed RGB, ascending
    counts: np.ndarray  # (K,) int64, all > 0
    pixel_index: np.ndarray  # (H, W) index into keys

    def __post_init__(self):
        for arr in (self.keys, self.counts, self.pixel_index):
            arr.setflags(write=False)

    def __len__(self) -> int:
        return int(self.keys.size)

    @property
    def shape(self) -> Tuple[int, int]:
        return tuple(self.pixel_index.shape)

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    def rgb(self) -> np.ndarray:
        """(K, 3) uint8 RGB of the distinct colors."""
        return unpack_rgb(self.keys)

    def count_of(self, rgb: Tuple[int, int, int]) -> int:
        key = int(pack_rgb(np.array(rgb)))
        pos = int(np.searchsorted(self.keys, key))
        if pos < self.keys.size and int(self.keys[pos]) == key:
            return int(self.counts[pos])
        return 0

    def as_dict(self) -> dict:
        return {int(k): int(n) for k, n in zip(self.keys, self.counts)}


def build_color_table(image_bgr: np.ndarray, workers: int = 1) -> ColorFrequencyTable:
    """
    Build the frequency table of a BGR uint8 image.

    Args:
        image_bgr: (H, W, 3) BGR uint8 image
        workers: number of row bands counted concurrently (1 = serial)

    Returns:
        ColorFrequencyTable
    """
    validate_image(image_bgr)
    # BGR -> RGB channel order before packing
    packed = pack_rgb(image_bgr[..., ::-1])

    if workers > 1 and packed.shape[0] > 1:
        keys, counts = _count_parallel(packed, workers)
    else:
        keys, counts = np.unique(packed, return_counts=True)

    pixel_index = np.searchsorted(keys, packed)
    logger.debug(f"Color table: {keys.size} distinct colors over {packed.size} pixels")

    return ColorFrequencyTable(
        keys=keys.astype(np.uint32),
        counts=counts.astype(np.int64),
        pixel_index=pixel_index.astype(np.int64),
    )


def merge_counts(partials: List[Tuple[np.ndarray, np.ndarray]]) -> Tuple[np.ndarray, np.ndarray]:
    """Merge per-band (keys, counts) pairs by summing the counts of equal keys."""
    all_keys = np.concatenate([k for k, _ in partials])
    all_counts = np.concatenate([c for _, c in partials]).astype(np.int64)
    keys, inverse = np.unique(all_keys, return_inverse=True)
    counts = np.zeros(keys.size, dtype=np.int64)
    np.add.at(counts, inverse.ravel(), all_counts)
    return keys, counts


def _count_parallel(packed: np.ndarray, workers: int) -> Tuple[np.ndarray, np.ndarray]:
    bands = np.array_split(packed, min(workers, packed.shape[0]), axis=0)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        partials = list(executor.map(lambda band: np.unique(band, return_counts=True), bands))

    logger.debug(f"Merging color counts of {len(partials)} row bands")
    return merge_counts(partials)
