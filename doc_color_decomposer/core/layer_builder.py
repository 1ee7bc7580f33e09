"""
Layer / Mask Materializer

Turns the per-pixel cluster labels into one binary mask and one color layer
per cluster.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

logger = logging.getLogger(__name__)

MASK_ON = 255
BACKGROUND_BGR = (255, 255, 255)


def create_mask(pixel_clusters: np.ndarray, cluster_id: int) -> np.ndarray:
    """(H, W) uint8 mask, 255 where the pixel belongs to cluster_id."""
    return (np.asarray(pixel_clusters) == cluster_id).astype(np.uint8) * MASK_ON


def create_layer(source_bgr: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Source pixels where the mask is set, white elsewhere."""
    layer = np.full_like(source_bgr, BACKGROUND_BGR, dtype=np.uint8)
    selected = mask > 0
    layer[selected] = source_bgr[selected]
    return layer


def build_masks_and_layers(
    pixel_clusters: np.ndarray,
    source_bgr: np.ndarray,
    n_clusters: int,
) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Materialize masks and layers for clusters 0..n_clusters-1.

    Args:
        pixel_clusters: (H, W) cluster index of every pixel
        source_bgr: (H, W, 3) uint8 image whose colors fill the layers
        n_clusters: number of clusters, ordered by ascending peak hue

    Returns:
        (masks, layers): masks are disjoint and together cover every pixel
    """
    pixel_clusters = np.asarray(pixel_clusters)
    if pixel_clusters.shape != source_bgr.shape[:2]:
        raise ValueError(f"label map {pixel_clusters.shape} does not match image {source_bgr.shape[:2]}")
    if pixel_clusters.size and (pixel_clusters.min() < 0 or pixel_clusters.max() >= n_clusters):
        raise ValueError("pixel cluster labels out of range")

    masks = []
    layers = []
    for cluster_id in range(n_clusters):
        mask = create_mask(pixel_clusters, cluster_id)
        masks.append(mask)
        layers.append(create_layer(source_bgr, mask))
        logger.debug(f"Cluster {cluster_id}: {int(np.count_nonzero(mask))} pixels")

    return masks, layers
