"""
Core Algorithm Modules

Contains the algorithmic components of the document color decomposition:
- ColorTable: distinct colors weighted by pixel count
- ChromaticProjector: central projection onto the chromatic plane, hue angles
- HueHistogram: circular hue histogram and wraparound smoothing
- PeakDetector: extrema and tolerance-filtered peaks
- ClusterAssigner: nearest-peak assignment of hue angles
- LayerBuilder: per-cluster masks and layers
- QualityEvaluator: Panoptic Quality against ground-truth masks
"""

from doc_color_decomposer.core.chromatic_projector import hue_angles, project
from doc_color_decomposer.core.cluster_assigner import assign_clusters
from doc_color_decomposer.core.color_table import ColorFrequencyTable, build_color_table
from doc_color_decomposer.core.hue_histogram import HueHistogram
from doc_color_decomposer.core.layer_builder import build_masks_and_layers
from doc_color_decomposer.core.peak_detector import find_extrema, find_peaks
from doc_color_decomposer.core.quality_evaluator import compute_iou, compute_quality

__all__ = [
    "ColorFrequencyTable",
    "build_color_table",
    "project",
    "hue_angles",
    "HueHistogram",
    "find_extrema",
    "find_peaks",
    "assign_clusters",
    "build_masks_and_layers",
    "compute_iou",
    "compute_quality",
]
