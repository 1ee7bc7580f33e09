"""
Decomposition Pipeline Module

문서 이미지를 색상 레이어로 분해하는 엔드투엔드 파이프라인.

Preprocess → ColorTable → Projection → HueHistogram → Peaks → Clusters → Masks/Layers
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from doc_color_decomposer.config import ConfigValidationError, DecomposerConfig, DiagnosticsConfig
from doc_color_decomposer.core.chromatic_projector import hue_angles, project
from doc_color_decomposer.core.cluster_assigner import assign_clusters, cluster_mean_colors, color_clusters
from doc_color_decomposer.core.color_table import ColorFrequencyTable, build_color_table
from doc_color_decomposer.core.diagnostics import DiagnosticsExporter
from doc_color_decomposer.core.hue_histogram import HueHistogram, compute_hue_histogram
from doc_color_decomposer.core.layer_builder import build_masks_and_layers
from doc_color_decomposer.core.peak_detector import find_extrema, find_peaks
from doc_color_decomposer.core.quality_evaluator import QualityReport, evaluate_quality
from doc_color_decomposer.utils.color_space import reduce_aberration, to_linear
from doc_color_decomposer.utils.image_utils import ImageValidationError, validate_image, validate_masks

logger = logging.getLogger(__name__)


class DecompositionError(Exception):
    """파이프라인 실행 중 발생하는 예외"""


class DocColorDecomposer:
    """
    Decomposes one BGR document image into flat-colored layers.

    All stages run eagerly in the constructor; the instance then owns every
    intermediate table (color table, projections, histograms, cluster
    assignment, masks, layers) for the lifetime of this decomposition.
    """

    def __init__(
        self,
        image_bgr: np.ndarray,
        config: Optional[DecomposerConfig] = None,
        diagnostics: Optional[DiagnosticsConfig] = None,
    ):
        """
        Args:
            image_bgr: decoded sRGB document image, BGR uint8 (H, W, 3)
            config: decomposition parameters (defaults when None)
            diagnostics: verbosity / diagnostics settings (defaults when None)

        Raises:
            ConfigValidationError: invalid tolerance or other parameter
            ImageValidationError: image is not a non-empty BGR uint8 array
            DecompositionError: unexpected failure inside a stage
        """
        self.config = config or DecomposerConfig()
        self.config.validate()
        validate_image(image_bgr, "source image")

        self.diagnostics = diagnostics or DiagnosticsConfig()
        self.diagnostics.validate()
        self._log_level = self.diagnostics.log_level
        self.timings: Dict[str, float] = {}

        self._source = image_bgr.copy()

        start = time.perf_counter()
        try:
            self._run()
        except (ImageValidationError, ConfigValidationError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error in decomposition: {e}", exc_info=True)
            raise DecompositionError(f"Decomposition failed: {e}") from e

        total_ms = (time.perf_counter() - start) * 1000.0
        logger.log(
            self._log_level,
            f"Decomposed {self._source.shape[1]}x{self._source.shape[0]} image into "
            f"{self.n_clusters} layers (peaks={self.peaks}, time={total_ms:.1f}ms)",
        )

    @contextmanager
    def _stage(self, name: str):
        start = time.perf_counter()
        yield
        if self.diagnostics.collect_timings:
            self.timings[name] = (time.perf_counter() - start) * 1000.0
        logger.log(self._log_level, f"Stage '{name}' done")

    def _run(self) -> None:
        cfg = self.config

        with self._stage("preprocess"):
            if cfg.preprocessing:
                self._processed = reduce_aberration(self._source, cfg.saturation_threshold, cfg.lightness_threshold)
            else:
                self._processed = self._source

        with self._stage("color_table"):
            self.color_table: ColorFrequencyTable = build_color_table(self._processed, workers=cfg.workers)

        with self._stage("projection"):
            self.linear_colors = to_linear(self.color_table.rgb())
            self.projected_points = project(self.linear_colors)
            self.color_hues = hue_angles(self.projected_points)

        with self._stage("histogram"):
            self.histogram: HueHistogram = compute_hue_histogram(
                self.color_hues, self.color_table.counts, int(cfg.kernel_size)
            )

        with self._stage("peaks"):
            self.extrema: List[int] = find_extrema(self.histogram.working)
            self.peaks: List[int] = find_peaks(self.histogram.working, int(cfg.tolerance))

        with self._stage("clusters"):
            self.hue_to_cluster = assign_clusters(self.peaks)
            self.color_labels = color_clusters(self.color_hues, self.hue_to_cluster)
            self.pixel_clusters = self.color_labels[self.color_table.pixel_index]

        with self._stage("layers"):
            self._masks, self._layers = build_masks_and_layers(self.pixel_clusters, self._source, self.n_clusters)

    @property
    def n_clusters(self) -> int:
        return len(self.peaks)

    @property
    def shape(self):
        return self._source.shape[:2]

    def get_layers(self) -> List[np.ndarray]:
        """BGR layers, white background, ordered by ascending peak hue."""
        return [layer.copy() for layer in self._layers]

    def get_masks(self) -> List[np.ndarray]:
        """Binary uint8 (0/255) masks, ordered like get_layers()."""
        return [mask.copy() for mask in self._masks]

    def cluster_colors(self) -> np.ndarray:
        """(n_clusters, 3) mean sRGB color of every cluster."""
        return cluster_mean_colors(self.color_table.rgb(), self.color_table.counts, self.color_labels, self.n_clusters)

    def evaluate_quality(self, truth_masks: Sequence[np.ndarray]) -> QualityReport:
        """
        Match the produced masks against ground truth.

        Raises:
            ImageValidationError: truth masks missing, multi-channel or of another size
        """
        validate_masks(truth_masks, self.shape, name="truth_masks")
        report = evaluate_quality(self._masks, truth_masks)
        logger.log(
            self._log_level,
            f"Quality: PQ={report.score:.4f} (TP={report.true_positives}, "
            f"FP={report.false_positives}, FN={report.false_negatives})",
        )
        return report

    def compute_quality(self, truth_masks: Sequence[np.ndarray]) -> float:
        """Panoptic Quality (0~1) of this decomposition."""
        return self.evaluate_quality(truth_masks).score

    def export_diagnostics(self) -> Dict[str, Any]:
        exporter = DiagnosticsExporter(max_scatter_points=self.diagnostics.max_scatter_points)
        return exporter.export(self)
