"""
Diagnostics JSON Exporter

분해 파이프라인의 중간 결과를 시각화 도구가 사용할 수 있는 JSON으로 출력.

The payload carries the data behind the usual decomposition plots: the phi
histogram (raw and smoothed, colored per hue), the clusters over the smoothed
histogram, the alpha-beta scatter of colors and the linear RGB scatter.
Rendering is left to the consumer.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List

import numpy as np

from doc_color_decomposer.core.cluster_assigner import hue_mean_colors

if TYPE_CHECKING:
    from doc_color_decomposer.pipeline import DocColorDecomposer

DIAGNOSTICS_VERSION = "1.0.0"


def rgb_to_hex(rgb) -> str:
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


class DiagnosticsExporter:
    """
    Serializes the state of a finished decomposition.

    Scatter sections keep only the most frequent colors.
    """

    def __init__(self, max_scatter_points: int = 5000, include_scatter: bool = True):
        """
        Args:
            max_scatter_points: 산점도에 포함할 최대 색상 수
            include_scatter: alpha-beta / RGB 산점도 포함 여부
        """
        self.max_scatter_points = max_scatter_points
        self.include_scatter = include_scatter

    def export(self, decomposer: "DocColorDecomposer") -> Dict[str, Any]:
        diagnostics = {
            "version": DIAGNOSTICS_VERSION,
            "timestamp": datetime.now().isoformat(),
            "image": {
                "height": int(decomposer.shape[0]),
                "width": int(decomposer.shape[1]),
                "distinct_colors": len(decomposer.color_table),
            },
            "histogram": self._export_histogram(decomposer),
            "clusters": self._export_clusters(decomposer),
            "timings_ms": {k: round(v, 3) for k, v in decomposer.timings.items()},
            "config": decomposer.config.to_dict(),
        }

        if self.include_scatter:
            diagnostics["scatter"] = self._export_scatter(decomposer)

        return diagnostics

    def to_json(self, decomposer: "DocColorDecomposer", indent: int = 2) -> str:
        return json.dumps(self.export(decomposer), indent=indent, ensure_ascii=False)

    def _export_histogram(self, decomposer: "DocColorDecomposer") -> Dict[str, Any]:
        table = decomposer.color_table
        hue_colors = hue_mean_colors(table.rgb(), table.counts, decomposer.color_hues)
        hist = decomposer.histogram
        return {
            "bins": int(hist.raw.size),
            "kernel_size": int(hist.kernel_size),
            "raw": hist.raw.astype(int).tolist(),
            "smoothed": [round(float(v), 3) for v in hist.smoothed],
            "hue_colors": [rgb_to_hex(c) for c in hue_colors],
        }

    def _export_clusters(self, decomposer: "DocColorDecomposer") -> Dict[str, Any]:
        colors = decomposer.cluster_colors()
        sizes = np.bincount(decomposer.color_labels, weights=decomposer.color_table.counts, minlength=decomposer.n_clusters)
        return {
            "extrema": [int(e) for e in decomposer.extrema],
            "peaks": [int(p) for p in decomposer.peaks],
            "hue_to_cluster": decomposer.hue_to_cluster.tolist(),
            "items": [
                {
                    "index": idx,
                    "peak": int(peak),
                    "color": rgb_to_hex(colors[idx]),
                    "pixel_count": int(sizes[idx]),
                }
                for idx, peak in enumerate(decomposer.peaks)
            ],
        }

    def _export_scatter(self, decomposer: "DocColorDecomposer") -> Dict[str, List[Any]]:
        table = decomposer.color_table
        order = np.argsort(-table.counts, kind="stable")[: self.max_scatter_points]
        rgb = table.rgb()
        return {
            "alpha_beta": [[round(float(a), 6), round(float(b), 6)] for a, b in decomposer.projected_points[order]],
            "linear_rgb": [[round(float(c), 6) for c in p] for p in decomposer.linear_colors[order]],
            "colors": [rgb_to_hex(rgb[i]) for i in order],
            "counts": [int(table.counts[i]) for i in order],
        }
