"""
Doc Color Decomposer

Decomposition of scanned documents into flat-colored layers by clustering
pixel colors on their hue angle in a chromatic projection plane.
"""

from doc_color_decomposer.config import ConfigValidationError, DecomposerConfig, DiagnosticsConfig
from doc_color_decomposer.core.quality_evaluator import QualityEvaluationError, compute_quality
from doc_color_decomposer.pipeline import DecompositionError, DocColorDecomposer
from doc_color_decomposer.utils.image_utils import ImageValidationError

__version__ = "0.1.0"

__all__ = [
    "DocColorDecomposer",
    "DecomposerConfig",
    "DiagnosticsConfig",
    "compute_quality",
    "ConfigValidationError",
    "DecompositionError",
    "ImageValidationError",
    "QualityEvaluationError",
]
