"""
Decomposer configuration objects.

Both configs are plain dataclasses handed to the DocColorDecomposer
constructor. Nothing here touches process-wide state such as logger levels.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from doc_color_decomposer.utils.color_space import DEFAULT_LIGHTNESS_THRESHOLD, DEFAULT_SATURATION_THRESHOLD

logger = logging.getLogger(__name__)


class ConfigValidationError(ValueError):
    """Raised when a configuration value is out of its allowed range."""


@dataclass
class DecomposerConfig:
    """DocColorDecomposer 설정"""

    tolerance: int = 35  # minimum peak prominence; also the default smoothing width
    preprocessing: bool = True  # aberration reduction before clustering
    smoothing_kernel: Optional[int] = None  # odd Gaussian width, None = tolerance
    saturation_threshold: int = DEFAULT_SATURATION_THRESHOLD
    lightness_threshold: int = DEFAULT_LIGHTNESS_THRESHOLD
    workers: int = 1  # row bands scanned in parallel for the color table

    @property
    def kernel_size(self) -> int:
        return self.smoothing_kernel if self.smoothing_kernel is not None else self.tolerance

    def validate(self) -> None:
        if isinstance(self.tolerance, bool) or not isinstance(self.tolerance, numbers.Integral) or self.tolerance <= 0:
            raise ConfigValidationError(f"tolerance must be a positive integer, got {self.tolerance!r}")
        kernel = self.kernel_size
        if isinstance(kernel, bool) or not isinstance(kernel, numbers.Integral) or kernel <= 0 or kernel % 2 == 0:
            raise ConfigValidationError(f"smoothing kernel must be an odd positive integer, got {kernel!r}")
        for name in ("saturation_threshold", "lightness_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ConfigValidationError(f"{name} must be within [0, 255], got {value!r}")
        if self.workers < 1:
            raise ConfigValidationError(f"workers must be >= 1, got {self.workers!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DecomposerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown decomposer config keys: {', '.join(unknown)}")
        config = cls(**{k: v for k, v in data.items() if k in known})
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        # numpy scalars are not JSON serializable
        return {
            k: int(v) if isinstance(v, numbers.Integral) and not isinstance(v, bool) else v
            for k, v in asdict(self).items()
        }


@dataclass
class DiagnosticsConfig:
    """Caller-supplied verbosity and diagnostics collection settings."""

    verbose: bool = False  # stage summaries at INFO instead of DEBUG
    collect_timings: bool = True
    max_scatter_points: int = 5000

    @property
    def log_level(self) -> int:
        return logging.INFO if self.verbose else logging.DEBUG

    def validate(self) -> None:
        points = self.max_scatter_points
        if isinstance(points, bool) or not isinstance(points, numbers.Integral) or points < 0:
            raise ConfigValidationError(f"max_scatter_points must be a non-negative integer, got {points!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagnosticsConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown diagnostics config keys: {', '.join(unknown)}")
        config = cls(**{k: v for k, v in data.items() if k in known})
        config.validate()
        return config
