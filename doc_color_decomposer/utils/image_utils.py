"""
유틸: 이미지 / 마스크 배열 검증 및 보조 함수 모음.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np


class ImageValidationError(ValueError):
    """이미지 유효성 오류"""


def validate_image(image: np.ndarray, name: str = "image") -> None:
    if not isinstance(image, np.ndarray):
        raise ImageValidationError(f"{name} must be numpy.ndarray")
    if image.dtype != np.uint8:
        raise ImageValidationError(f"{name} must have dtype uint8")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ImageValidationError(f"{name} must have 3 channels (H, W, 3)")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ImageValidationError(f"{name} is empty")


def validate_masks(masks: Sequence[np.ndarray], shape: Tuple[int, int], name: str = "masks") -> None:
    """Check that every mask is a non-empty single-channel array of the given (H, W)."""
    if masks is None or len(masks) == 0:
        raise ImageValidationError(f"{name} must contain at least one mask")
    for idx, mask in enumerate(masks):
        if not isinstance(mask, np.ndarray):
            raise ImageValidationError(f"{name}[{idx}] must be numpy.ndarray")
        if mask.ndim != 2:
            raise ImageValidationError(f"{name}[{idx}] must be single-channel (H, W)")
        if mask.shape != tuple(shape):
            raise ImageValidationError(f"{name}[{idx}] has shape {mask.shape}, expected {tuple(shape)}")


def binarize(mask: np.ndarray) -> np.ndarray:
    return np.asarray(mask) > 0
