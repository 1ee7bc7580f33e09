"""
Color Space Conversion Utilities

sRGB ↔ linear-light RGB transfer functions and the aberration-reduction
preprocessing applied to document scans before clustering.
"""

from typing import Union

import cv2
import numpy as np

from doc_color_decomposer.utils.image_utils import ImageValidationError, validate_image

# sRGB transfer function constants (IEC 61966-2-1)
SRGB_DECODE_KNEE = 0.04045
SRGB_ENCODE_KNEE = 0.0031308
SRGB_LINEAR_SLOPE = 12.92
SRGB_GAMMA = 2.4

DEFAULT_SATURATION_THRESHOLD = 64
DEFAULT_LIGHTNESS_THRESHOLD = 64


def to_linear(image: Union[float, np.ndarray]) -> np.ndarray:
    """
    Convert sRGB values to linear-light RGB

    Args:
        image: sRGB values. uint8 input (0~255) is normalized by 255 first,
            float input is assumed to be already in [0, 1].

    Returns:
        float64 array of linear-light values in [0, 1]

    Example:
        >>> to_linear(np.array([0, 255], dtype=np.uint8))
        array([0., 1.])
    """
    arr = np.asarray(image)
    if arr.dtype == np.uint8:
        values = arr.astype(np.float64) / 255.0
    else:
        values = arr.astype(np.float64)

    return np.where(
        values <= SRGB_DECODE_KNEE,
        values / SRGB_LINEAR_SLOPE,
        np.power((np.clip(values, SRGB_DECODE_KNEE, None) + 0.055) / 1.055, SRGB_GAMMA),
    )


def to_srgb(image: Union[float, np.ndarray]) -> np.ndarray:
    """
    Convert linear-light RGB in [0, 1] back to 8-bit sRGB

    Values are clipped to [0, 1] before encoding and rounded on quantization,
    so to_srgb(to_linear(x)) == x for every 8-bit x.

    Args:
        image: linear-light values

    Returns:
        uint8 array of the same shape
    """
    values = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    encoded = np.where(
        values <= SRGB_ENCODE_KNEE,
        values * SRGB_LINEAR_SLOPE,
        1.055 * np.power(values, 1.0 / SRGB_GAMMA) - 0.055,
    )
    return np.rint(np.clip(encoded, 0.0, 1.0) * 255.0).astype(np.uint8)


def threshold_saturation(image_bgr: np.ndarray, thresh: float) -> np.ndarray:
    """Zero the HSV saturation of every pixel whose saturation is <= thresh."""
    return _threshold_channel(image_bgr, thresh, cv2.COLOR_BGR2HSV_FULL, cv2.COLOR_HSV2BGR_FULL, channel=1)


def threshold_lightness(image_bgr: np.ndarray, thresh: float) -> np.ndarray:
    """Zero the HLS lightness of every pixel whose lightness is <= thresh."""
    return _threshold_channel(image_bgr, thresh, cv2.COLOR_BGR2HLS_FULL, cv2.COLOR_HLS2BGR_FULL, channel=1)


def reduce_aberration(
    image_bgr: np.ndarray,
    saturation_threshold: float = DEFAULT_SATURATION_THRESHOLD,
    lightness_threshold: float = DEFAULT_LIGHTNESS_THRESHOLD,
) -> np.ndarray:
    """
    Suppress faint chromatic-aberration fringing of a scan

    Weakly saturated pixels are pulled to neutral gray and dark pixels to
    black, so that both project onto the chromatic origin instead of
    scattering small counts over the hue histogram.

    Args:
        image_bgr: BGR uint8 image (H, W, 3)
        saturation_threshold: saturation (0~255) at or below which a pixel becomes neutral
        lightness_threshold: lightness (0~255) at or below which a pixel becomes black

    Returns:
        New BGR uint8 image; the input buffer is left untouched.
    """
    validate_image(image_bgr)
    if not (0 <= saturation_threshold <= 255 and 0 <= lightness_threshold <= 255):
        raise ImageValidationError("aberration thresholds must be within [0, 255]")

    processed = threshold_saturation(image_bgr, saturation_threshold)
    processed = threshold_lightness(processed, lightness_threshold)
    return processed


def _threshold_channel(
    image_bgr: np.ndarray,
    thresh: float,
    forward: int,
    backward: int,
    channel: int,
) -> np.ndarray:
    validate_image(image_bgr)
    converted = cv2.cvtColor(image_bgr, forward)
    channels = list(cv2.split(converted))
    _, channels[channel] = cv2.threshold(channels[channel], thresh, 0.0, cv2.THRESH_TOZERO)
    merged = cv2.merge(channels)
    return cv2.cvtColor(merged, backward)
