"""
Panoptic Quality of a mask decomposition

Predicted masks are matched greedily against ground-truth masks by IoU:

- predicted masks are visited in the order given;
- each one takes the not-yet-consumed truth mask with the highest IoU
  (the first such truth mask when several share the maximum);
- the pair matches when that IoU is at least 0.5, consuming both masks.

PQ = sum(matched IoU) / (TP + 0.5 * (FP + FN))

Usage:
    report = evaluate_quality(predicted_masks, truth_masks)
    report.score
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from doc_color_decomposer.utils.image_utils import binarize

logger = logging.getLogger(__name__)

MATCH_IOU_THRESHOLD = 0.5


class QualityEvaluationError(ValueError):
    """Raised when the quality score is undefined."""


@dataclass
class QualityReport:
    """Result of matching predicted masks against ground truth."""

    score: float
    sum_iou: float
    true_positives: int
    false_positives: int
    false_negatives: int

    # (predicted_idx, truth_idx, iou) per matched pair
    matches: List[Tuple[int, int, float]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "sum_iou": self.sum_iou,
            "tp": self.true_positives,
            "fp": self.false_positives,
            "fn": self.false_negatives,
            "matches": [list(m) for m in self.matches],
        }


def compute_iou(mask_a: np.ndarray, mask_b: np.ndarray) -> float:
    """
    Intersection over union of two binary masks (non-zero = set).

    Returns 0.0 when both masks are empty.
    """
    a = binarize(mask_a)
    b = binarize(mask_b)
    union = int(np.count_nonzero(a | b))
    if union == 0:
        return 0.0
    return int(np.count_nonzero(a & b)) / union


def evaluate_quality(
    predicted_masks: Sequence[np.ndarray],
    truth_masks: Sequence[np.ndarray],
) -> QualityReport:
    """
    Greedy IoU matching and Panoptic Quality.

    Args:
        predicted_masks: masks produced by the decomposition
        truth_masks: ground-truth masks of the same size

    Returns:
        QualityReport

    Raises:
        QualityEvaluationError: both lists are empty
    """
    if len(predicted_masks) == 0 and len(truth_masks) == 0:
        raise QualityEvaluationError("quality is undefined without predicted and ground-truth masks")

    truth_consumed = [False] * len(truth_masks)
    matches = []
    sum_iou = 0.0

    for pred_idx, pred in enumerate(predicted_masks):
        best_iou = -1.0
        best_idx = -1
        for truth_idx, truth in enumerate(truth_masks):
            if truth_consumed[truth_idx]:
                continue
            iou = compute_iou(pred, truth)
            if iou > best_iou:
                best_iou = iou
                best_idx = truth_idx

        if best_idx >= 0 and best_iou >= MATCH_IOU_THRESHOLD:
            truth_consumed[best_idx] = True
            matches.append((pred_idx, best_idx, best_iou))
            sum_iou += best_iou

    tp = len(matches)
    fp = len(predicted_masks) - tp
    fn = len(truth_masks) - tp
    score = sum_iou / (tp + 0.5 * (fp + fn))

    logger.debug(f"PQ={score:.4f} (TP={tp}, FP={fp}, FN={fn})")

    return QualityReport(
        score=float(score),
        sum_iou=float(sum_iou),
        true_positives=tp,
        false_positives=fp,
        false_negatives=fn,
        matches=matches,
    )


def compute_quality(predicted_masks: Sequence[np.ndarray], truth_masks: Sequence[np.ndarray]) -> float:
    """Panoptic Quality score in [0, 1]."""
    return evaluate_quality(predicted_masks, truth_masks).score
