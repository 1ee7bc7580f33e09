"""
Unit tests for IoU and Panoptic Quality.
"""

import numpy as np
import pytest

from doc_color_decomposer.core.quality_evaluator import (
    QualityEvaluationError,
    QualityReport,
    compute_iou,
    compute_quality,
    evaluate_quality,
)


def _mask(pixels, size=10):
    """1D pixel set -> (1, size) uint8 mask"""
    mask = np.zeros((1, size), dtype=np.uint8)
    mask[0, list(pixels)] = 255
    return mask


class TestComputeIou:
    def test_identical(self):
        a = _mask(range(0, 4))
        assert compute_iou(a, a) == 1.0

    def test_disjoint(self):
        assert compute_iou(_mask(range(0, 5)), _mask(range(5, 10))) == 0.0

    def test_partial_overlap(self):
        assert compute_iou(_mask(range(0, 6)), _mask(range(3, 9))) == pytest.approx(3 / 9)

    def test_symmetric(self):
        a, b = _mask([0, 1, 2, 7]), _mask([2, 3, 7, 8, 9])
        assert compute_iou(a, b) == compute_iou(b, a)

    def test_both_empty_is_zero(self):
        empty = np.zeros((1, 10), dtype=np.uint8)
        assert compute_iou(empty, empty) == 0.0

    def test_any_nonzero_value_counts(self):
        assert compute_iou(_mask([1, 2]), (_mask([1, 2]) > 0).astype(np.uint8)) == 1.0


class TestEvaluateQuality:
    def test_identical_single_mask(self):
        assert compute_quality([_mask(range(10))], [_mask(range(10))]) == 1.0

    def test_disjoint_single_mask(self):
        assert compute_quality([_mask(range(0, 5))], [_mask(range(5, 10))]) == 0.0

    def test_identical_sets_any_order(self):
        masks = [_mask(range(0, 3)), _mask(range(3, 7)), _mask(range(7, 10))]
        assert compute_quality(masks, masks[::-1]) == 1.0
        assert compute_quality(masks[::-1], [masks[1], masks[0], masks[2]]) == 1.0

    def test_partial_match(self):
        report = evaluate_quality([_mask(range(10))], [_mask(range(8))])
        assert report.true_positives == 1
        assert report.score == pytest.approx(0.8)

    def test_unmatched_counts(self):
        predicted = [_mask(range(0, 5)), _mask(range(5, 7))]
        truth = [_mask(range(0, 5)), _mask(range(7, 10))]
        report = evaluate_quality(predicted, truth)
        assert isinstance(report, QualityReport)
        assert (report.true_positives, report.false_positives, report.false_negatives) == (1, 1, 1)
        assert report.score == pytest.approx(1.0 / (1 + 0.5 * 2))
        assert report.matches == [(0, 0, 1.0)]

    def test_truth_mask_is_consumed_once(self):
        """A second identical prediction cannot reuse the matched truth mask"""
        a = _mask(range(0, 5))
        report = evaluate_quality([a, a.copy()], [a])
        assert report.true_positives == 1
        assert report.false_positives == 1
        assert report.matches[0][0] == 0
        assert report.score == pytest.approx(1.0 / 1.5)

    def test_first_truth_wins_equal_iou(self):
        pred = _mask(range(0, 4))
        truth = [_mask(range(0, 5)), _mask(range(0, 5))]
        report = evaluate_quality([pred], truth)
        assert report.matches[0][1] == 0

    def test_iou_below_half_not_matched(self):
        report = evaluate_quality([_mask(range(0, 4))], [_mask(range(0, 9))])
        assert report.true_positives == 0
        assert report.score == 0.0

    def test_no_predictions(self):
        assert compute_quality([], [_mask(range(3))]) == 0.0

    def test_both_empty_undefined(self):
        with pytest.raises(QualityEvaluationError):
            compute_quality([], [])

    def test_to_dict(self):
        data = evaluate_quality([_mask(range(10))], [_mask(range(10))]).to_dict()
        assert data["score"] == 1.0
        assert data["tp"] == 1
        assert data["matches"] == [[0, 0, 1.0]]
