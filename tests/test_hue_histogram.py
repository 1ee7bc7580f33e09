import numpy as np
import pytest

from doc_color_decomposer.core.hue_histogram import (
    build_histogram,
    compute_hue_histogram,
    smooth_histogram,
    working_histogram,
)


def _impulse(index: int, height: float = 100.0) -> np.ndarray:
    hist = np.zeros(360)
    hist[index] = height
    return hist


class TestBuildHistogram:
    def test_accumulates_counts(self):
        hist = build_histogram(np.array([0, 359, 0, 150]), np.array([1, 2, 3, 4]))
        assert hist.shape == (360,)
        assert hist[0] == 4
        assert hist[359] == 2
        assert hist[150] == 4
        assert hist.sum() == 10

    def test_empty_input(self):
        hist = build_histogram(np.array([], dtype=np.int64), np.array([]))
        assert hist.shape == (360,)
        assert hist.sum() == 0

    def test_out_of_range_hue(self):
        with pytest.raises(ValueError):
            build_histogram(np.array([360]), np.array([1]))


class TestSmoothHistogram:
    def test_kernel_one_is_identity(self):
        hist = _impulse(42)
        np.testing.assert_array_equal(smooth_histogram(hist, 1), hist)

    def test_preserves_mass(self):
        hist = _impulse(100) + _impulse(200, 50.0)
        assert smooth_histogram(hist, 35).sum() == pytest.approx(150.0)

    def test_no_phase_shift(self):
        smoothed = smooth_histogram(_impulse(120), 35)
        assert int(np.argmax(smoothed)) == 120
        assert smoothed[110] == pytest.approx(smoothed[130])

    def test_wraps_at_boundary(self):
        smoothed = smooth_histogram(_impulse(0), 35)
        assert int(np.argmax(smoothed)) == 0
        assert smoothed[359] > 0
        assert smoothed[359] == pytest.approx(smoothed[1])
        assert smoothed[350] == pytest.approx(smoothed[10])

    def test_wraps_from_last_bin(self):
        smoothed = smooth_histogram(_impulse(359), 35)
        assert smoothed[0] == pytest.approx(smoothed[358])
        assert smoothed[5] > 0

    @pytest.mark.parametrize("size", [0, -3, 4])
    def test_invalid_kernel(self, size):
        with pytest.raises(ValueError):
            smooth_histogram(_impulse(0), size)


def test_compute_hue_histogram_working_is_rounded():
    result = compute_hue_histogram(np.array([10, 200]), np.array([1000, 700]), 35)
    assert result.working.dtype == np.int64
    np.testing.assert_array_equal(result.working, np.rint(result.smoothed).astype(np.int64))
    assert result.raw[10] == 1000
    assert result.kernel_size == 35


def test_working_histogram_rounds_to_int():
    working = working_histogram(np.array([0.4, 0.6, 2.5, 3.5]))
    assert working.dtype == np.int64
    assert working.tolist() == [0, 1, 2, 4]
