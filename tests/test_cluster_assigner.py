import numpy as np
import pytest

from doc_color_decomposer.core.cluster_assigner import (
    assign_clusters,
    circular_distance,
    cluster_mean_colors,
    color_clusters,
    hue_mean_colors,
)


def test_circular_distance_wraps():
    assert circular_distance(359, 0) == 1
    assert circular_distance(0, 180) == 180
    assert circular_distance(10, 350) == 20


def test_single_peak_owns_every_hue():
    labels = assign_clusters([150])
    assert labels.shape == (360,)
    assert np.all(labels == 0)


def test_nearest_peak():
    labels = assign_clusters([0, 150])
    assert labels[10] == 0
    assert labels[140] == 1
    assert labels[300] == 0  # 60 from 0 across the boundary, 150 from 150


def test_ties_go_to_lower_peak():
    labels = assign_clusters([0, 180])
    assert labels[90] == 0
    assert labels[270] == 0
    assert labels[91] == 1
    assert labels[269] == 1


def test_assignment_across_boundary():
    labels = assign_clusters([10, 350])
    assert labels[0] == 0  # tie: 10 away from both
    assert labels[359] == 1
    assert labels[5] == 0
    assert labels[180] == 0  # tie: 170 away from both


def test_partition_is_contiguous_arcs():
    peaks = [30, 150, 270]
    labels = assign_clusters(peaks)
    for idx, peak in enumerate(peaks):
        assert labels[peak] == idx
    assert set(labels.tolist()) == {0, 1, 2}


def test_no_peaks_rejected():
    with pytest.raises(ValueError):
        assign_clusters([])


def test_color_clusters_lookup():
    hue_to_cluster = assign_clusters([0, 150])
    np.testing.assert_array_equal(color_clusters(np.array([150, 0, 149]), hue_to_cluster), [1, 0, 1])


def test_cluster_mean_colors_weighted():
    rgb = np.array([[255, 0, 0], [255, 0, 0], [255, 255, 255]], dtype=np.uint8)
    counts = np.array([2, 1, 5])
    labels = np.array([1, 1, 0])
    means = cluster_mean_colors(rgb, counts, labels, 3)
    assert means.tolist() == [[255, 255, 255], [255, 0, 0], [255, 255, 255]]


def test_mean_is_taken_in_linear_light():
    rgb = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
    means = cluster_mean_colors(rgb, np.array([1, 1]), np.array([0, 0]), 1)
    # linear 0.5 -> sRGB 188
    assert means[0].tolist() == [188, 188, 188]


def test_hue_mean_colors_shape():
    rgb = np.array([[255, 0, 0]], dtype=np.uint8)
    colors = hue_mean_colors(rgb, np.array([3]), np.array([150]))
    assert colors.shape == (360, 3)
    assert colors[150].tolist() == [255, 0, 0]
    assert colors[0].tolist() == [255, 255, 255]
