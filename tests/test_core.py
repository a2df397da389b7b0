"""Tests for core functions."""

import numpy as np
import pytest
from skimage.draw import line

from houghlines.core import (
    Accumulator,
    InvalidImageError,
    image_centre,
    black_foreground,
    cluster_maxima,
    detect_lines,
    detect_maxima,
    hough_transform,
    line_endpoints,
    LineSegment,
    reconstruct,
    white_foreground,
)


def horizontal_line_image():
    img = np.zeros((100, 100), dtype=np.uint8)
    img[50, :] = 255
    return img


def test_accumulator_shape_for_image():
    """Accumulator is sized from the half diagonal."""
    acc = Accumulator.for_image(100, 100, n_theta=180)
    # half diagonal is 70.71, so buckets run from -71 to 71
    assert acc.offset == 71
    assert acc.shape == (180, 143)
    assert acc.total_votes == 0


def test_accumulator_clamps_out_of_range():
    """Distances past either end land in the edge buckets."""
    acc = Accumulator(10, 5.0)
    assert acc.bucket(100.0) == acc.n_rho - 1
    assert acc.bucket(-100.0) == 0
    assert acc.bucket(5.4) == 10
    assert acc.bucket(-0.4) == 5
    acc.increment(7.2, 3)
    acc.increment_many([-9.0, 0.2, 0.3], 4)
    assert acc.votes[3, 10] == 1
    assert acc.votes[4, 0] == 1
    assert acc.votes[4, 5] == 2
    assert acc.total_votes == 4


def test_accumulator_rejects_bad_sizes():
    with pytest.raises(ValueError):
        Accumulator(0, 10.0)
    with pytest.raises(ValueError):
        Accumulator(180, -1.0)


def test_accumulator_rejects_out_of_range_theta_index():
    """Angle indices never wrap around to the other end of the table."""
    acc = Accumulator(10, 5.0)
    for theta_index in (-1, 10):
        with pytest.raises(ValueError):
            acc.increment(0.0, theta_index)
        with pytest.raises(ValueError):
            acc.increment_many([0.0, 1.0], theta_index)
    assert acc.total_votes == 0
    acc.increment(0.0, 9)
    assert acc.votes[9, acc.offset] == 1


def test_query_maxima_sorted_by_votes():
    """Maxima come back strongest first, ties in table order."""
    acc = Accumulator(4, 2.0)
    acc.votes[0, 1] = 5
    acc.votes[2, 3] = 9
    acc.votes[3, 0] = 5
    acc.votes[1, 1] = 2
    maxima = acc.query_maxima(5)
    assert [(d.theta_index, d.rho_bucket, d.votes) for d in maxima] == [
        (2, 3, 9),
        (0, 1, 5),
        (3, 0, 5),
    ]
    assert maxima[0].rho == 1.0
    assert maxima[0].theta == pytest.approx(np.pi / 2)
    assert len(acc.query_maxima(5, num_peaks=1)) == 1
    with pytest.raises(ValueError):
        acc.query_maxima(-1)


def test_horizontal_line_scenario():
    """A full row at y=50 peaks at theta=pi/2 with one vote per pixel."""
    space = detect_lines(horizontal_line_image(), n_theta=180)
    best = space.maximums[0]
    assert best.theta_index == 90
    assert best.votes == 100
    assert best.rho == 0.0
    ray = space.rays[0]
    assert ray.descriptor == best
    assert ray.x1 == pytest.approx(0.0)
    assert ray.y1 == pytest.approx(50.0)
    assert ray.x2 == pytest.approx(99.0)
    assert ray.y2 == pytest.approx(50.0)


def test_odd_sized_row_keeps_one_vote_per_pixel():
    """With an odd size the centre is still a whole pixel, so a row never splits."""
    img = np.zeros((101, 101), dtype=np.uint8)
    img[30, :] = 255
    space = detect_lines(img, num_peaks=1)
    best = space.maximums[0]
    assert image_centre(101, 101) == (50, 50)
    assert best.theta_index == 90
    assert best.votes == 101
    assert best.rho == -20.0
    assert space.votes.max() == 101
    assert space.rays[0].y1 == pytest.approx(30.0)
    assert space.rays[0].y2 == pytest.approx(30.0)


def test_odd_sized_adjacent_columns_stay_apart():
    img = np.zeros((101, 101), dtype=np.uint8)
    img[:, 30] = 255
    img[:, 31] = 255
    space = hough_transform(img)
    offset = space.accumulator.offset
    assert space.votes[0, offset - 20] == 101
    assert space.votes[0, offset - 19] == 101
    assert space.votes.max() == 101


def test_no_suppression_of_neighbouring_cells():
    """Adjacent angles of the same line are reported as separate maxima."""
    space = detect_maxima(hough_transform(horizontal_line_image()), threshold=30)
    indices = {d.theta_index for d in space.maximums}
    assert {89, 90, 91} <= indices
    assert len(space.maximums) > 1


def test_cluster_maxima_keeps_one_per_group():
    space = cluster_maxima(hough_transform(horizontal_line_image()), threshold=30)
    assert len(space.maximums) == 1
    assert space.maximums[0].theta_index == 90
    assert space.maximums[0].votes == 100


def test_vote_conservation():
    """Every foreground pixel casts exactly one vote per angle."""
    rng = np.random.default_rng(0)
    img = (rng.random((37, 53)) > 0.9).astype(np.uint8) * 255
    space = hough_transform(img, n_theta=360)
    assert space.accumulator.total_votes == int((img == 255).sum()) * 360


def test_determinism():
    rng = np.random.default_rng(1)
    img = rng.random((40, 60)) > 0.95
    first = hough_transform(img)
    second = hough_transform(img)
    assert np.array_equal(first.votes, second.votes)
    assert np.array_equal(first.visualization, second.visualization)


def test_empty_image_yields_no_lines():
    """An all-background image is valid and detects nothing."""
    space = detect_lines(np.zeros((30, 40), dtype=np.uint8), threshold=1)
    assert space.accumulator.total_votes == 0
    assert space.maximums == []
    assert space.rays == []
    assert np.all(space.visualization == 255)


def test_threshold_above_peak_yields_no_lines():
    space = detect_lines(horizontal_line_image(), threshold=101)
    assert space.maximums == []
    assert space.rays == []


def test_threshold_monotonicity():
    rng = np.random.default_rng(2)
    img = rng.random((50, 50)) > 0.9
    space = hough_transform(img)
    counts = [len(detect_maxima(space, threshold=t).maximums) for t in range(0, 40, 3)]
    assert all(a >= b for a, b in zip(counts, counts[1:]))


def test_visualization_darkens_with_votes():
    space = hough_transform(horizontal_line_image())
    assert space.visualization.shape == space.votes.shape
    assert space.visualization.dtype == np.uint8
    votes = space.votes.ravel()
    vis = space.visualization.ravel()
    order = np.argsort(votes, kind="stable")
    assert np.all(np.diff(vis[order].astype(int)) <= 0)
    assert space.visualization[90, space.accumulator.offset] == 0


def test_diagonal_line_round_trip():
    """Pixels on x - y = 20 peak at theta=3pi/4, rho=-20/sqrt(2)."""
    img = np.zeros((100, 100), dtype=bool)
    i = np.arange(80)
    img[i, i + 20] = True
    space = detect_lines(img, threshold=50)
    best = space.maximums[0]
    assert best.theta_index == 135
    assert best.votes == 80
    assert best.rho == pytest.approx(-20 / np.sqrt(2), abs=0.5)
    ray = space.rays[0]
    for x, y in [(20, 0), (60, 40), (99, 79)]:
        assert ray.distance_to(x, y) < 0.5


def test_rasterized_line_round_trip():
    """A Bresenham line is recovered within discretization error."""
    img = np.zeros((100, 100), dtype=np.uint8)
    rr, cc = line(20, 0, 70, 99)
    img[rr, cc] = 255
    theta0 = np.arctan2(99, -50)
    rho0 = (0 - 50) * np.cos(theta0) + (20 - 50) * np.sin(theta0)

    space = detect_lines(img, threshold=40)
    best = space.maximums[0]
    step = np.pi / 180
    assert abs(best.theta - theta0) <= 1.5 * step
    assert abs(best.rho - rho0) <= 1.5
    ray = space.rays[0]
    assert ray.distance_to(0, 20) < 3
    assert ray.distance_to(99, 70) < 3


@pytest.mark.parametrize("width, height", [(64, 48), (63, 47)])
def test_inverse_mapping_matches_voting_convention(width, height):
    """A pixel lies on the line reconstructed from the rho it votes for."""
    cx, cy = image_centre(width, height)
    x, y = 13, 37
    for theta in np.arange(0, 180, 7) * (np.pi / 180):
        rho = (x - cx) * np.cos(theta) + (y - cy) * np.sin(theta)
        p1, p2 = line_endpoints(rho, theta, width, height)
        assert LineSegment(*p1, *p2).distance_to(x, y) < 1e-6


def test_reconstruct_uses_exact_descriptor():
    acc = Accumulator.for_image(64, 48, n_theta=180)
    x, y = 5, 40
    acc.increment((x - 32) * np.cos(acc.theta(30)) + (y - 24) * np.sin(acc.theta(30)), 30)
    space = hough_transform(np.zeros((48, 64), dtype=np.uint8))
    space.accumulator = acc
    space = reconstruct(detect_maxima(space, threshold=1))
    assert len(space.rays) == 1
    assert space.rays[0].distance_to(x, y) <= 0.5 + 1e-9


@pytest.mark.parametrize("image", [None, np.zeros((0, 10)), np.zeros((10, 0)), np.zeros(5)])
def test_invalid_images_fail_fast(image):
    with pytest.raises(InvalidImageError):
        hough_transform(image)


def test_foreground_predicates():
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 0] = 255
    rgb[1, 1] = [255, 0, 255]
    assert white_foreground(rgb).tolist() == [[True, False], [False, False]]
    assert black_foreground(rgb).tolist() == [[False, True], [True, False]]
    floats = np.array([[1.0, 0.5], [0.0, 1.0]])
    assert white_foreground(floats).sum() == 2


def test_black_foreground_transform():
    img = np.full((100, 100), 255, dtype=np.uint8)
    img[:, 30] = 0
    space = detect_lines(img, foreground=black_foreground, num_peaks=1)
    best = space.maximums[0]
    assert best.theta_index == 0
    assert best.votes == 100
    assert best.rho == -20.0
    assert space.rays[0].x1 == pytest.approx(30.0)
    assert space.rays[0].x2 == pytest.approx(30.0)
