"""Vote table over discretized (angle, distance) line descriptors.

Distances follow the centre-origin convention: a pixel ``(x, y)`` in an image
of size ``width x height`` lies at signed distance

    rho = (x - width // 2) * cos(theta) + (y - height // 2) * sin(theta)

from the line through the image centre with normal angle ``theta``. The
centre sits on a whole pixel, so pixels on axis-aligned lines get whole
distances and never tie between two buckets. Every in-image pixel satisfies
``|rho| <= rho_max`` where ``rho_max`` is half the image diagonal. Distances
map to integer buckets of width 1 offset by ``ceil(rho_max)``, so bucket
``0`` holds ``rho = -offset``.

Distances that land outside the table (floating point overshoot) are clamped
to the nearest edge bucket. No vote is ever dropped.
"""

import math
from dataclasses import dataclass

import numpy as np


def image_centre(width, height):
    """Origin of the distance convention, always on a whole pixel."""
    return width // 2, height // 2


@dataclass(frozen=True)
class Descriptor:
    """One accumulator cell, identifying a candidate line."""

    rho_bucket: int
    theta_index: int
    votes: int
    rho: float
    theta: float


class Accumulator:
    """Dense ``n_theta x n_rho`` table of vote counts."""

    def __init__(self, n_theta, rho_max):
        if n_theta < 1:
            raise ValueError(f"n_theta must be positive, got {n_theta}")
        if rho_max < 0:
            raise ValueError(f"rho_max must be non-negative, got {rho_max}")
        self.n_theta = int(n_theta)
        self.rho_max = float(rho_max)
        self.offset = int(math.ceil(rho_max))
        self.n_rho = 2 * self.offset + 1
        # theta_i = i * pi / n_theta, never accumulated
        self.thetas = np.arange(self.n_theta) * (np.pi / self.n_theta)
        self.votes = np.zeros((self.n_theta, self.n_rho), dtype=np.int64)

    @classmethod
    def for_image(cls, width, height, n_theta=180):
        """Size an accumulator for an image of the given dimensions."""
        return cls(n_theta, math.hypot(width, height) / 2)

    @property
    def shape(self):
        return self.votes.shape

    @property
    def total_votes(self):
        return int(self.votes.sum())

    @property
    def max_votes(self):
        return int(self.votes.max())

    def theta(self, theta_index):
        """Angle in radians of an angle index."""
        return float(self.thetas[theta_index])

    def rho(self, rho_bucket):
        """Signed distance represented by a distance bucket."""
        return float(rho_bucket - self.offset)

    def bucket(self, rho):
        """Distance bucket holding ``rho``, clamped to the table."""
        return int(min(max(np.rint(rho) + self.offset, 0), self.n_rho - 1))

    def buckets(self, rhos):
        """Vectorised :meth:`bucket`."""
        idx = np.rint(np.asarray(rhos, dtype=np.float64)) + self.offset
        return np.clip(idx, 0, self.n_rho - 1).astype(np.intp)

    def _check_theta_index(self, theta_index):
        if not 0 <= theta_index < self.n_theta:
            raise ValueError(
                f"theta_index must be in [0, {self.n_theta}), got {theta_index}"
            )

    def increment(self, rho, theta_index):
        """Add one vote for the line at distance ``rho`` and angle index."""
        self._check_theta_index(theta_index)
        self.votes[theta_index, self.bucket(rho)] += 1

    def increment_many(self, rhos, theta_index):
        """Add one vote per distance in ``rhos``, all at the same angle index."""
        self._check_theta_index(theta_index)
        counts = np.bincount(self.buckets(rhos), minlength=self.n_rho)
        self.votes[theta_index] += counts

    def descriptor(self, theta_index, rho_bucket):
        """Build the descriptor of a single cell."""
        return Descriptor(
            rho_bucket=int(rho_bucket),
            theta_index=int(theta_index),
            votes=int(self.votes[theta_index, rho_bucket]),
            rho=self.rho(rho_bucket),
            theta=self.theta(theta_index),
        )

    def query_maxima(self, threshold, num_peaks=None):
        """Return descriptors of every cell with at least ``threshold`` votes.

        Results are sorted by descending vote count; ties keep ascending
        ``(theta_index, rho_bucket)`` order so the output is deterministic.
        """
        if threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {threshold}")
        theta_idx, rho_idx = np.nonzero(self.votes >= threshold)
        counts = self.votes[theta_idx, rho_idx]
        # nonzero is row-major already; a stable sort keeps that for ties
        order = np.argsort(-counts, kind="stable")
        if num_peaks is not None:
            order = order[:num_peaks]
        return [self.descriptor(theta_idx[i], rho_idx[i]) for i in order]
