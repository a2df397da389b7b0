"""Collapse neighbouring accumulator maxima into one line each."""

import dataclasses

import numpy as np
from scipy import ndimage

from .maxima import DEFAULT_THRESHOLD


def cluster_maxima(space, threshold=DEFAULT_THRESHOLD):
    """Keep only the strongest cell of each 8-connected group above threshold.

    Groups do not wrap around theta = 0 / pi, so a line close to vertical can
    still show up twice.
    """
    if threshold < 0:
        raise ValueError(f"threshold must be non-negative, got {threshold}")
    accumulator = space.accumulator
    struct_elem = ndimage.generate_binary_structure(2, 2)
    labeled, num_features = ndimage.label(
        accumulator.votes >= threshold, structure=struct_elem
    )
    if num_features == 0:
        return dataclasses.replace(space, maximums=[], rays=[])
    peaks = ndimage.maximum_position(
        accumulator.votes, labels=labeled, index=np.arange(1, num_features + 1)
    )
    maximums = [accumulator.descriptor(t, r) for t, r in peaks]
    maximums.sort(key=lambda d: (-d.votes, d.theta_index, d.rho_bucket))
    return dataclasses.replace(space, maximums=maximums, rays=[])
