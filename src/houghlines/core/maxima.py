"""Select accumulator cells with enough votes to count as lines."""

import dataclasses
import logging

logger = logging.getLogger(__name__)

# Heuristic vote count, tune per image size and edge density
DEFAULT_THRESHOLD = 30


def detect_maxima(space, threshold=DEFAULT_THRESHOLD, num_peaks=None):
    """
    Report every accumulator cell with at least ``threshold`` votes.

    Cells are reported independently: neighbouring cells produced by the same
    physical line are all returned. Use ``cluster_maxima`` to collapse them.

    Args:
        space: HoughSpace from ``hough_transform``
        threshold: Minimum vote count for a cell to be reported
        num_peaks: Keep only this many of the strongest cells

    Returns:
        A new HoughSpace with ``maximums`` set and ``rays`` cleared
    """
    maximums = space.accumulator.query_maxima(threshold, num_peaks=num_peaks)
    logger.debug("Found %d maxima at threshold %d", len(maximums), threshold)
    return dataclasses.replace(space, maximums=maximums, rays=[])
