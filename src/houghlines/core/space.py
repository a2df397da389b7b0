"""Result of one Hough transform."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

import numpy as np

from .accumulator import Accumulator, Descriptor

if TYPE_CHECKING:
    from .line_detection import LineSegment


@dataclass
class HoughSpace:
    """
    Everything one transform produces for one image.

    Attributes:
        accumulator: Vote table filled by the voting pass
        visualization: uint8 image shaped like the vote table, darker where
            more pixels voted
        width, height: Size of the source image
        maximums: Descriptors selected by ``detect_maxima``
        rays: Line segments reconstructed from ``maximums``
    """
    accumulator: Accumulator
    visualization: np.ndarray
    width: int
    height: int
    maximums: List[Descriptor] = field(default_factory=list)
    rays: List["LineSegment"] = field(default_factory=list)

    @property
    def votes(self) -> np.ndarray:
        """Raw ``n_theta x n_rho`` vote counts."""
        return self.accumulator.votes

    @property
    def n_theta(self) -> int:
        return self.accumulator.n_theta
