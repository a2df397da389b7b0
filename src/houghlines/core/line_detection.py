"""Turn (theta, rho) descriptors back into lines in image coordinates."""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .accumulator import Descriptor, image_centre
from .image_loading import white_foreground
from .maxima import DEFAULT_THRESHOLD, detect_maxima
from .voting import hough_transform

logger = logging.getLogger(__name__)


@dataclass
class LineSegment:
    """
    A line through the image given by two endpoints.

    Attributes:
        x1, y1: Start point coordinates
        x2, y2: End point coordinates
        descriptor: Accumulator cell the line was reconstructed from, if any
    """
    x1: float
    y1: float
    x2: float
    y2: float
    descriptor: Optional[Descriptor] = None

    @property
    def length(self) -> float:
        return float(np.hypot(self.x2 - self.x1, self.y2 - self.y1))

    @property
    def midpoint(self) -> Tuple[float, float]:
        """Get the midpoint of the line segment."""
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def angle_degrees(self) -> float:
        """Get the angle of the line in degrees from horizontal."""
        return float(np.degrees(np.arctan2(self.y2 - self.y1, self.x2 - self.x1)))

    def get_points(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Get start and end points as tuples."""
        return ((self.x1, self.y1), (self.x2, self.y2))

    def distance_to(self, x, y) -> float:
        """Perpendicular distance from ``(x, y)`` to the infinite line."""
        dx = self.x2 - self.x1
        dy = self.y2 - self.y1
        norm = np.hypot(dx, dy)
        if norm == 0:
            return float(np.hypot(x - self.x1, y - self.y1))
        return float(abs(dy * (x - self.x1) - dx * (y - self.y1)) / norm)


def line_endpoints(rho, theta, width, height):
    """
    Endpoints of the line ``(x - cx) cos + (y - cy) sin = rho``.

    Lines closer to horizontal (pi/4 < theta < 3pi/4) span the image width and
    are solved for y; the rest span the image height and are solved for x, so
    the division is always by a factor of magnitude at least sqrt(2)/2.
    """
    a = np.cos(theta)
    b = np.sin(theta)
    cx, cy = image_centre(width, height)
    if np.pi / 4 < theta < 3 * np.pi / 4:
        x1, x2 = 0.0, float(width - 1)
        y1 = cy + (rho - (x1 - cx) * a) / b
        y2 = cy + (rho - (x2 - cx) * a) / b
    else:
        y1, y2 = 0.0, float(height - 1)
        x1 = cx + (rho - (y1 - cy) * b) / a
        x2 = cx + (rho - (y2 - cy) * b) / a
    return (float(x1), float(y1)), (float(x2), float(y2))


def get_line_boundary_points(rho, theta, width, height):
    """Get the two boundary points of a line within the image."""
    a = np.cos(theta)
    b = np.sin(theta)
    cx, cy = image_centre(width, height)
    points = []
    # Left x=0 and right x=width
    if abs(b) > 1e-6:
        for x in (0, width):
            y = cy + (rho - (x - cx) * a) / b
            if 0 <= y <= height:
                points.append((float(x), float(y)))
    # Top y=0 and bottom y=height
    if abs(a) > 1e-6:
        for y in (0, height):
            x = cx + (rho - (y - cy) * b) / a
            if 0 <= x <= width:
                point = (float(x), float(y))
                # Skip corners already found on a side
                if not any(np.allclose(point, p) for p in points):
                    points.append(point)
    return points[:2]


def reconstruct(space):
    """Attach a LineSegment for each maximum in ``space``."""
    rays = []
    for descriptor in space.maximums:
        (x1, y1), (x2, y2) = line_endpoints(
            descriptor.rho, descriptor.theta, space.width, space.height
        )
        rays.append(LineSegment(x1, y1, x2, y2, descriptor=descriptor))
    logger.debug("Reconstructed %d lines", len(rays))
    return dataclasses.replace(space, rays=rays)


def detect_lines(
    image,
    n_theta=180,
    threshold=DEFAULT_THRESHOLD,
    foreground=white_foreground,
    num_peaks=None,
):
    """Detect straight lines in an edge image using the Hough transform."""
    space = hough_transform(image, n_theta=n_theta, foreground=foreground)
    space = detect_maxima(space, threshold=threshold, num_peaks=num_peaks)
    return reconstruct(space)
