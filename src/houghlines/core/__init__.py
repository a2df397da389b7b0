"""Core package for Hough line detection."""

from .errors import InvalidImageError
from .image_loading import (
    load_edge_image,
    load_photo_edges,
    white_foreground,
    black_foreground,
    foreground_predicate,
)
from .accumulator import Accumulator, Descriptor, image_centre
from .space import HoughSpace
from .voting import hough_transform
from .maxima import detect_maxima
from .clustering import cluster_maxima
from .line_detection import (
    LineSegment,
    detect_lines,
    get_line_boundary_points,
    line_endpoints,
    reconstruct,
)
from .config import HoughConfig, save_config, load_config
