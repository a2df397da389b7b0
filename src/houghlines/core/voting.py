"""Forward Hough transform: every foreground pixel votes for its lines."""

import logging

import numpy as np

from .accumulator import Accumulator, image_centre
from .image_loading import validate_image, white_foreground
from .space import HoughSpace

logger = logging.getLogger(__name__)

# Intensity removed from a visualization cell per vote
VOTE_DARKEN_STEP = 4


def render_votes(votes, step=VOTE_DARKEN_STEP):
    """Map vote counts to a uint8 image, white for none, saturating at black."""
    darkening = np.minimum(votes * step, 255)
    return (255 - darkening).astype(np.uint8)


def hough_transform(image, n_theta=180, foreground=white_foreground):
    """Vote every foreground pixel of ``image`` into a new HoughSpace."""
    img = validate_image(image)
    height, width = img.shape[:2]
    mask = np.asarray(foreground(img), dtype=bool)
    if mask.shape != (height, width):
        raise ValueError(
            f"Foreground mask has shape {mask.shape}, expected {(height, width)}"
        )

    accumulator = Accumulator.for_image(width, height, n_theta)
    ys, xs = np.nonzero(mask)
    logger.debug(
        "Voting %d foreground pixels into accumulator of shape %s",
        len(xs), accumulator.shape,
    )
    if len(xs) == 0:
        logger.debug("No foreground pixels, accumulator stays empty")
    else:
        cx, cy = image_centre(width, height)
        xc = xs - cx
        yc = ys - cy
        cos_t = np.cos(accumulator.thetas)
        sin_t = np.sin(accumulator.thetas)
        for theta_index in range(accumulator.n_theta):
            rhos = xc * cos_t[theta_index] + yc * sin_t[theta_index]
            accumulator.increment_many(rhos, theta_index)

    return HoughSpace(
        accumulator=accumulator,
        visualization=render_votes(accumulator.votes),
        width=width,
        height=height,
    )
