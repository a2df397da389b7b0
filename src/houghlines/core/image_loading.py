"""Load edge images and pick out their foreground pixels."""

import logging

import numpy as np
from PIL import Image
from scipy import ndimage
from skimage.color import rgb2gray
from skimage.feature import canny

from .errors import InvalidImageError

logger = logging.getLogger(__name__)


def load_edge_image(image_path, coarsen_factor=1):
    """Load an edge map as 8-bit grayscale, optionally coarsened by factor."""
    img = Image.open(image_path).convert("L")
    img_array = np.array(img)
    if coarsen_factor != 1:
        # Nearest neighbour keeps a binary edge map binary
        img_array = ndimage.zoom(
            img_array, (1 / coarsen_factor, 1 / coarsen_factor), order=0
        )
    logger.debug("Loaded %s with shape %s", image_path, img_array.shape)
    return img_array


def load_photo_edges(image_path, sigma=1.5, coarsen_factor=1):
    """Load an ordinary photo and mark its edges with the Canny detector."""
    img = Image.open(image_path).convert("RGB")
    img_array = np.array(img)
    if coarsen_factor != 1:
        img_array = ndimage.zoom(
            img_array.astype(float), (1 / coarsen_factor, 1 / coarsen_factor, 1), order=1
        ).astype(np.uint8)
    edges = canny(rgb2gray(img_array), sigma=sigma)
    logger.debug("Canny marked %d edge pixels in %s", int(edges.sum()), image_path)
    return edges


def validate_image(image):
    """Return ``image`` as an array, raising InvalidImageError if unusable."""
    if image is None:
        raise InvalidImageError("Image is None")
    img = np.asarray(image)
    if img.dtype == object:
        raise InvalidImageError("Image is not a numeric array")
    if img.ndim not in (2, 3):
        raise InvalidImageError(
            f"Expected a 2-D or 3-D image, got {img.ndim} dimensions", img.shape
        )
    height, width = img.shape[:2]
    if width == 0 or height == 0:
        raise InvalidImageError(f"Image has zero size {width}x{height}", img.shape)
    return img


def _max_intensity(dtype):
    if dtype == np.bool_:
        return True
    if np.issubdtype(dtype, np.integer):
        return np.iinfo(dtype).max
    return 1.0


def white_foreground(image):
    """Pixels at the maximum intensity of the image dtype."""
    mask = image == _max_intensity(image.dtype)
    if mask.ndim == 3:
        mask = mask.all(axis=-1)
    return mask


def black_foreground(image):
    """Pixels at zero intensity."""
    mask = image == 0
    if mask.ndim == 3:
        mask = mask.all(axis=-1)
    return mask


FOREGROUND_PREDICATES = {
    "white": white_foreground,
    "black": black_foreground,
}


def foreground_predicate(name):
    """Look up a built-in foreground predicate by name."""
    try:
        return FOREGROUND_PREDICATES[name]
    except KeyError:
        raise ValueError(
            f"Unknown foreground '{name}', expected one of "
            f"{sorted(FOREGROUND_PREDICATES)}"
        ) from None
