"""Errors raised by the Hough transform core."""


class InvalidImageError(ValueError):
    """Raised when an input image cannot be transformed."""

    def __init__(self, msg, shape=None):
        super().__init__(msg)
        self.msg = msg
        self.shape = shape
