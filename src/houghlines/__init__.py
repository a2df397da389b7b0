"""Straight line detection in edge images with the Hough transform."""

__version__ = "0.1.0"
