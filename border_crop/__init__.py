"""Automatic removal of near-black left/right padding from images."""

__version__ = "0.1.0"
