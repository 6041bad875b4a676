"""Filesystem-side collaborators (file moves, photo library)."""
