"""Image Engine - decoding and pixel-level collaborators.

This package provides:
- Image decoding into RGBA samples and rectangle crops (decoder)
- In-process counters and timings (metrics)
"""

from .decoder import crop_to_file, decode_sample

__all__ = ["crop_to_file", "decode_sample"]
