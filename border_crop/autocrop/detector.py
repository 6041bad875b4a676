import numpy as np

from border_crop.image_engine.decoder import decode_sample
from border_crop.logger import get_logger
from border_crop.models import DEFAULT_BLACK_THRESHOLD, RGB_CHANNELS, AutoCropError, CropBounds, ImageSample

_logger = get_logger("detector")


def content_columns(row: np.ndarray, threshold: int = DEFAULT_BLACK_THRESHOLD) -> np.ndarray:
    """Boolean mask of the pixels in a (width, channels) row that are not near-black.

    Only the colour channels are considered; alpha is ignored.
    """
    return (row[:, :RGB_CHANNELS] > threshold).any(axis=1)


def find_crop_bounds(image: ImageSample | np.ndarray, threshold: int = DEFAULT_BLACK_THRESHOLD) -> CropBounds:
    """Find the horizontal window that excludes near-black left/right padding.

    Only the vertical midpoint row is scanned: the padding this targets is a
    full-height uniform bar. The right bound is exclusive, so a row with
    content in its first and last columns yields the full width. A row
    without any content also yields the full width (left 0, right width).
    """
    pixels = image.pixels if isinstance(image, ImageSample) else np.asarray(image)
    height, width = pixels.shape[0], pixels.shape[1]
    row = pixels[height // 2]

    hits = np.flatnonzero(content_columns(row, threshold))
    left = int(hits[0]) if hits.size else 0
    right = int(hits[-1]) + 1 if hits.size else width

    return CropBounds(left=left, width=right - left, original_width=width, original_height=height)


def detect(path: str, threshold: int = DEFAULT_BLACK_THRESHOLD) -> CropBounds | None:
    """Decode ``path`` and return its crop bounds, or None if it cannot be decoded."""
    try:
        sample = decode_sample(path)
    except AutoCropError as e:
        _logger.info("cannot analyse %s: %s", path, e)
        return None
    bounds = find_crop_bounds(sample, threshold)
    _logger.debug(
        "bounds for %s: left=%d width=%d (of %dx%d)",
        path,
        bounds.left,
        bounds.width,
        bounds.original_width,
        bounds.original_height,
    )
    return bounds
