"""Image decoder using pyvips.

Decodes files into RGBA ``ImageSample`` buffers for border detection and
provides the rectangle crop used by the executor.
"""

import contextlib
from typing import Any

import numpy as np

from border_crop.logger import get_logger
from border_crop.models import RGB_CHANNELS, RGBA_CHANNELS, CropOperationError, DecodeError, ImageSample
from border_crop.path_utils import strip_file_scheme

_logger = get_logger("decoder")

_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        _pyvips = pyvips
        # Configure pyvips caches to avoid memory growth across a batch
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
    return _pyvips


def _to_rgba(image: Any) -> Any:
    with contextlib.suppress(Exception):
        image = image.colourspace("srgb")
    if image.format != "uchar":
        image = image.cast("uchar")
    colour_bands = image.bands - 1 if image.hasalpha() else image.bands
    if colour_bands < RGB_CHANNELS:
        # mono or mono+alpha: replicate the grey band
        grey = image.extract_band(0)
        rgb = grey.bandjoin([grey] * (RGB_CHANNELS - 1))
        image = rgb.bandjoin(image.extract_band(1)) if image.hasalpha() else rgb
    elif colour_bands > RGB_CHANNELS:
        alpha = image.extract_band(image.bands - 1) if image.hasalpha() else None
        image = image.extract_band(0, n=RGB_CHANNELS)
        if alpha is not None:
            image = image.bandjoin(alpha)
    if image.bands == RGB_CHANNELS:
        image = image.bandjoin(255)
    return image


def decode_sample(file_path: str) -> ImageSample:
    """Decode an image file into an RGBA sample.

    Raises ``DecodeError`` when the file cannot be read or decoded.
    """
    path = strip_file_scheme(file_path)
    try:
        pyvips = _get_pyvips_module()
        image = pyvips.Image.new_from_file(path, access="sequential")
        image = _to_rgba(image)
        mem = image.write_to_memory()
        array = np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, image.bands)
    except Exception as e:
        _logger.debug("decode failed: %s: %s", path, e)
        raise DecodeError(f"cannot decode {path}: {e}") from e
    if array.shape[2] != RGBA_CHANNELS:
        raise DecodeError(f"unsupported band count after conversion: {array.shape[2]}")
    return ImageSample(width=array.shape[1], height=array.shape[0], pixels=array)


def crop_to_file(src: str, rect: tuple[int, int, int, int], out_path: str) -> str:
    """Write the ``(left, top, width, height)`` region of ``src`` to ``out_path``.

    The output format follows the extension of ``out_path``. Raises
    ``CropOperationError`` on failure.
    """
    left, top, width, height = rect
    path = strip_file_scheme(src)
    try:
        pyvips = _get_pyvips_module()
        image = pyvips.Image.new_from_file(path)
        cropped = image.crop(left, top, width, height)
        cropped.write_to_file(out_path)
    except Exception as e:
        _logger.debug("crop failed: %s %s: %s", path, rect, e)
        raise CropOperationError(f"cannot crop {path} to {rect}: {e}") from e
    return out_path
