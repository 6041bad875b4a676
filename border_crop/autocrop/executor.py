"""Crop executor: turn detected bounds into a corrected file next to the source.

``process_image`` never raises. Every failure is logged and converted into a
``ProcessingResult`` that points back at the original path, with the failure
kind retained so callers can tell "nothing to do" from "crop failed".
"""

import os
import tempfile
import time
from pathlib import Path

from border_crop.autocrop.detector import detect
from border_crop.image_engine.decoder import crop_to_file
from border_crop.image_engine.metrics import metrics
from border_crop.logger import get_logger
from border_crop.models import (
    DEFAULT_CROP_SLACK,
    AutoCropConfig,
    AutoCropError,
    CropBounds,
    FailureKind,
    FileMoveError,
    GallerySaveError,
    Outcome,
    ProcessingResult,
)
from border_crop.ops.file_operations import copy_file, discard_file, move_file
from border_crop.ops.photo_library import PhotoLibrary
from border_crop.path_utils import corrected_path

_logger = get_logger("executor")


def rejection_reason(bounds: CropBounds | None, slack: int = DEFAULT_CROP_SLACK) -> FailureKind | None:
    """Why ``bounds`` must not be cropped, or None when the crop is worthwhile."""
    if bounds is None:
        return FailureKind.DECODE
    if bounds.width <= 0:
        return FailureKind.INVALID_GEOMETRY
    if bounds.width >= bounds.original_width - slack:
        return FailureKind.NO_BORDER
    return None


def should_crop(bounds: CropBounds | None, slack: int = DEFAULT_CROP_SLACK) -> bool:
    return rejection_reason(bounds, slack) is None


def _temp_path(directory: Path, suffix: str) -> str:
    # Same directory as the destination so the final move is a rename
    fd, tmp = tempfile.mkstemp(prefix=".border_crop_", suffix=suffix, dir=str(directory))
    os.close(fd)
    return tmp


def crop_to_bounds(path: str, bounds: CropBounds, config: AutoCropConfig | None = None) -> str:
    """Crop ``path`` to ``bounds`` (full height) and move the result to its corrected name.

    Returns the corrected path. Raises ``AutoCropError`` subclasses on failure;
    no temporary file is left behind.
    """
    config = config or AutoCropConfig()
    out_path = corrected_path(path, config.output_suffix, config.default_extension)
    tmp: str | None = None
    try:
        try:
            tmp = _temp_path(out_path.parent, out_path.suffix)
        except OSError as e:
            raise FileMoveError(f"cannot create temporary file in {out_path.parent}: {e}") from e
        crop_to_file(path, bounds.as_rect(), tmp)
        try:
            move_file(tmp, str(out_path))
        except OSError as e:
            raise FileMoveError(f"cannot move {tmp} to {out_path}: {e}") from e
        tmp = None
    finally:
        discard_file(tmp)
    return str(out_path)


def save_to_library(path: str, library: PhotoLibrary, album: str | None = None) -> str:
    """Store a copy of ``path`` in the photo library and return the library URI.

    The library is fed a temporary copy, which is deleted afterwards. Raises
    ``GallerySaveError`` on failure.
    """
    ext = Path(path).suffix or ".jpg"
    tmp: str | None = None
    try:
        try:
            fd, tmp = tempfile.mkstemp(prefix=f"{time.time_ns()}_", suffix=ext)
            os.close(fd)
            copy_file(path, tmp)
        except OSError as e:
            raise GallerySaveError(f"cannot stage {path} for the library: {e}") from e
        return library.save(tmp, media_type="photo", album=album)
    finally:
        discard_file(tmp)


def _record(result: ProcessingResult) -> None:
    metrics.inc(f"autocrop.{result.outcome.value}")
    if result.failed:
        metrics.inc(f"autocrop.failed.{result.failure.value}")


def _process(path: str, config: AutoCropConfig, library: PhotoLibrary | None) -> ProcessingResult:
    bounds = detect(path, threshold=config.black_threshold)
    reason = rejection_reason(bounds, config.crop_slack)
    if reason is FailureKind.DECODE:
        return ProcessingResult.unchanged(path, failure=reason)
    if reason is not None:
        _logger.info("no significant black border detected: %s", path)
        return ProcessingResult.unchanged(path, failure=reason, bounds=bounds)

    _logger.debug("new bounds for %s: left=%d width=%d", path, bounds.left, bounds.width)
    try:
        new_path = crop_to_bounds(path, bounds, config)
    except AutoCropError as e:
        _logger.error("automatic correction failed for %s: %s", path, e)
        return ProcessingResult.unchanged(path, failure=e.kind, bounds=bounds)
    _logger.info("corrected image saved to: %s", new_path)

    gallery_uri = None
    failure = None
    if library is not None:
        # The corrected file exists from here on; a library failure must not lose it
        try:
            gallery_uri = save_to_library(new_path, library, config.album_name)
        except Exception as e:
            _logger.error("saving to the photo library failed for %s: %s", new_path, e)
            failure = FailureKind.GALLERY_SAVE
    return ProcessingResult(
        source=path,
        path=new_path,
        outcome=Outcome.CROPPED,
        failure=failure,
        bounds=bounds,
        gallery_uri=gallery_uri,
    )


def process_image(
    path: str, config: AutoCropConfig | None = None, library: PhotoLibrary | None = None
) -> ProcessingResult:
    """Detect and crop near-black left/right padding of one image.

    Returns a result whose ``path`` is the corrected file, or ``path`` itself
    when nothing was cropped.
    """
    config = config or AutoCropConfig()
    with metrics.timed("autocrop.process"):
        try:
            result = _process(path, config, library)
        except Exception as e:  # keep callers resilient
            _logger.exception("unexpected error processing %s: %s", path, e)
            result = ProcessingResult.unchanged(path, failure=FailureKind.CROP_OPERATION)
    _record(result)
    return result
