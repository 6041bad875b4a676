"""Sequential batch driver.

Images are processed one at a time so at most one decoded buffer is alive;
``results[i]`` always corresponds to ``paths[i]``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from border_crop.autocrop.executor import process_image
from border_crop.logger import get_logger
from border_crop.models import AutoCropConfig, BatchReport, FailureKind, ProcessingResult
from border_crop.ops.photo_library import PhotoLibrary

_logger = get_logger("batch")

ProgressCallback = Callable[[float], None]
Processor = Callable[[str], ProcessingResult]


def make_processor(config: AutoCropConfig | None = None, library: PhotoLibrary | None = None) -> Processor:
    def _processor(path: str) -> ProcessingResult:
        return process_image(path, config=config, library=library)

    return _processor


def run_one(processor: Processor, path: str) -> ProcessingResult:
    """Run ``processor`` on one path; anything it raises becomes an unchanged result."""
    try:
        return processor(path)
    except Exception as e:  # keep the batch resilient
        _logger.exception("processing %s failed: %s", path, e)
        return ProcessingResult.unchanged(path, failure=FailureKind.CROP_OPERATION)


def process_all_results(
    paths: Sequence[str],
    on_progress: ProgressCallback | None = None,
    processor: Processor | None = None,
    report: BatchReport | None = None,
) -> list[ProcessingResult]:
    """Process ``paths`` in order and return one result per input.

    ``on_progress`` is called once after each item with ``done / total``.
    """
    processor = processor or make_processor()
    results: list[ProcessingResult] = []
    total = len(paths)
    for index, path in enumerate(paths, start=1):
        result = run_one(processor, path)
        results.append(result)
        if report is not None:
            report.add(result)
        if on_progress is not None:
            on_progress(index / total)
    _logger.debug("batch complete: %d images", total)
    return results


def process_all(
    paths: Sequence[str],
    on_progress: ProgressCallback | None = None,
    config: AutoCropConfig | None = None,
    library: PhotoLibrary | None = None,
) -> list[str]:
    """Process ``paths`` in order and return the path to use for each one."""
    results = process_all_results(paths, on_progress, make_processor(config, library))
    return [r.path for r in results]
