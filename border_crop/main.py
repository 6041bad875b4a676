import argparse
import dataclasses
import os
import sys
from pathlib import Path

from border_crop.autocrop.batch import make_processor, process_all_results
from border_crop.image_engine.metrics import metrics
from border_crop.logger import get_logger
from border_crop.models import BatchReport
from border_crop.ops.photo_library import PhotoLibrary, is_valid_album_name
from border_crop.settings_manager import SettingsManager

_DEFAULT_SETTINGS = Path.home() / ".border_crop" / "settings.json"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="border-crop", description="Crop near-black padding from the left/right edges of images."
    )
    parser.add_argument("paths", nargs="+", help="Image files, processed in order")
    parser.add_argument("--settings", default=str(_DEFAULT_SETTINGS), help="Settings JSON file")
    parser.add_argument("--threshold", type=int, help="Black threshold (0-255), overrides settings")
    parser.add_argument("--library", help="Photo library directory to also save corrected images into")
    parser.add_argument("--album", help="Album name inside the photo library")
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    return parser


def run(argv: list[str] | None = None) -> int:
    """Command-line entrypoint: prints one resulting path per input path."""
    if argv is None:
        argv = sys.argv
    args = _build_parser().parse_args(argv[1:])

    # Logging options go through the environment so every child logger sees them
    if args.log_level:
        os.environ["BORDER_CROP_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["BORDER_CROP_LOG_CATS"] = args.log_cats
    logger = get_logger("main")

    settings = SettingsManager(args.settings)
    config = settings.autocrop_config()
    overrides = {}
    if args.threshold is not None:
        if not 0 <= args.threshold <= 255:
            logger.error("threshold out of range (0-255): %d", args.threshold)
            return 2
        overrides["black_threshold"] = args.threshold
    if args.album:
        if not is_valid_album_name(args.album):
            logger.error("invalid album name: %r", args.album)
            return 2
        overrides["album_name"] = args.album
    if overrides:
        config = dataclasses.replace(config, **overrides)

    library_dir = args.library or settings.library_dir
    library = PhotoLibrary(library_dir) if library_dir else None

    def _on_progress(fraction: float) -> None:
        logger.info("progress: %d%%", round(fraction * 100))

    report = BatchReport()
    results = process_all_results(args.paths, _on_progress, make_processor(config, library), report=report)
    for result in results:
        print(result.path)

    if report.failed:
        print("Some images could not be corrected automatically.", file=sys.stderr)
    logger.info("done: %d cropped, %d unchanged, %d failed", report.cropped, report.unchanged, report.failed)
    timing = metrics.timing("autocrop.process")
    if timing.count:
        logger.debug("per image: mean %.3fs, max %.3fs", timing.mean, timing.max)
    return 0


if __name__ == "__main__":
    sys.exit(run())
