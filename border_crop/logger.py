import logging
import os
import sys

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setup_logger(level: int = logging.INFO, name: str = "border_crop") -> logging.Logger:
    """Create or update the project logger.

    - Respects env overrides BORDER_CROP_LOG_LEVEL/BORDER_CROP_LOG_CATS on every call
      (so late CLI parsing can still take effect).
    - Ensures there is exactly one stderr StreamHandler on the base logger and updates
      its formatter/filters instead of bailing out early.
    """
    logger = logging.getLogger(name)

    env_level = (os.getenv("BORDER_CROP_LOG_LEVEL") or "").strip().lower()
    if env_level:
        level = _LEVELS.get(env_level, level)
    logger.setLevel(level)

    stream_handler: logging.StreamHandler | None = None
    for h in list(logger.handlers):
        if type(h) is not logging.StreamHandler:
            continue
        if getattr(h, "stream", None) is sys.stderr and stream_handler is None:
            stream_handler = h
        else:
            # Left over from an earlier sys.stderr (capture, host redirect)
            logger.removeHandler(h)

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(stream_handler)

    # Do not include the full logger name in messages to keep output concise
    fmt = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    stream_handler.setFormatter(fmt)

    stream_handler.filters.clear()
    cats = (os.getenv("BORDER_CROP_LOG_CATS") or "").strip()
    if cats:
        allowed = {c.strip() for c in cats.split(",") if c.strip()}

        class _CategoryFilter(logging.Filter):
            def filter(self, record: logging.LogRecord) -> bool:
                # record.name like: border_crop.detector, border_crop.executor
                parts = (record.name or "").split(".")
                suffix = parts[-1] if parts else record.name
                return suffix in allowed

        stream_handler.addFilter(_CategoryFilter())

    # Do not propagate beyond the project logger
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = setup_logger()
    return base if not name else base.getChild(name)
