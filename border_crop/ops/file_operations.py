"""Common file operation utilities.

Headless move/copy/delete helpers used by the crop executor and the photo
library. Failures are logged and re-raised; callers decide how to recover.
"""

import contextlib
import os
import shutil
from pathlib import Path

from border_crop.logger import get_logger
from border_crop.path_utils import abs_path

_logger = get_logger("file_operations")


def generate_unique_filename(dest_dir: str, filename: str) -> str:
    """Return a path in ``dest_dir`` for ``filename`` that does not exist yet.

    Existing names get a `` (n)`` counter before the extension.
    """
    dest = Path(dest_dir) / filename
    if not dest.exists():
        return str(dest)
    stem = dest.stem
    suffix = dest.suffix
    counter = 1
    while dest.exists():
        dest = Path(dest_dir) / f"{stem} ({counter}){suffix}"
        counter += 1

    return str(dest)


def copy_file(src: str, target: str) -> str:
    """Copy ``src`` to the exact path ``target`` (overwriting it).

    Raises:
        OSError: If copy fails
    """
    _logger.debug("copying file: %s -> %s", src, target)
    try:
        shutil.copy2(src, target)
        _logger.debug("copy success: %s -> %s", src, target)
        return target
    except OSError as e:
        _logger.error("copy failed: %s -> %s, error: %s", src, target, e)
        raise


def move_file(src: str, target: str) -> str:
    """Move ``src`` to the exact path ``target``, replacing an existing file.

    A rename is atomic on the same volume; across volumes this degrades to
    copy then delete.

    Raises:
        OSError: If move fails
    """
    src_path = abs_path(src)
    target_path = abs_path(target)
    _logger.debug("moving file: %s -> %s", src_path, target_path)
    try:
        os.replace(src_path, target_path)
    except OSError as e:
        _logger.debug("rename failed (%s), falling back to copy+delete", e)
        try:
            shutil.copy2(src_path, target_path)
        except OSError as copy_err:
            _logger.error("move failed: %s -> %s, error: %s", src_path, target_path, copy_err)
            raise
        discard_file(str(src_path))
    _logger.debug("move success: %s -> %s", src_path, target_path)
    return str(target_path)


def discard_file(path: str | None) -> None:
    """Best-effort delete of a temporary file; never raises."""
    if not path:
        return
    with contextlib.suppress(OSError):
        Path(path).unlink(missing_ok=True)
