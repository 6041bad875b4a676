"""Path normalization utilities.

This module centralizes the project's path rules:

- Use absolute paths when interacting with the filesystem.
- Accept ``file://`` URIs wherever a path is expected.
- Derive the output name of a corrected image from its source.

Keep this module free of Qt and imaging dependencies.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

_FILE_SCHEME = "file://"


def strip_file_scheme(path: str | Path) -> str:
    """Return a plain filesystem path for a path or ``file://`` URI."""
    text = str(path)
    if text.startswith(_FILE_SCHEME):
        return unquote(urlparse(text).path)
    return text


def abs_path(path: str | Path) -> Path:
    """Return an absolute path without requiring that it exists."""
    p = Path(strip_file_scheme(path)).expanduser()
    try:
        # strict=False avoids exceptions for non-existent paths.
        return p.resolve(strict=False)
    except OSError:
        return p.absolute()


def corrected_path(source: str | Path, suffix: str = "_corrected", default_extension: str = "jpg") -> Path:
    """Path of the corrected copy of ``source``, in the same directory.

    ``photo.png`` becomes ``photo_corrected.png``; a source without an
    extension gets ``default_extension``.
    """
    src = Path(strip_file_scheme(source))
    ext = src.suffix or "." + default_extension.lstrip(".")
    stem = src.stem if src.suffix else src.name
    return src.with_name(f"{stem}{suffix}{ext}")
