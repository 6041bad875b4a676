"""Photo library collaborator.

A library is a directory tree: each album is a sub-directory of the library
root and saved assets are copied into it under a unique name. ``save`` returns
a ``file://`` URI for the stored asset.
"""

from __future__ import annotations

from pathlib import Path

from border_crop.logger import get_logger
from border_crop.models import GallerySaveError
from border_crop.ops.file_operations import copy_file, generate_unique_filename
from border_crop.path_utils import abs_path, strip_file_scheme

_logger = get_logger("photo_library")

MEDIA_TYPES = ("photo", "video")


def is_valid_album_name(album: str) -> bool:
    """A single, non-empty directory name: no separators, NUL or dot entries."""
    if not album or "\x00" in album or "/" in album or "\\" in album:
        return False
    return album not in (".", "..") and Path(album).name == album


class PhotoLibrary:
    def __init__(self, root: str | Path):
        self.root = abs_path(root)

    def album_dir(self, album: str | None) -> Path:
        if not album:
            return self.root
        if not is_valid_album_name(album):
            raise GallerySaveError(f"invalid album name: {album!r}")
        return self.root / album

    def save(self, path: str, media_type: str = "photo", album: str | None = None) -> str:
        """Copy ``path`` into the library (optionally into ``album``) and return its URI.

        Raises ``GallerySaveError`` on any failure.
        """
        if media_type not in MEDIA_TYPES:
            raise GallerySaveError(f"unsupported media type: {media_type!r}")
        src = Path(strip_file_scheme(path))
        if not src.is_file():
            raise GallerySaveError(f"no such file: {src}")
        dest_dir = self.album_dir(album)
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            target = copy_file(str(src), generate_unique_filename(str(dest_dir), src.name))
        except (OSError, ValueError) as e:
            raise GallerySaveError(f"cannot save {src} to library {dest_dir}: {e}") from e
        uri = Path(target).as_uri()
        _logger.info("saved to library: %s", uri)
        return uri
