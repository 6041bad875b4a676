"""Value types shared by the border detector, crop executor and batch driver."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np

RGB_CHANNELS = 3
RGBA_CHANNELS = 4


@dataclass(frozen=True, eq=False)
class ImageSample:
    """A decoded raster: ``pixels`` is a read-only (height, width, 4) uint8 array."""

    width: int
    height: int
    pixels: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid sample size {self.width}x{self.height}")
        if self.pixels.shape != (self.height, self.width, RGBA_CHANNELS):
            raise ValueError(f"pixel buffer shape {self.pixels.shape} does not match {self.width}x{self.height} RGBA")
        self.pixels.flags.writeable = False

    @classmethod
    def from_rgba_bytes(cls, width: int, height: int, data: bytes | bytearray | memoryview) -> ImageSample:
        """Wrap a row-major, top-to-bottom RGBA byte buffer."""
        arr = np.frombuffer(data, dtype=np.uint8)
        expected = width * height * RGBA_CHANNELS
        if arr.size != expected:
            raise ValueError(f"expected {expected} bytes for {width}x{height} RGBA, got {arr.size}")
        return cls(width, height, arr.reshape(height, width, RGBA_CHANNELS).copy())

    @classmethod
    def from_array(cls, array: np.ndarray) -> ImageSample:
        """Build a sample from an (H, W, 3) or (H, W, 4) uint8 array; RGB gets opaque alpha."""
        arr = np.asarray(array, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] not in (RGB_CHANNELS, RGBA_CHANNELS):
            raise ValueError(f"unexpected image array shape {arr.shape}")
        if arr.shape[2] == RGB_CHANNELS:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        height, width = arr.shape[0], arr.shape[1]
        return cls(width, height, np.ascontiguousarray(arr).copy())


@dataclass(frozen=True)
class CropBounds:
    """Horizontal window to keep; the vertical extent is always the full height.

    ``width`` may be zero or negative for a degenerate scan; the executor
    rejects such bounds before cropping.
    """

    left: int
    width: int
    original_width: int
    original_height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    def as_rect(self) -> tuple[int, int, int, int]:
        """(left, top, width, height), as taken by ``pyvips.Image.crop``."""
        return self.left, 0, self.width, self.original_height


class Outcome(enum.Enum):
    CROPPED = "cropped"
    UNCHANGED = "unchanged"


class FailureKind(enum.Enum):
    DECODE = "decode"
    NO_BORDER = "no_border"
    INVALID_GEOMETRY = "invalid_geometry"
    CROP_OPERATION = "crop_operation"
    FILE_MOVE = "file_move"
    GALLERY_SAVE = "gallery_save"

    @property
    def is_error(self) -> bool:
        return self not in (FailureKind.NO_BORDER, FailureKind.INVALID_GEOMETRY)


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one image; ``path`` is what the caller should use from now on."""

    source: str
    path: str
    outcome: Outcome
    failure: FailureKind | None = None
    bounds: CropBounds | None = None
    gallery_uri: str | None = None

    @property
    def cropped(self) -> bool:
        return self.outcome is Outcome.CROPPED

    @property
    def failed(self) -> bool:
        return self.failure is not None and self.failure.is_error

    @classmethod
    def unchanged(cls, source: str, failure: FailureKind | None = None, bounds: CropBounds | None = None) -> ProcessingResult:
        return cls(source=source, path=source, outcome=Outcome.UNCHANGED, failure=failure, bounds=bounds)


@dataclass
class BatchReport:
    """Per-batch summary, used for a single notification per user action."""

    total: int = 0
    cropped: int = 0
    unchanged: int = 0
    failed: int = 0

    def add(self, result: ProcessingResult) -> None:
        self.total += 1
        if result.cropped:
            self.cropped += 1
        else:
            self.unchanged += 1
        if result.failed:
            self.failed += 1


class AutoCropError(Exception):
    """Base class for failures raised by auto-crop collaborators."""

    kind: FailureKind = FailureKind.CROP_OPERATION


class DecodeError(AutoCropError):
    kind = FailureKind.DECODE


class CropOperationError(AutoCropError):
    kind = FailureKind.CROP_OPERATION


class FileMoveError(AutoCropError):
    kind = FailureKind.FILE_MOVE


class GallerySaveError(AutoCropError):
    kind = FailureKind.GALLERY_SAVE


# Channel values at or below this (0-255) count as black; absorbs JPEG noise.
DEFAULT_BLACK_THRESHOLD = 30
DEFAULT_CROP_SLACK = 2
DEFAULT_OUTPUT_SUFFIX = "_corrected"
DEFAULT_EXTENSION = "jpg"
DEFAULT_ALBUM = "BorderCrop"


@dataclass(frozen=True)
class AutoCropConfig:
    """Tunables for one auto-crop run.

    ``black_threshold``: channel values at or below it count as black (0-255).
    ``crop_slack``: detected widths within this many pixels of the original
    width are treated as noise and not cropped.
    """

    black_threshold: int = DEFAULT_BLACK_THRESHOLD
    crop_slack: int = DEFAULT_CROP_SLACK
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    default_extension: str = DEFAULT_EXTENSION
    album_name: str | None = DEFAULT_ALBUM
