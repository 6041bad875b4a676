"""Unit tests for the pure border scan (no filesystem or codec involved)."""

import numpy as np
import pytest

from border_crop.autocrop.detector import content_columns, find_crop_bounds
from border_crop.autocrop.executor import should_crop
from border_crop.models import DEFAULT_BLACK_THRESHOLD, CropBounds, ImageSample
from tests.image_helpers import banded_array


def test_black_bands_on_both_sides():
    arr = banded_array(1000, 600, left=50, right=50)

    bounds = find_crop_bounds(ImageSample.from_array(arr))

    assert bounds == CropBounds(left=50, width=900, original_width=1000, original_height=600)
    assert bounds.right == 950
    assert should_crop(bounds)


def test_uniform_gray_is_full_width():
    arr = np.full((500, 500, 3), 100, dtype=np.uint8)

    bounds = find_crop_bounds(arr)

    assert (bounds.left, bounds.width) == (0, 500)
    assert not should_crop(bounds)


def test_all_black_row_falls_back_to_full_width():
    arr = np.zeros((40, 64, 3), dtype=np.uint8)

    bounds = find_crop_bounds(arr)

    assert (bounds.left, bounds.width) == (0, 64)
    assert not should_crop(bounds)


def test_content_at_both_edges_is_full_width():
    arr = np.zeros((10, 30, 3), dtype=np.uint8)
    arr[5, 0] = (200, 0, 0)
    arr[5, 29] = (0, 0, 200)

    bounds = find_crop_bounds(arr)

    assert (bounds.left, bounds.width) == (0, 30)


@pytest.mark.parametrize(
    ("left", "right"),
    [(0, 0), (1, 0), (0, 3), (17, 5), (100, 100), (3, 190)],
)
def test_band_widths_are_recovered(left, right):
    width = 300
    arr = banded_array(width, 21, left=left, right=right, fill=200, band=DEFAULT_BLACK_THRESHOLD)

    bounds = find_crop_bounds(arr)

    assert bounds.left == left
    assert bounds.width == width - left - right


def test_threshold_is_exclusive():
    arr = banded_array(50, 10, left=5, right=5, fill=31, band=30)
    assert find_crop_bounds(arr).left == 5

    # Raising the threshold turns the 31-valued content into border too
    bounds = find_crop_bounds(arr, threshold=31)
    assert (bounds.left, bounds.width) == (0, 50)


def test_single_channel_above_threshold_is_content():
    arr = np.zeros((3, 10, 3), dtype=np.uint8)
    arr[1, 4] = (0, 0, 31)

    bounds = find_crop_bounds(arr)

    assert (bounds.left, bounds.width) == (4, 1)


def test_only_the_middle_row_is_scanned():
    arr = np.zeros((100, 80, 3), dtype=np.uint8)
    # Content in the top half only; the middle row (50) stays black
    arr[:50, 10:70] = 255

    assert find_crop_bounds(arr).width == 80

    arr[50, 20:40] = 255
    bounds = find_crop_bounds(arr)
    assert (bounds.left, bounds.width) == (20, 20)


def test_odd_height_scans_floor_midpoint():
    arr = np.zeros((5, 12, 3), dtype=np.uint8)
    arr[2, 3:9] = 90

    assert find_crop_bounds(arr).left == 3


def test_alpha_channel_is_ignored():
    rgba = np.zeros((4, 20, 4), dtype=np.uint8)
    rgba[..., 3] = 255
    rgba[:, 6:14, :3] = 120
    rgba[:, 6:14, 3] = 0

    bounds = find_crop_bounds(ImageSample.from_array(rgba))

    assert (bounds.left, bounds.width) == (6, 8)


def test_sample_from_rgba_bytes():
    width, height = 8, 3
    data = bytearray(width * height * 4)
    mid = height // 2
    for x in range(2, 6):
        offset = (mid * width + x) * 4
        data[offset : offset + 4] = bytes((128, 128, 128, 255))

    sample = ImageSample.from_rgba_bytes(width, height, bytes(data))
    bounds = find_crop_bounds(sample)

    assert (bounds.left, bounds.width) == (2, 4)
    assert (bounds.original_width, bounds.original_height) == (8, 3)


def test_sample_is_read_only():
    sample = ImageSample.from_array(np.zeros((2, 2, 3), dtype=np.uint8))
    with pytest.raises(ValueError):
        sample.pixels[0, 0, 0] = 1


def test_sample_rejects_mismatched_buffer():
    with pytest.raises(ValueError):
        ImageSample.from_rgba_bytes(4, 4, b"\x00" * 10)
    with pytest.raises(ValueError):
        ImageSample.from_array(np.zeros((4, 4), dtype=np.uint8))


def test_content_columns_mask():
    row = np.array([[0, 0, 0], [31, 0, 0], [30, 30, 30], [0, 200, 0]], dtype=np.uint8)
    assert content_columns(row).tolist() == [False, True, False, True]
