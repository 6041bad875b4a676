"""Auto-crop package public API.

Expose the border detector, crop executor and batch driver as
`border_crop.autocrop`. The Qt batch worker lives in
`border_crop.autocrop.worker` and is imported separately.
"""

from border_crop.autocrop.batch import process_all, process_all_results
from border_crop.autocrop.detector import detect, find_crop_bounds
from border_crop.autocrop.executor import crop_to_bounds, process_image, should_crop

__all__ = [
    "crop_to_bounds",
    "detect",
    "find_crop_bounds",
    "process_all",
    "process_all_results",
    "process_image",
    "should_crop",
]
