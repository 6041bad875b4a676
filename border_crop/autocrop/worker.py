"""Qt worker that runs an auto-crop batch off the GUI thread.

Typical use::

    thread = QThread()
    worker = AutoCropBatchWorker(paths, config)
    worker.moveToThread(thread)
    thread.started.connect(worker.run)
    worker.finished.connect(thread.quit)
    thread.start()
"""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal, Slot

from border_crop.autocrop.batch import Processor, make_processor, run_one
from border_crop.logger import get_logger
from border_crop.models import AutoCropConfig, BatchReport, ProcessingResult
from border_crop.ops.photo_library import PhotoLibrary

_logger = get_logger("worker")


class AutoCropBatchWorker(QObject):
    progress = Signal(float)  # done / total, emitted once per item
    item_done = Signal(str, str)  # source path, resulting path
    finished = Signal(object)  # BatchReport

    def __init__(
        self,
        paths: list[str],
        config: AutoCropConfig | None = None,
        library: PhotoLibrary | None = None,
        processor: Processor | None = None,
    ):
        super().__init__()
        self.paths = list(paths)
        self._processor = processor or make_processor(config, library)
        self._stop_requested = False
        self.results: list[ProcessingResult] = []
        self.report = BatchReport()

    def stop(self) -> None:
        """Request the batch to stop; the item in flight is allowed to finish."""
        self._stop_requested = True

    @Slot()
    def run(self) -> None:
        try:
            total = len(self.paths)
            for idx, path in enumerate(self.paths, start=1):
                if self._stop_requested:
                    _logger.debug("batch stopped after %d of %d", idx - 1, total)
                    break
                result = run_one(self._processor, path)
                self.results.append(result)
                self.report.add(result)
                self.item_done.emit(path, result.path)
                self.progress.emit(idx / total)
        finally:
            self.finished.emit(self.report)
