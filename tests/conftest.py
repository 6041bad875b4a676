"""Pytest configuration.

The batch worker tests use PySide6 signals. We create a single
`QCoreApplication` for the whole session as early as possible and shut it
down cleanly at the end.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from border_crop.image_engine.metrics import metrics

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QCoreApplication exists before collecting/running tests."""

    # Import lazily so environments without Qt can still run the other tests.
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    global _APP

    app = QCoreApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QCoreApplication([])


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    app = QCoreApplication.instance()
    if app is None:
        return
    app.quit()
    app.processEvents()


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield


@pytest.fixture
def write_image(tmp_path: Path):
    """Write a numpy array to ``tmp_path/name`` with Pillow and return the path."""
    image_mod = pytest.importorskip("PIL.Image")

    def _write(arr, name: str = "image.png") -> str:
        path = tmp_path / name
        image_mod.fromarray(arr).save(path)
        return str(path)

    return _write
