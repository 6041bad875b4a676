from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger
from .models import (
    DEFAULT_ALBUM,
    DEFAULT_BLACK_THRESHOLD,
    DEFAULT_CROP_SLACK,
    DEFAULT_EXTENSION,
    DEFAULT_OUTPUT_SUFFIX,
    AutoCropConfig,
)
from .ops.photo_library import is_valid_album_name

_logger = get_logger("settings")

_MAX_CHANNEL = 255


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "black_threshold": DEFAULT_BLACK_THRESHOLD,
        "crop_slack": DEFAULT_CROP_SLACK,
        "output_suffix": DEFAULT_OUTPUT_SUFFIX,
        "default_extension": DEFAULT_EXTENSION,
        "album_name": DEFAULT_ALBUM,
        "library_dir": None,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def library_dir(self) -> str | None:
        val = self.get("library_dir")
        return val if isinstance(val, str) and val else None

    def _int_setting(self, key: str, low: int, high: int) -> int:
        val = self.get(key)
        if isinstance(val, int) and not isinstance(val, bool) and low <= val <= high:
            return val
        _logger.warning("invalid %s in settings: %r, using default", key, val)
        return self.DEFAULTS[key]

    def _str_setting(self, key: str) -> str:
        val = self.get(key)
        if isinstance(val, str) and val and os.sep not in val:
            return val
        _logger.warning("invalid %s in settings: %r, using default", key, val)
        return self.DEFAULTS[key]

    def _album_setting(self) -> str | None:
        val = self.get("album_name")
        if val is None or val == "":
            return None
        if isinstance(val, str) and is_valid_album_name(val):
            return val
        _logger.warning("invalid album_name in settings: %r, using default", val)
        return self.DEFAULTS["album_name"]

    def autocrop_config(self) -> AutoCropConfig:
        """Build the auto-crop tunables, falling back to defaults for invalid values."""
        album = self._album_setting()
        return AutoCropConfig(
            black_threshold=self._int_setting("black_threshold", 0, _MAX_CHANNEL),
            crop_slack=self._int_setting("crop_slack", 0, 1 << 16),
            output_suffix=self._str_setting("output_suffix"),
            default_extension=self._str_setting("default_extension").lstrip("."),
            album_name=album,
        )
