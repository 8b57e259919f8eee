"""
Settings management for the Kuwahara toolkit.

Reads defaults from settings.ini. Settings are never written back; a
missing file or key falls back to the built-in defaults.
"""

from configparser import ConfigParser
import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..core import DEFAULT_RADIUS
from ..processing.filters import KuwaharaFilter, WINDOW_SELECTION_OPTIONS

logger = logging.getLogger(__name__)


class Settings:
    """Read-only access to settings.ini."""

    # Settings file location (project root), overridable via environment
    SETTINGS_FILE = Path(__file__).parent.parent.parent / "settings.ini"
    ENV_VAR = "KUWAHARA_SETTINGS"

    # Section and keys
    SECTION = "kuwahara"
    KEY_RADIUS = "radius"
    KEY_USE_RGB = "use_rgb_channels"
    KEY_WINDOW_SELECTION = "window_selection"
    KEY_TILE_SIZE = "tile_size"
    KEY_MAX_WORKERS = "max_workers"
    KEY_LOG_LEVEL = "log_level"

    DEFAULT_TILE_SIZE = 256

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """Initialize settings from file, or defaults if it does not exist."""
        self.config = ConfigParser()
        self.path = self._resolve_path(path)
        self._load()

    def _resolve_path(self, path: Optional[Union[str, Path]]) -> Path:
        if path is not None:
            return Path(path)
        env_path = os.environ.get(self.ENV_VAR)
        if env_path:
            return Path(env_path)
        return self.SETTINGS_FILE

    def _load(self) -> None:
        """Load settings from file; ensure the section exists."""
        if self.path.exists():
            self.config.read(self.path)
            logger.debug("Loaded settings from %s", self.path)
        if not self.config.has_section(self.SECTION):
            self.config.add_section(self.SECTION)

    def get_radius(self) -> int:
        """Get default radius (default: 7)."""
        return self._get_int(self.KEY_RADIUS, DEFAULT_RADIUS)

    def get_use_rgb_channels(self) -> bool:
        """Get default channel mode (default: True)."""
        try:
            return self.config.getboolean(self.SECTION, self.KEY_USE_RGB, fallback=True)
        except ValueError:
            logger.warning("Invalid %s in %s, using default", self.KEY_USE_RGB, self.path)
            return True

    def get_window_selection(self) -> str:
        """Get default window selection (default: 'coupled')."""
        value = self.config.get(self.SECTION, self.KEY_WINDOW_SELECTION, fallback="coupled").strip().lower()
        if value not in WINDOW_SELECTION_OPTIONS:
            logger.warning("Unknown %s '%s' in %s, using 'coupled'", self.KEY_WINDOW_SELECTION, value, self.path)
            return "coupled"
        return value

    def get_tile_size(self) -> int:
        """Get tile edge length in pixels (default: 256)."""
        size = self._get_int(self.KEY_TILE_SIZE, self.DEFAULT_TILE_SIZE)
        return size if size > 0 else self.DEFAULT_TILE_SIZE

    def get_max_workers(self) -> Optional[int]:
        """Get worker thread limit; None (or 0 in the file) means automatic."""
        workers = self._get_int(self.KEY_MAX_WORKERS, 0)
        return workers if workers > 0 else None

    def get_log_level(self) -> str:
        """Get log level name (default: 'WARNING')."""
        return self.config.get(self.SECTION, self.KEY_LOG_LEVEL, fallback="WARNING").strip().upper()

    def create_filter(self) -> KuwaharaFilter:
        """Create a Kuwahara filter preloaded with the configured defaults."""
        kuwahara = KuwaharaFilter()
        kuwahara.set_parameter("radius", self.get_radius())
        kuwahara.set_parameter("use_rgb_channels", self.get_use_rgb_channels())
        kuwahara.set_parameter("window_selection", self.get_window_selection())
        return kuwahara

    def _get_int(self, key: str, default: int) -> int:
        try:
            return self.config.getint(self.SECTION, key, fallback=default)
        except ValueError:
            logger.warning("Invalid %s in %s, using default %d", key, self.path, default)
            return default
