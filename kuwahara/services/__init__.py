"""Services module initialization."""
from .settings import Settings
from .tile_runner import AtomicProgress, TileRunner
from .log import configure_logging

__all__ = ["Settings", "AtomicProgress", "TileRunner", "configure_logging"]
