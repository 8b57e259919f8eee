"""OpenImageIO boundary for the Kuwahara toolkit."""

from .adapter import OiioAdapter

__all__ = ["OiioAdapter"]
