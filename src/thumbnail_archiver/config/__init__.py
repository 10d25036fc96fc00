"""Configuration package for the thumbnail archiver.

Re-exports the settings symbols so that callers can write::

    from thumbnail_archiver.config import get_settings
"""

from __future__ import annotations

from thumbnail_archiver.config.settings import Settings, get_settings, load_settings

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
]
