"""Version information."""

from datetime import datetime
import os

from . import __version__

GIT_COMMIT = "labelwrap"
BUILD_DATE = os.getenv("LABELWRAP_BUILD_DATE") or datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def get_version_info() -> str:
    """Formatted version line, e.g. ``v0.6.0 (labelwrap) - 2024-05-01 10:00:00``."""
    return f"v{__version__} ({GIT_COMMIT}) - {BUILD_DATE}"
