"""Configuration module using Pydantic Settings.

Usage:
    from querybind.config import DispatchSettings

    settings = DispatchSettings(strict=True)
"""

from querybind.config.settings import DispatchSettings

__all__ = [
    "DispatchSettings",
]
