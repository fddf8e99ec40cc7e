"""assetwatch: keep compiled shaders and generated asset references in sync with a project tree."""

__version__ = "0.1.0"

from assetwatch.config import Settings, load_settings
from assetwatch.errors import (
    AssetWatchError,
    ConfigurationError,
    GeneratedFileWriteError,
    IdentifierCollisionError,
)
from assetwatch.sync import AssetSynchronizer

__all__ = [
    "AssetSynchronizer",
    "AssetWatchError",
    "ConfigurationError",
    "GeneratedFileWriteError",
    "IdentifierCollisionError",
    "Settings",
    "load_settings",
]
