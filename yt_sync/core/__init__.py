"""
Core module for yt-sync.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - models: MediaFormat, SyncTarget and RemoteItem
    - config: Configuration loading, validation and default creation
    - logger: Logging system with multiple outputs

Usage:
    from yt_sync.core import (
        Config, load_or_create_config,
        setup_logging, get_logger,
        YtSyncError, ConfigError, SyncError
    )
"""

from yt_sync.core.config import (
    DEFAULT_CONFIG_PATH,
    Config,
    DownloaderConfig,
    load_config,
    load_or_create_config,
    parse_media_format,
)
from yt_sync.core.exceptions import (
    ConfigError,
    DirectoryError,
    IndexWriteError,
    ListingError,
    SyncError,
    YtSyncError,
)
from yt_sync.core.logger import (
    get_logger,
    log_fetch_failure,
    setup_logging,
    shutdown_logging,
)
from yt_sync.core.models import MediaFormat, RemoteItem, SyncTarget

__all__ = [
    # Config
    "DEFAULT_CONFIG_PATH",
    "Config",
    "DownloaderConfig",
    "load_config",
    "load_or_create_config",
    "parse_media_format",
    # Exceptions
    "YtSyncError",
    "ConfigError",
    "SyncError",
    "DirectoryError",
    "ListingError",
    "IndexWriteError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_fetch_failure",
    "shutdown_logging",
    # Models
    "MediaFormat",
    "RemoteItem",
    "SyncTarget",
]
