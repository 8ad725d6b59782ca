"""
yt-sync: Keep local folders in sync with YouTube playlists.

Each configured playlist is compared against its local directory and only
the items that are not there yet are downloaded, through yt-dlp. An .m3u
index listing every synced file in playlist order can be written next to
each directory.

Architecture:
    core/         - Configuration, models, logging, exceptions
    acquisition/  - yt-dlp subprocess client (listing and fetching)
    sync/         - Directory snapshot, .m3u index, synchronizer
    utils/        - Filename sanitization and naming
    cli.py        - Command-line interface

Usage:
    Command Line:
        yt-sync                                   # sync all configured playlists
        yt-sync --playlist-id PLxxxx --location ~/Music/mix --format audio

    Python API:
        from yt_sync.core import load_or_create_config, setup_logging
        from yt_sync.acquisition import YtDlpClient
        from yt_sync.sync import Synchronizer

        config = load_or_create_config(path)
        setup_logging(config.log_directory)
        client = YtDlpClient(config.downloader.executable, config.downloader.cookie_file)
        report = Synchronizer(client).sync_all(config.playlists)

Dependencies:
    - yt-dlp: Playlist listing and media download (run as a subprocess)
    - click / rich-click: CLI framework and colors
    - pyyaml: Configuration file parsing
    - tqdm: Progress bars
"""

__version__ = "0.1.0"
__author__ = "yt-sync"
__license__ = "MIT"

from yt_sync.core import (
    Config,
    ConfigError,
    DirectoryError,
    IndexWriteError,
    ListingError,
    MediaFormat,
    RemoteItem,
    SyncError,
    SyncTarget,
    YtSyncError,
    get_logger,
    load_or_create_config,
    setup_logging,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_or_create_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "YtSyncError",
    "ConfigError",
    "SyncError",
    "DirectoryError",
    "ListingError",
    "IndexWriteError",
    # Models
    "MediaFormat",
    "RemoteItem",
    "SyncTarget",
]
