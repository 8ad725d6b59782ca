"""
Sync module for yt-sync.

    - local: directory snapshot and .m3u index writer
    - synchronizer: per-target reconciliation and multi-target runs

Usage:
    from yt_sync.sync import Synchronizer

    report = Synchronizer(client, verbose=True).sync_all(targets)
"""

from yt_sync.sync.local import PlaylistIndex, index_path_for, scan_directory
from yt_sync.sync.synchronizer import (
    SyncReport,
    SyncResult,
    Synchronizer,
    format_sync_message,
)

__all__ = [
    "PlaylistIndex",
    "index_path_for",
    "scan_directory",
    "SyncReport",
    "SyncResult",
    "Synchronizer",
    "format_sync_message",
]
