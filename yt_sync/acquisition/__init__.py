"""
Acquisition module for yt-sync.

Everything that talks to the external download tool lives here:
    - client: AcquisitionClient, the interface the synchronizer depends on
    - ytdlp: YtDlpClient, which runs yt-dlp as a subprocess

Usage:
    from yt_sync.acquisition import YtDlpClient

    client = YtDlpClient(executable="yt-dlp")
    items = client.list_items("PLxxxxxxxx")
    client.fetch(items[0].id, Path("~/Music/mix"), MediaFormat.AUDIO)
"""

from yt_sync.acquisition.client import AcquisitionClient
from yt_sync.acquisition.ytdlp import (
    BENIGN_EXIT_CODE,
    YtDlpClient,
    playlist_url,
    video_url,
)

__all__ = [
    "AcquisitionClient",
    "YtDlpClient",
    "BENIGN_EXIT_CODE",
    "playlist_url",
    "video_url",
]
