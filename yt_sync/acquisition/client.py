"""
Abstract interface to the media acquisition tool.

The synchronizer never starts processes itself; it talks to an
AcquisitionClient. YtDlpClient is the real implementation, tests use an
in-memory fake.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from yt_sync.core.models import MediaFormat, RemoteItem


class AcquisitionClient(ABC):
    """
    Capability to enumerate remote playlists and fetch single items.
    """

    @abstractmethod
    def list_items(self, playlist_id: str) -> list[RemoteItem]:
        """
        Return the current items of a remote playlist, in playlist order.

        Titles are already sanitized with sanitize_filename().

        Raises:
            ListingError: If the playlist cannot be enumerated completely.
        """

    @abstractmethod
    def fetch(
        self,
        item_id: str,
        destination: Path,
        media_format: MediaFormat,
        verbose: bool = False,
        playlist_id: str | None = None
    ) -> bool:
        """
        Download one item into destination in the requested format.

        playlist_id only labels failure reports; it does not change what
        is downloaded.

        Returns:
            True if the item is now present (including "already there"),
            False if the fetch failed. Failures are logged, not raised.
        """
