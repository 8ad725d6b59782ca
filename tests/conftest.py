"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path

from yt_sync.acquisition.client import AcquisitionClient
from yt_sync.core.exceptions import ListingError
from yt_sync.core.models import MediaFormat, RemoteItem, SyncTarget
from yt_sync.utils import item_filename


class FakeAcquisitionClient(AcquisitionClient):
    """
    In-memory acquisition tool.

    Playlists are plain lists of RemoteItem; a successful fetch creates an
    empty file named the way yt-dlp would name it.
    """

    def __init__(self):
        self.playlists: dict[str, list[RemoteItem]] = {}
        self.failing_ids: set[str] = set()
        self.listing_errors: dict[str, Exception] = {}
        self.fetch_calls: list[tuple[str, Path, MediaFormat, bool]] = []
        self.fetch_playlist_ids: list[str | None] = []

    def list_items(self, playlist_id):
        if playlist_id in self.listing_errors:
            raise self.listing_errors[playlist_id]
        if playlist_id not in self.playlists:
            raise ListingError(f"Unknown playlist {playlist_id}")
        return list(self.playlists[playlist_id])

    def fetch(self, item_id, destination, media_format, verbose=False, playlist_id=None):
        self.fetch_calls.append((item_id, destination, media_format, verbose))
        self.fetch_playlist_ids.append(playlist_id)
        if item_id in self.failing_ids:
            return False
        item = self._find(item_id)
        (destination / item_filename(item, media_format)).touch()
        return True

    def fetched_ids(self):
        return [call[0] for call in self.fetch_calls]

    def _find(self, item_id):
        for items in self.playlists.values():
            for item in items:
                if item.id == item_id:
                    return item
        raise KeyError(item_id)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def fake_client():
    """Acquisition client that never starts a process"""
    return FakeAcquisitionClient()


@pytest.fixture
def sample_items():
    """Three-item playlist: A, B, C"""
    return [
        RemoteItem(id="aaaaaaaaaaa", title="Song A"),
        RemoteItem(id="bbbbbbbbbbb", title="Song B： Remix"),
        RemoteItem(id="ccccccccccc", title="Song C"),
    ]


@pytest.fixture
def make_target(temp_dir):
    """Factory for sync targets inside the temporary directory"""
    def _make(playlist_id="PL1", name="mix", media_format=MediaFormat.AUDIO, save_playlist=True):
        return SyncTarget(
            playlist_id=playlist_id,
            location=temp_dir / name,
            media_format=media_format,
            save_playlist=save_playlist,
        )
    return _make
