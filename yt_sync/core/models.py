"""
Data models shared by the sync engine and its collaborators.

    MediaFormat  - closed set of output formats (audio / video)
    SyncTarget   - one remote playlist -> local directory mapping
    RemoteItem   - one entry of a remote playlist, as listed by yt-dlp
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class MediaFormat(Enum):
    """
    Output format requested for a sync target.
    
    The value is the spelling used in config.yaml and on the command line;
    the extension is what the acquisition tool produces for that format and
    is part of the filename used to detect already-downloaded items.
    """
    AUDIO = "audio"
    VIDEO = "video"
    
    @property
    def extension(self) -> str:
        """File extension (without dot) of files produced for this format."""
        return "opus" if self is MediaFormat.AUDIO else "mkv"
    
    @classmethod
    def choices(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass(frozen=True)
class SyncTarget:
    """
    One unit of sync work.
    
    Attributes:
        playlist_id: Opaque remote playlist identifier (the `list=` URL parameter).
        location: Absolute local directory the playlist is synced into.
        media_format: Requested output format.
        save_playlist: Whether to write <location>.m3u next to the directory.
    """
    playlist_id: str
    location: Path
    media_format: MediaFormat = MediaFormat.AUDIO
    save_playlist: bool = False


@dataclass(frozen=True)
class RemoteItem:
    """
    A single entry of a remote playlist.
    
    Attributes:
        id: Stable remote identifier (the `v=` URL parameter).
        title: Title as listed by the remote source, already passed through
               sanitize_filename() by the lister.
    """
    id: str
    title: str
