"""
Local side of a sync: directory snapshot and .m3u index.

Directory layout for a target with save_playlist enabled:

    ~/Music/
    ├── My Mix/                              # target location
    │   ├── Song One [dQw4w9WgXcQ].opus
    │   └── Song Two [9bZkp7q19f0].opus
    └── My Mix.m3u                           # index, next to the directory

The index is plain text, one full path per line, in playlist order, no
header. It is rewritten from scratch on every run.
"""

import os
from pathlib import Path
from typing import TextIO

from yt_sync.core.exceptions import DirectoryError, IndexWriteError
from yt_sync.utils import sanitize_filename


def scan_directory(location: Path) -> set[str]:
    """
    Snapshot the filenames currently in a directory.

    Names are passed through sanitize_filename() so they compare equal to
    names built from remote titles. Names that are not valid UTF-8 are
    skipped; yt-dlp never produces them.

    Args:
        location: Existing directory to scan.

    Returns:
        Set of sanitized filenames.

    Raises:
        DirectoryError: If the directory cannot be listed.
    """
    try:
        with os.scandir(location) as entries:
            names = [entry.name for entry in entries]
    except OSError as e:
        raise DirectoryError(
            f"Cannot read directory {location}: {e}",
            details={"path": str(location), "original_error": str(e)}
        ) from e

    snapshot = set()
    for name in names:
        try:
            name.encode("utf-8")
        except UnicodeEncodeError:
            continue
        snapshot.add(sanitize_filename(name))
    return snapshot


def index_path_for(location: Path) -> Path:
    """
    Path of the index file for a target directory: <parent>/<name>.m3u

    Raises:
        DirectoryError: If location is a filesystem root, which has no
                        parent to hold the index.
    """
    if not location.name or location.parent == location:
        raise DirectoryError(
            f"Cannot place a playlist index next to {location}: it has no parent directory",
            details={"path": str(location)}
        )
    return location.parent / f"{location.name}.m3u"


class PlaylistIndex:
    """
    Writer for a target's .m3u index file.

    Opening removes any previous index and creates an empty one; each add()
    appends one line. Use as a context manager:

        with PlaylistIndex(index_path_for(location)) as index:
            index.add(location / filename)

    Attributes:
        path: Location of the index file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._file: TextIO | None = None

    def open(self) -> "PlaylistIndex":
        """
        Remove the old index (if any) and create a fresh, empty one.

        Raises:
            IndexWriteError: If the file cannot be removed or created.
        """
        try:
            self.path.unlink(missing_ok=True)
            self._file = open(self.path, "w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise IndexWriteError(
                f"Cannot create playlist index {self.path}: {e}",
                details={"path": str(self.path), "original_error": str(e)}
            ) from e
        return self

    def add(self, item_path: Path) -> None:
        """
        Append one entry.

        Raises:
            IndexWriteError: If the index is not open or the write fails.
        """
        if self._file is None:
            raise IndexWriteError(
                f"Playlist index {self.path} is not open",
                details={"path": str(self.path)}
            )
        try:
            self._file.write(f"{item_path}\n")
        except OSError as e:
            raise IndexWriteError(
                f"Cannot write playlist index {self.path}: {e}",
                details={"path": str(self.path), "original_error": str(e)}
            ) from e

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            raise IndexWriteError(
                f"Cannot write playlist index {self.path}: {e}",
                details={"path": str(self.path), "original_error": str(e)}
            ) from e
        finally:
            self._file = None

    def __enter__(self) -> "PlaylistIndex":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
