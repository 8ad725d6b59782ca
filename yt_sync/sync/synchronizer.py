"""
Playlist synchronization for yt-sync.

For each sync target the Synchronizer:
    1. Creates the local directory if needed
    2. Lists the remote playlist (all-or-nothing)
    3. Takes a snapshot of the filenames already in the directory
    4. Rewrites the .m3u index from scratch, if requested
    5. Walks the remote items in playlist order:
        - file already in the snapshot -> index it, don't download
        - otherwise fetch it; on success index and count it,
          on failure skip it and carry on
    6. Reports how many items were newly synced

The snapshot is taken once, before any download, so files created during
the run never influence the "already present" decision.

Error Handling:
    A SyncError (directory, listing, index) aborts the current target.
    sync_all() logs it, records it in the report and moves on to the next
    target. A failed fetch never raises; the item is simply not counted.

Usage:
    from yt_sync.acquisition import YtDlpClient
    from yt_sync.sync import Synchronizer

    synchronizer = Synchronizer(YtDlpClient())
    report = synchronizer.sync_all(config.playlists)
    if not report.ok:
        sys.exit(2)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from tqdm import tqdm

from yt_sync.acquisition.client import AcquisitionClient
from yt_sync.core.exceptions import DirectoryError, SyncError
from yt_sync.core.logger import get_logger
from yt_sync.core.models import SyncTarget
from yt_sync.sync.local import PlaylistIndex, index_path_for, scan_directory
from yt_sync.utils import ensure_directory, item_filename

logger = get_logger(__name__)


@dataclass
class SyncResult:
    """
    Outcome of syncing one target.

    Attributes:
        target: The target that was synced.
        synced: Number of items downloaded during this run.
        already_present: Number of items found in the directory snapshot.
        failed: Ids of items whose fetch failed, in playlist order.
        index_path: The index file written, or None if not requested.
        error: The error that aborted the target, or None.
    """
    target: SyncTarget
    synced: int = 0
    already_present: int = 0
    failed: list[str] = field(default_factory=list)
    index_path: Path | None = None
    error: SyncError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncReport:
    """Results of a multi-target run, in target order."""
    results: list[SyncResult] = field(default_factory=list)

    @property
    def total_synced(self) -> int:
        return sum(result.synced for result in self.results)

    @property
    def failed_targets(self) -> list[SyncResult]:
        return [result for result in self.results if not result.ok]

    @property
    def ok(self) -> bool:
        return not self.failed_targets


def format_sync_message(count: int, location: Path) -> str:
    """
    Completion message for a target.

    Example:
        format_sync_message(1, Path("/music/mix"))
        # "1 new song successfully synced to /music/mix"
    """
    noun = "song" if count == 1 else "songs"
    return f"{count} new {noun} successfully synced to {location}"


class Synchronizer:
    """
    Reconciles remote playlists with local directories.

    Targets are processed one at a time and items one at a time; each
    fetch is awaited before the next one starts.

    Attributes:
        client: Acquisition tool used to list and fetch items.
        verbose: Log playlist and directory contents and per-item
                 announcements, and ask the tool for verbose output.
        show_progress: Show a tqdm progress bar over each playlist's items.
    """

    def __init__(
        self,
        client: AcquisitionClient,
        verbose: bool = False,
        show_progress: bool = True
    ) -> None:
        self.client = client
        self.verbose = verbose
        self.show_progress = show_progress

    def sync_all(self, targets: Iterable[SyncTarget]) -> SyncReport:
        """
        Sync every target in order.

        A target that fails with a SyncError is logged and recorded in the
        report; the remaining targets are still synced.
        """
        report = SyncReport()
        for target in targets:
            try:
                result = self.sync_target(target)
            except SyncError as e:
                logger.error(
                    f"Failed to sync playlist {target.playlist_id}: {e.message}",
                    exc_info=self.verbose,
                )
                logger.debug(f"Details: {e.details}")
                result = SyncResult(target=target, error=e)
            report.results.append(result)
        return report

    def sync_target(self, target: SyncTarget) -> SyncResult:
        """
        Sync a single target.

        Returns:
            SyncResult with counts for this run.

        Raises:
            DirectoryError: The directory cannot be created or read.
            ListingError: The remote playlist cannot be listed.
            IndexWriteError: The index file cannot be written.
        """
        logger.info(f"Downloading playlist: {target.playlist_id}")
        try:
            result = self._sync(target)
        except SyncError as e:
            e.details.setdefault("playlist_id", target.playlist_id)
            raise

        logger.info(format_sync_message(result.synced, target.location))
        return result

    def _sync(self, target: SyncTarget) -> SyncResult:
        try:
            ensure_directory(target.location)
        except OSError as e:
            raise DirectoryError(
                f"Cannot create directory {target.location}: {e}",
                details={"path": str(target.location), "original_error": str(e)}
            ) from e

        items = self.client.list_items(target.playlist_id)
        logger.debug(f"Playlist contains: {[item.title for item in items]}")

        snapshot = scan_directory(target.location)
        logger.debug(f"Directory contains: {sorted(snapshot)}")

        result = SyncResult(target=target)
        index = None
        if target.save_playlist:
            index = PlaylistIndex(index_path_for(target.location)).open()
            result.index_path = index.path

        try:
            with tqdm(
                items,
                desc=target.location.name,
                unit="item",
                disable=not self.show_progress,
            ) as progress:
                for item in progress:
                    filename = item_filename(item, target.media_format)
                    item_path = target.location / filename

                    if filename in snapshot:
                        result.already_present += 1
                    elif self._fetch(target, item.id, filename):
                        result.synced += 1
                    else:
                        result.failed.append(item.id)
                        continue

                    if index is not None:
                        index.add(item_path)
        finally:
            if index is not None:
                index.close()

        return result

    def _fetch(self, target: SyncTarget, item_id: str, filename: str) -> bool:
        logger.debug(f'Downloading "{filename}"')
        return self.client.fetch(
            item_id,
            target.location,
            target.media_format,
            verbose=self.verbose,
            playlist_id=target.playlist_id,
        )
