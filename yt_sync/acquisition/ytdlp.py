"""
yt-dlp subprocess client.

yt-dlp is run as an external command rather than imported, so a
system-wide or newer yt-dlp can be used by pointing
'downloader.executable' at it.

Listing:
    yt-dlp -j --flat-playlist https://www.youtube.com/playlist?list=<id>

    Prints one JSON object per playlist entry. Only 'id' and 'title'
    are used.

Fetching:
    yt-dlp -P <dir> -q --embed-thumbnail --embed-metadata <watch url>
           [-x --audio-format opus | -f bestvideo+bestaudio --merge-output-format mkv]
           [--cookies <file>] [--verbose]

    Exit code 0 means downloaded. Exit code 100 is treated as success as
    well: yt-dlp can decide on its own that there is nothing to do, which
    is not an error for a sync.
"""

import json
import subprocess
from pathlib import Path

from yt_sync.acquisition.client import AcquisitionClient
from yt_sync.core.exceptions import ListingError
from yt_sync.core.logger import get_logger, log_fetch_failure
from yt_sync.core.models import MediaFormat, RemoteItem
from yt_sync.utils import sanitize_filename

logger = get_logger(__name__)


# Exit status meaning "nothing to do", counted as a successful fetch
BENIGN_EXIT_CODE = 100

PLAYLIST_URL_TEMPLATE = "https://www.youtube.com/playlist?list={}"
VIDEO_URL_TEMPLATE = "https://www.youtube.com/watch?v={}"

_FORMAT_ARGS = {
    MediaFormat.AUDIO: ["-x", "--audio-format", "opus"],
    MediaFormat.VIDEO: ["-f", "bestvideo+bestaudio", "--merge-output-format", "mkv"],
}


def playlist_url(playlist_id: str) -> str:
    return PLAYLIST_URL_TEMPLATE.format(playlist_id)


def video_url(item_id: str) -> str:
    return VIDEO_URL_TEMPLATE.format(item_id)


class YtDlpClient(AcquisitionClient):
    """
    AcquisitionClient backed by the yt-dlp command line tool.

    Attributes:
        executable: Command used to start yt-dlp.
        cookie_file: Optional cookies.txt passed with --cookies on fetches.
    """

    def __init__(self, executable: str = "yt-dlp", cookie_file: Path | None = None) -> None:
        self.executable = executable
        self.cookie_file = cookie_file

    def list_items(self, playlist_id: str) -> list[RemoteItem]:
        """
        Enumerate a playlist without downloading anything.

        Args:
            playlist_id: Remote playlist id.

        Returns:
            Items in playlist order, titles sanitized.

        Raises:
            ListingError: If yt-dlp cannot be started, exits non-zero, or
                          prints a line that is not a JSON object with
                          string 'id' and 'title' fields. No partial list
                          is ever returned.
        """
        args = [self.executable, "-j", "--flat-playlist", playlist_url(playlist_id)]
        logger.debug(f"Listing playlist {playlist_id}: {args}")

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except (OSError, UnicodeDecodeError) as e:
            raise ListingError(
                f"Failed to execute {self.executable}: {e}",
                details={"playlist_id": playlist_id, "args": args, "original_error": str(e)}
            ) from e

        if result.returncode != 0:
            raise ListingError(
                f"{self.executable} failed to list playlist {playlist_id} "
                f"(exit code {result.returncode}): {result.stderr.strip()}",
                details={
                    "playlist_id": playlist_id,
                    "args": args,
                    "exit_code": result.returncode,
                    "stderr": result.stderr,
                }
            )

        items = []
        for line_number, line in enumerate(result.stdout.splitlines(), start=1):
            if not line.strip():
                continue
            items.append(self._parse_entry(line, line_number, playlist_id))

        return items

    def _parse_entry(self, line: str, line_number: int, playlist_id: str) -> RemoteItem:
        try:
            entry = json.loads(line)
        except json.JSONDecodeError as e:
            raise ListingError(
                f"Malformed metadata on line {line_number} for playlist {playlist_id}: {e}",
                details={"playlist_id": playlist_id, "line": line, "original_error": str(e)}
            ) from e

        if not isinstance(entry, dict):
            raise ListingError(
                f"Metadata on line {line_number} for playlist {playlist_id} is not an object",
                details={"playlist_id": playlist_id, "line": line}
            )

        item_id = entry.get("id")
        title = entry.get("title")
        if not isinstance(item_id, str) or not item_id or not isinstance(title, str):
            raise ListingError(
                f"Metadata on line {line_number} for playlist {playlist_id} "
                f"is missing 'id' or 'title'",
                details={"playlist_id": playlist_id, "line": line}
            )

        return RemoteItem(id=item_id, title=sanitize_filename(title))

    def build_fetch_args(
        self,
        item_id: str,
        destination: Path,
        media_format: MediaFormat,
        verbose: bool = False
    ) -> list[str]:
        """Build the yt-dlp command line for fetching one item."""
        args = [
            self.executable,
            "-P", str(destination),
            "-q",
            "--embed-thumbnail",
            "--embed-metadata",
            video_url(item_id),
        ]
        args.extend(_FORMAT_ARGS[media_format])
        if self.cookie_file is not None:
            args.extend(["--cookies", str(self.cookie_file)])
        if verbose:
            args.append("--verbose")
        return args

    def fetch(
        self,
        item_id: str,
        destination: Path,
        media_format: MediaFormat,
        verbose: bool = False,
        playlist_id: str | None = None
    ) -> bool:
        """
        Download one item with yt-dlp.

        The process is awaited to completion; there is no timeout and no
        retry. Failures are logged with the arguments and the captured
        output so they can be reproduced by hand.

        Returns:
            True on exit code 0 or BENIGN_EXIT_CODE, False otherwise.
        """
        args = self.build_fetch_args(item_id, destination, media_format, verbose)
        url = video_url(item_id)

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            log_fetch_failure(
                logger,
                item_id=item_id,
                url=url,
                error_message=f"failed to execute {self.executable}: {e}",
                playlist_id=playlist_id,
            )
            return False

        if result.returncode in (0, BENIGN_EXIT_CODE):
            if result.returncode == BENIGN_EXIT_CODE:
                logger.debug(f"{self.executable} reported nothing to do for {item_id}")
            return True

        log_fetch_failure(
            logger,
            item_id=item_id,
            url=url,
            error_message=(
                f"{self.executable} exited with code {result.returncode}, "
                f"args: {args}, stdout: {result.stdout.strip()!r}, "
                f"stderr: {result.stderr.strip()!r}"
            ),
            exit_code=result.returncode,
            playlist_id=playlist_id,
        )
        return False
