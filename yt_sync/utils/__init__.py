"""
Utility functions for yt-sync.

    - Filename sanitization, applied identically to remote titles and to
      names found on disk
    - The "<title> [<id>].<ext>" filename used to match remote items to files
    - Directory creation helper

Usage:
    from yt_sync.utils import sanitize_filename, item_filename, ensure_directory
"""

from pathlib import Path

from yt_sync.core.models import MediaFormat, RemoteItem


# Characters that are invalid or troublesome in filenames on common
# filesystems, mapped to the full-width look-alikes yt-dlp uses when it
# names its output files. None of the replacements is itself a key, so
# sanitizing twice gives the same result as sanitizing once.
_FILENAME_REPLACEMENTS = {
    '"': "＂",
    "“": "＂",
    "”": "＂",
    "*": "＊",
    ":": "：",
    "<": "＜",
    ">": "＞",
    "?": "？",
    "|": "｜",
    "/": "⧸",
    "\\": "⧹",
}

# ASCII control characters (newline, tab, ...) become a plain space, so a
# title always fits on one index line. Space is not a key either.
_FILENAME_REPLACEMENTS.update({chr(code): " " for code in [*range(0x20), 0x7F]})

_FILENAME_TABLE = str.maketrans(_FILENAME_REPLACEMENTS)


def sanitize_filename(name: str) -> str:
    """
    Make a string safe to use as (part of) a filename.

    Each character is mapped on its own; characters not in the replacement
    table are kept as they are. The function never fails and never changes
    the length of the string.

    Examples:
        sanitize_filename("AC/DC")         # "AC⧸DC"
        sanitize_filename("What?")         # "What？"
        sanitize_filename('Say "hi": <3')  # "Say ＂hi＂： ＜3"
        sanitize_filename("Line\\none")    # "Line one"
    """
    return name.translate(_FILENAME_TABLE)


def item_filename(item: RemoteItem, media_format: MediaFormat) -> str:
    """
    Filename the acquisition tool produces for an item.

    Format: "{title} [{id}].{ext}", with ext opus for audio and mkv for
    video. Two items are the same local file if and only if these names
    are equal.

    Example:
        item_filename(RemoteItem("dQw4w9WgXcQ", "Never Gonna"), MediaFormat.AUDIO)
        # Returns: "Never Gonna [dQw4w9WgXcQ].opus"
    """
    return f"{sanitize_filename(item.title)} [{item.id}].{media_format.extension}"


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If the directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
