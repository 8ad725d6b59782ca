"""
Exception classes for yt-sync.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, so the CLI can show the message while the log files keep the
full context.

Exception Hierarchy:
    YtSyncError (base)
        ConfigError - Configuration file issues
        SyncError - A single sync target could not be completed
            DirectoryError - Local directory cannot be created or read
            ListingError - Remote playlist enumeration failed
            IndexWriteError - The .m3u index file cannot be written

Item-level fetch failures are deliberately absent from this hierarchy:
the fetcher reports them as a False return value and a log record, and
the synchronizer moves on to the next item.
"""


class YtSyncError(Exception):
    """
    Base exception for all yt-sync errors.
    
    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., playlist id,
                 path, the underlying error).
    
    Example:
        try:
            # some operation
        except YtSyncError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """
    
    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.
        
        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'playlist_id': Remote playlist involved in the error
                     - 'path': Filesystem path involved in the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(YtSyncError):
    """
    Raised when there's an issue with the configuration file.
    
    This is a CRITICAL error: nothing is synced when the configuration
    cannot be loaded.
    
    Common causes:
        - config.yaml cannot be read or created
        - config.yaml has invalid YAML syntax
        - A playlist entry is missing 'id' or 'location'
        - Unknown media format (anything other than 'audio' or 'video')
    
    Example:
        raise ConfigError(
            "'playlists[0].format' must be one of: audio, video",
            details={'field': 'playlists[0].format', 'value': 'mp3'}
        )
    """
    pass


class SyncError(YtSyncError):
    """
    Base class for errors that abort a single sync target.
    
    A SyncError stops the current target only. When several targets are
    synced in one run, the remaining targets are still processed and the
    run as a whole is reported as failed at the end.
    
    The 'playlist_id' key in details identifies the aborted target.
    """
    pass


class DirectoryError(SyncError):
    """
    Raised when the target's local directory cannot be created or listed.
    
    Example:
        raise DirectoryError(
            "Cannot create directory: /mnt/music/mix",
            details={'playlist_id': 'PLxxx', 'path': '/mnt/music/mix'}
        )
    """
    pass


class ListingError(SyncError):
    """
    Raised when the remote playlist cannot be enumerated.
    
    Listing is all-or-nothing: a partial listing would make the incremental
    download decisions wrong, so any failure aborts the target.
    
    Common causes:
        - yt-dlp is not installed or not on PATH
        - yt-dlp exited with a non-zero status (private or deleted playlist)
        - A line of yt-dlp output is not valid JSON or lacks 'id'/'title'
    """
    pass


class IndexWriteError(SyncError):
    """
    Raised when the .m3u index file cannot be removed, created or written.
    
    A missing or truncated index would silently misrepresent what is on
    disk, so this aborts the target.
    """
    pass
