"""
Configuration management for yt-sync.

This module handles loading, validating and (on first run) creating the
application configuration stored in config.yaml.

The configuration file contains:
    - The list of playlists to sync (remote id, local directory, format,
      whether to write an .m3u index)
    - Optional acquisition tool settings (executable, cookie file)
    - Optional log directory

Configuration File Location:
    ~/.config/yt-sync/config.yaml unless --config points elsewhere.
    The CLI resolves the path once and passes it to load_or_create_config().

Example config.yaml:
    playlists:
      - id: "PLxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx"
        location: "~/Music/My Mix"
        format: audio
        save_playlist: true

    downloader:
      executable: yt-dlp
      cookie_file: null  # Optional: path to cookies.txt

    logging:
      directory: null  # Default: <config dir>/logs
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from yt_sync.core.exceptions import ConfigError
from yt_sync.core.models import MediaFormat, SyncTarget


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "yt-sync" / "config.yaml"

DEFAULT_EXECUTABLE = "yt-dlp"

DEFAULT_CONFIG_TEMPLATE = """\
# yt-sync configuration
#
# Each entry maps a remote playlist to a local directory.
#   id:            playlist id (the 'list=' part of the playlist URL)
#   location:      directory the playlist is synced into (created if missing)
#   format:        audio (.opus) or video (.mkv)
#   save_playlist: write <location>.m3u next to the directory
"""

_DEFAULT_PLAYLISTS = [
    {
        "id": "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
        "location": "~/Downloads/file_output",
        "format": "audio",
        "save_playlist": True,
    },
    {
        "id": "bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb",
        "location": "~/Downloads/file_output2",
        "format": "video",
        "save_playlist": False,
    },
]


@dataclass(frozen=True)
class DownloaderConfig:
    """
    Acquisition tool configuration.

    Attributes:
        executable: Command used to invoke yt-dlp.
        cookie_file: Optional cookies.txt passed to yt-dlp with --cookies.
    """
    executable: str
    cookie_file: Path | None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Attributes:
        path: The file this configuration was loaded from.
        playlists: Sync targets in file order.
        downloader: Acquisition tool settings.
        log_directory: Directory for log files.
        created: True when the file did not exist and was just written with
                 placeholder targets.
    """
    path: Path
    playlists: tuple[SyncTarget, ...]
    downloader: DownloaderConfig
    log_directory: Path
    created: bool = False


def load_or_create_config(config_path: Path = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load config.yaml, writing a default one first if it does not exist.

    Args:
        config_path: Location of the configuration file.

    Returns:
        Config: The loaded configuration. `created` is True if the default
                file was written during this call.

    Raises:
        ConfigError: If the file cannot be created, read, parsed or validated.
    """
    if config_path.exists():
        return load_config(config_path)

    write_default_config(config_path)
    return replace(load_config(config_path), created=True)


def write_default_config(config_path: Path) -> None:
    """
    Write the default configuration file, creating parent directories.

    Raises:
        ConfigError: If the directory or file cannot be written.
    """
    content = DEFAULT_CONFIG_TEMPLATE + "\n" + yaml.safe_dump(
        {"playlists": _DEFAULT_PLAYLISTS},
        sort_keys=False,
        allow_unicode=True,
    )
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ConfigError(
            f"Failed to create default configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e


def load_config(config_path: Path) -> Config:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid YAML,
                     or contains invalid values.

    Behavior:
        1. Read and parse YAML content
        2. Validate the playlists list, converting each entry to a SyncTarget
        3. Parse optional downloader and logging sections
        4. Return a frozen Config object
    """
    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is an empty configuration
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    playlists = _parse_playlists(raw_config.get("playlists"))
    downloader = _parse_downloader_config(raw_config.get("downloader"))
    log_directory = _parse_log_directory(raw_config.get("logging"), config_path)

    return Config(
        path=config_path,
        playlists=playlists,
        downloader=downloader,
        log_directory=log_directory,
    )


def parse_media_format(value: Any, field: str = "format") -> MediaFormat:
    """
    Convert a config/CLI value to a MediaFormat.

    Unknown values are rejected instead of silently falling back to video.

    Raises:
        ConfigError: If the value is not one of MediaFormat.choices().
    """
    if isinstance(value, str):
        try:
            return MediaFormat(value.strip().lower())
        except ValueError:
            pass
    raise ConfigError(
        f"'{field}' must be one of: {', '.join(MediaFormat.choices())}",
        details={"field": field, "value": value}
    )


def _parse_playlists(raw_playlists: Any) -> tuple[SyncTarget, ...]:
    """
    Parse the 'playlists' list into SyncTarget objects.

    Raises:
        ConfigError: If the section is not a list or an entry is invalid.
    """
    if raw_playlists is None:
        return ()

    if not isinstance(raw_playlists, list):
        raise ConfigError(
            "'playlists' must be a list",
            details={"field": "playlists"}
        )

    return tuple(
        _parse_playlist_entry(entry, f"playlists[{index}]")
        for index, entry in enumerate(raw_playlists)
    )


def _parse_playlist_entry(entry: Any, field: str) -> SyncTarget:
    if not isinstance(entry, dict):
        raise ConfigError(
            f"'{field}' must be a dictionary",
            details={"field": field}
        )

    playlist_id = entry.get("id")
    if not isinstance(playlist_id, str) or not playlist_id.strip():
        raise ConfigError(
            f"'{field}.id' must be a non-empty string",
            details={"field": f"{field}.id"}
        )

    location = entry.get("location")
    if not isinstance(location, str) or not location.strip():
        raise ConfigError(
            f"'{field}.location' must be a non-empty string",
            details={"field": f"{field}.location"}
        )

    location_path = Path(location.strip()).expanduser().resolve()
    if location_path.parent == location_path:
        raise ConfigError(
            f"'{field}.location' must not be a filesystem root",
            details={"field": f"{field}.location", "value": location}
        )

    media_format = parse_media_format(
        entry.get("format", MediaFormat.AUDIO.value), f"{field}.format"
    )
    save_playlist = _parse_bool(entry.get("save_playlist", False), f"{field}.save_playlist")

    return SyncTarget(
        playlist_id=playlist_id.strip(),
        location=location_path,
        media_format=media_format,
        save_playlist=save_playlist,
    )


def _parse_bool(value: Any, field: str) -> bool:
    """
    Validate a boolean field.

    Older configuration files stored booleans as the strings "true"/"false";
    those are still accepted.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigError(
        f"'{field}' must be true or false",
        details={"field": field, "value": value}
    )


def _parse_downloader_config(downloader_section: Any) -> DownloaderConfig:
    """
    Parse the optional 'downloader' section, applying defaults.

    Raises:
        ConfigError: If executable is empty or cookie_file does not exist.
    """
    executable = DEFAULT_EXECUTABLE
    cookie_file = None

    if downloader_section is None:
        return DownloaderConfig(executable=executable, cookie_file=cookie_file)

    if not isinstance(downloader_section, dict):
        raise ConfigError(
            "Section 'downloader' must be a dictionary",
            details={"section": "downloader"}
        )

    raw_executable = downloader_section.get("executable")
    if raw_executable is not None:
        if not isinstance(raw_executable, str) or not raw_executable.strip():
            raise ConfigError(
                "'downloader.executable' must be a non-empty string",
                details={"field": "downloader.executable"}
            )
        executable = raw_executable.strip()

    raw_cookie = downloader_section.get("cookie_file")
    if raw_cookie is not None:
        if not isinstance(raw_cookie, str):
            raise ConfigError(
                "'downloader.cookie_file' must be a string path or null",
                details={"field": "downloader.cookie_file"}
            )

        cookie_path = Path(raw_cookie).expanduser().resolve()
        if not cookie_path.exists():
            raise ConfigError(
                f"Cookie file not found: {cookie_path}",
                details={"field": "downloader.cookie_file", "path": str(cookie_path)}
            )
        cookie_file = cookie_path

    return DownloaderConfig(executable=executable, cookie_file=cookie_file)


def _parse_log_directory(logging_section: Any, config_path: Path) -> Path:
    default = config_path.parent / "logs"

    if logging_section is None:
        return default

    if not isinstance(logging_section, dict):
        raise ConfigError(
            "Section 'logging' must be a dictionary",
            details={"section": "logging"}
        )

    directory = logging_section.get("directory")
    if directory is None:
        return default
    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'logging.directory' must be a non-empty string or null",
            details={"field": "logging.directory"}
        )
    return Path(directory.strip()).expanduser().resolve()
