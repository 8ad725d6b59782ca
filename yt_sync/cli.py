"""
Command-line interface for yt-sync.

This module implements the CLI using Click; rich-click is used for the
help colors.

Usage:
    # Sync every playlist listed in the configuration file
    yt-sync

    # Use another configuration file
    yt-sync --config ~/music/yt-sync.yaml

    # Sync one playlist without touching the configuration
    yt-sync --playlist-id PLxxxx --location ~/Music/mix --format video --save-playlist

    # Show playlist/directory contents and yt-dlp's own output
    yt-sync --verbose

Configuration:
    ~/.config/yt-sync/config.yaml is created with two placeholder playlists
    on first run. Edit it and run yt-sync again.

Exit Codes:
    0   every playlist synced (individual failed downloads do not count)
    1   configuration error or unexpected error
    2   at least one playlist could not be synced
    130 interrupted
"""

import sys
from pathlib import Path
from typing import Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "yt-sync": [
        {
            "name": "Single Playlist",
            "options": ["--playlist-id", "--location", "--format", "--save-playlist"],
        },
        {
            "name": "General",
            "options": ["--config", "--verbose", "--version", "--help"],
        },
    ],
}

from yt_sync import __version__
from yt_sync.acquisition import YtDlpClient
from yt_sync.core import (
    DEFAULT_CONFIG_PATH,
    Config,
    ConfigError,
    MediaFormat,
    SyncTarget,
    YtSyncError,
    get_logger,
    load_or_create_config,
    setup_logging,
    shutdown_logging,
)
from yt_sync.sync import SyncReport, Synchronizer

logger = get_logger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Configuration file (created if missing)"
)
@click.option(
    "-p", "--playlist-id",
    type=str,
    default=None,
    metavar="<playlist-id>",
    help="Sync only this playlist instead of the configured ones"
)
@click.option(
    "-l", "--location",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<directory>",
    help="Directory for --playlist-id (default: current directory)"
)
@click.option(
    "-f", "--format", "media_format",
    type=click.Choice(MediaFormat.choices(), case_sensitive=False),
    default=MediaFormat.AUDIO.value,
    show_default=True,
    help="Output format for --playlist-id"
)
@click.option(
    "-s", "--save-playlist/--no-save-playlist",
    default=False,
    help="Write <location>.m3u for --playlist-id"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show playlist and directory contents and yt-dlp output"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path,
    playlist_id: Optional[str],
    location: Optional[Path],
    media_format: str,
    save_playlist: bool,
    verbose: bool,
    version: bool
) -> None:
    """
    yt-sync: Keep local folders in sync with YouTube playlists.

    Downloads, through yt-dlp, every playlist item that is not yet in the
    playlist's local directory, and optionally writes an .m3u index next
    to the directory.

    \b
    USAGE:
        yt-sync                                  # Sync all configured playlists
        yt-sync -p PLxxxx -l ~/Music/mix         # Sync a single playlist
        yt-sync -p PLxxxx -f video -s            # Video, with .m3u index
    """
    if version:
        click.echo(f"yt-sync {__version__}")
        ctx.exit(0)

    if playlist_id is None and (location is not None or save_playlist):
        raise click.UsageError("--location and --save-playlist require --playlist-id")

    target = None
    if playlist_id is not None:
        target = SyncTarget(
            playlist_id=playlist_id,
            location=(location or Path.cwd()).expanduser().resolve(),
            media_format=MediaFormat(media_format.lower()),
            save_playlist=save_playlist,
        )

    _run_sync(config_path.expanduser(), target, verbose)


def _run_sync(config_path: Path, target: SyncTarget | None, verbose: bool) -> None:
    """
    Load the configuration, set up logging and sync.

    Args:
        config_path: Configuration file to load or create.
        target: Ad hoc target from the command line, or None to sync all
                configured playlists.
        verbose: Verbose console output.

    Raises:
        SystemExit: With the exit code documented in the module docstring.
    """
    try:
        config = load_or_create_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    try:
        setup_logging(config.log_directory, verbose=verbose)
    except OSError as e:
        click.echo(f"Cannot create log directory {config.log_directory}: {e}", err=True)
        sys.exit(1)

    try:
        if config.created:
            logger.info(f"Created default config at {config.path}")
        else:
            logger.info(f"Loaded config at {config.path}")

        if target is None and config.created:
            logger.info("Edit the configuration file and run yt-sync again")
            return

        targets = [target] if target is not None else list(config.playlists)
        if not targets:
            logger.warning(f"No playlists configured in {config.path}")
            return

        report = _build_synchronizer(config, verbose).sync_all(targets)
        _print_report(report)

        if not report.ok:
            sys.exit(2)

    except YtSyncError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _build_synchronizer(config: Config, verbose: bool) -> Synchronizer:
    client = YtDlpClient(
        executable=config.downloader.executable,
        cookie_file=config.downloader.cookie_file,
    )
    return Synchronizer(client, verbose=verbose)


def _print_report(report: SyncReport) -> None:
    """Log a summary when more than one playlist was synced or any failed."""
    if len(report.results) <= 1 and report.ok:
        return

    logger.info(
        f"Synced {len(report.results) - len(report.failed_targets)}/"
        f"{len(report.results)} playlists, {report.total_synced} new items"
    )
    for result in report.failed_targets:
        logger.error(f"Playlist {result.target.playlist_id} failed: {result.error}")


def main() -> None:
    """Entry point for `python -m yt_sync`."""
    cli()


if __name__ == "__main__":
    main()
