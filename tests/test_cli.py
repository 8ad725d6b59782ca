"""Test the command line interface"""

import json
import subprocess
import pytest
import yaml
from click.testing import CliRunner
from unittest.mock import patch

from yt_sync import __version__
from yt_sync.cli import cli
from yt_sync.core.exceptions import ListingError
from yt_sync.core.models import MediaFormat
from yt_sync.sync.local import index_path_for
from yt_sync.utils import item_filename


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(temp_dir):
    """Write a config.yaml with two playlists and logs inside temp_dir"""
    def _write(playlists=None):
        if playlists is None:
            playlists = [
                {"id": "PL1", "location": str(temp_dir / "one"), "format": "audio", "save_playlist": True},
                {"id": "PL2", "location": str(temp_dir / "two"), "format": "video", "save_playlist": False},
            ]
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({
            "playlists": playlists,
            "logging": {"directory": str(temp_dir / "logs")},
        }), encoding="utf-8")
        return path
    return _write


class TestCli:
    """Test CLI behavior"""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"yt-sync {__version__}" in result.output

    def test_first_run_creates_config_and_stops(self, runner, temp_dir):
        config_path = temp_dir / "cfg" / "config.yaml"

        with patch("yt_sync.cli.YtDlpClient") as mock_client_cls:
            result = runner.invoke(cli, ["--config", str(config_path)])

        assert result.exit_code == 0
        assert config_path.exists()
        mock_client_cls.assert_not_called()
        assert list((temp_dir / "cfg" / "logs").glob("log_full_*.log"))

    def test_syncs_configured_playlists(self, runner, temp_dir, config_file, fake_client, sample_items):
        config_path = config_file()
        fake_client.playlists["PL1"] = sample_items[:2]
        fake_client.playlists["PL2"] = sample_items[2:]

        with patch("yt_sync.cli.YtDlpClient", return_value=fake_client):
            result = runner.invoke(cli, ["--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert fake_client.fetched_ids() == [item.id for item in sample_items]
        assert (temp_dir / "two" / item_filename(sample_items[2], MediaFormat.VIDEO)).exists()
        assert len(index_path_for(temp_dir / "one").read_text(encoding="utf-8").splitlines()) == 2
        assert not index_path_for(temp_dir / "two").exists()

    def test_failed_playlist_sets_exit_code(self, runner, temp_dir, config_file, fake_client, sample_items):
        config_path = config_file()
        fake_client.listing_errors["PL1"] = ListingError("private playlist")
        fake_client.playlists["PL2"] = sample_items

        with patch("yt_sync.cli.YtDlpClient", return_value=fake_client):
            result = runner.invoke(cli, ["--config", str(config_path)])

        assert result.exit_code == 2
        assert len(list((temp_dir / "two").iterdir())) == 3

    def test_invalid_config(self, runner, temp_dir, config_file):
        config_path = config_file([{"id": "PL1", "location": str(temp_dir), "format": "flac"}])

        result = runner.invoke(cli, ["--config", str(config_path)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_single_playlist(self, runner, temp_dir, config_file, fake_client, sample_items):
        config_path = config_file([])
        location = temp_dir / "adhoc"
        fake_client.playlists["PLadhoc"] = sample_items

        with patch("yt_sync.cli.YtDlpClient", return_value=fake_client):
            result = runner.invoke(cli, [
                "--config", str(config_path),
                "--playlist-id", "PLadhoc",
                "--location", str(location),
                "--format", "VIDEO",
                "--save-playlist",
            ])

        assert result.exit_code == 0, result.output
        assert all(call[2] is MediaFormat.VIDEO for call in fake_client.fetch_calls)
        assert all(call[1] == location.resolve() for call in fake_client.fetch_calls)
        assert index_path_for(location.resolve()).exists()

    def test_location_requires_playlist_id(self, runner, temp_dir):
        result = runner.invoke(cli, ["--location", str(temp_dir)])

        assert result.exit_code == 2
        assert "--playlist-id" in result.output

    def test_unknown_format_is_rejected(self, runner, temp_dir):
        result = runner.invoke(cli, ["--playlist-id", "PL1", "--format", "mp3"])

        assert result.exit_code == 2


class TestEndToEnd:
    """Run the real YtDlpClient against a faked yt-dlp process"""

    def test_failed_download_is_reported(self, runner, temp_dir, config_file):
        config_path = config_file([
            {"id": "PL1", "location": str(temp_dir / "one"), "save_playlist": True},
        ])
        listing = "".join(json.dumps(entry) + "\n" for entry in [
            {"id": "good", "title": "Good Song"},
            {"id": "bad", "title": "Bad Song"},
        ])

        def fake_run(args, **kwargs):
            if "--flat-playlist" in args:
                return subprocess.CompletedProcess(args, 0, stdout=listing, stderr="")
            if "https://www.youtube.com/watch?v=bad" in args:
                return subprocess.CompletedProcess(args, 1, stdout="", stderr="ERROR: Video unavailable")
            return subprocess.CompletedProcess(args, 0, stdout="", stderr="")

        with patch("yt_sync.acquisition.ytdlp.subprocess.run", side_effect=fake_run):
            result = runner.invoke(cli, ["--config", str(config_path)])

        assert result.exit_code == 0, result.output
        index_lines = index_path_for(temp_dir / "one").read_text(encoding="utf-8").splitlines()
        assert index_lines == [str(temp_dir / "one" / "Good Song [good].opus")]
        failures = next((temp_dir / "logs").glob("fetch_failures_*.log")).read_text(encoding="utf-8")
        assert "PL1 bad (exit code 1)" in failures
        assert "https://www.youtube.com/watch?v=bad" in failures
