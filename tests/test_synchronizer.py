"""Test playlist reconciliation"""

import pytest
from pathlib import Path

from yt_sync.core.exceptions import DirectoryError, IndexWriteError, ListingError
from yt_sync.core.models import MediaFormat, RemoteItem, SyncTarget
from yt_sync.sync.local import index_path_for
from yt_sync.sync.synchronizer import Synchronizer, format_sync_message
from yt_sync.utils import item_filename


def read_index(target):
    return index_path_for(target.location).read_text(encoding="utf-8").splitlines()


@pytest.fixture
def synchronizer(fake_client):
    return Synchronizer(fake_client, show_progress=False)


class TestSyncTarget:
    """Test syncing a single playlist"""

    def test_mixed_present_fetched_and_failed(self, synchronizer, fake_client, sample_items, make_target):
        """Test A fetched, B already present, C failing"""
        a, b, c = sample_items
        target = make_target()
        target.location.mkdir()
        (target.location / item_filename(b, MediaFormat.AUDIO)).touch()
        fake_client.playlists["PL1"] = sample_items
        fake_client.failing_ids.add(c.id)

        result = synchronizer.sync_target(target)

        assert result.synced == 1
        assert result.already_present == 1
        assert result.failed == [c.id]
        assert fake_client.fetched_ids() == [a.id, c.id]
        assert read_index(target) == [
            str(target.location / item_filename(a, MediaFormat.AUDIO)),
            str(target.location / item_filename(b, MediaFormat.AUDIO)),
        ]
        assert not (target.location / item_filename(c, MediaFormat.AUDIO)).exists()

    def test_second_run_downloads_nothing(self, synchronizer, fake_client, sample_items, make_target):
        """Test syncing is idempotent"""
        target = make_target()
        fake_client.playlists["PL1"] = sample_items

        first = synchronizer.sync_target(target)
        fake_client.fetch_calls.clear()
        second = synchronizer.sync_target(target)

        assert first.synced == 3
        assert second.synced == 0
        assert second.already_present == 3
        assert fake_client.fetch_calls == []
        assert len(read_index(target)) == 3

    def test_empty_playlist(self, synchronizer, fake_client, make_target):
        target = make_target()
        fake_client.playlists["PL1"] = []

        result = synchronizer.sync_target(target)

        assert result.synced == 0
        assert fake_client.fetch_calls == []
        assert index_path_for(target.location).read_text(encoding="utf-8") == ""

    def test_creates_missing_directory(self, synchronizer, fake_client, sample_items, temp_dir, make_target):
        target = make_target(name="deep/nested/mix")
        fake_client.playlists["PL1"] = sample_items

        result = synchronizer.sync_target(target)

        assert target.location.is_dir()
        assert result.synced == 3
        assert fake_client.fetched_ids() == [item.id for item in sample_items]

    def test_no_index_when_not_requested(self, synchronizer, fake_client, sample_items, make_target):
        """Test an existing index is left untouched when save_playlist is off"""
        target = make_target(save_playlist=False)
        index_path = index_path_for(target.location)
        index_path.write_text("/kept/entry.opus\n", encoding="utf-8")
        fake_client.playlists["PL1"] = sample_items

        result = synchronizer.sync_target(target)

        assert result.index_path is None
        assert index_path.read_text(encoding="utf-8") == "/kept/entry.opus\n"

    def test_format_decides_match(self, synchronizer, fake_client, sample_items, make_target):
        """Test an .opus file does not satisfy a video target"""
        a = sample_items[0]
        target = make_target(media_format=MediaFormat.VIDEO)
        target.location.mkdir()
        (target.location / item_filename(a, MediaFormat.AUDIO)).touch()
        fake_client.playlists["PL1"] = [a]

        result = synchronizer.sync_target(target)

        assert result.synced == 1
        assert fake_client.fetch_calls[0][2] is MediaFormat.VIDEO
        assert (target.location / item_filename(a, MediaFormat.VIDEO)).exists()

    def test_snapshot_is_taken_before_downloads(self, synchronizer, fake_client, make_target):
        """Test a file created during the run is not treated as already present"""
        item = RemoteItem(id="dup", title="Twice")
        target = make_target()
        fake_client.playlists["PL1"] = [item, item]

        result = synchronizer.sync_target(target)

        assert fake_client.fetched_ids() == ["dup", "dup"]
        assert result.synced == 2

    def test_verbose_is_passed_to_fetch(self, fake_client, sample_items, make_target):
        target = make_target()
        fake_client.playlists["PL1"] = sample_items[:1]

        Synchronizer(fake_client, verbose=True, show_progress=False).sync_target(target)

        assert fake_client.fetch_calls[0][3] is True

    def test_playlist_id_is_passed_to_fetch(self, synchronizer, fake_client, sample_items, make_target):
        fake_client.playlists["PLmix"] = sample_items[:2]

        synchronizer.sync_target(make_target(playlist_id="PLmix"))

        assert fake_client.fetch_playlist_ids == ["PLmix", "PLmix"]

    def test_multiline_title_stays_on_one_index_line(self, synchronizer, fake_client, make_target):
        target = make_target()
        fake_client.playlists["PL1"] = [RemoteItem(id="nl", title="First\nSecond")]

        synchronizer.sync_target(target)

        assert read_index(target) == [str(target.location / "First Second [nl].opus")]

    def test_listing_error_aborts_before_any_fetch(self, synchronizer, fake_client, make_target):
        target = make_target()
        fake_client.listing_errors["PL1"] = ListingError("boom")

        with pytest.raises(ListingError) as exc_info:
            synchronizer.sync_target(target)

        assert exc_info.value.details["playlist_id"] == "PL1"
        assert fake_client.fetch_calls == []
        assert not index_path_for(target.location).exists()

    def test_location_is_a_file(self, synchronizer, fake_client, sample_items, make_target):
        target = make_target()
        target.location.write_text("not a directory", encoding="utf-8")
        fake_client.playlists["PL1"] = sample_items

        with pytest.raises(DirectoryError):
            synchronizer.sync_target(target)

    def test_root_location_with_index_is_rejected(self, synchronizer, fake_client, sample_items):
        target = SyncTarget(
            playlist_id="PL1",
            location=Path("/"),
            media_format=MediaFormat.AUDIO,
            save_playlist=True,
        )
        fake_client.playlists["PL1"] = sample_items

        with pytest.raises(DirectoryError):
            synchronizer.sync_target(target)

        assert fake_client.fetch_calls == []


class TestSyncAll:
    """Test multi-playlist runs"""

    def test_failed_target_does_not_stop_the_run(self, synchronizer, fake_client, sample_items, make_target):
        broken = make_target(playlist_id="PLbroken", name="broken")
        working = make_target(playlist_id="PL1", name="working")
        fake_client.listing_errors["PLbroken"] = ListingError("private playlist")
        fake_client.playlists["PL1"] = sample_items

        report = synchronizer.sync_all([broken, working])

        assert [result.target for result in report.results] == [broken, working]
        assert report.ok is False
        assert report.failed_targets[0].target == broken
        assert isinstance(report.failed_targets[0].error, ListingError)
        assert report.results[1].synced == 3
        assert report.total_synced == 3

    def test_index_write_error_aborts_only_its_target(self, synchronizer, fake_client, sample_items, make_target):
        """Test an unwritable index stops its playlist before any fetch and the run goes on"""
        broken = make_target(playlist_id="PLbroken", name="broken")
        working = make_target(playlist_id="PL1", name="working")
        index_path_for(broken.location).mkdir(parents=True)
        fake_client.playlists["PLbroken"] = [RemoteItem(id="zzzzzzzzzzz", title="Never")]
        fake_client.playlists["PL1"] = sample_items

        report = synchronizer.sync_all([broken, working])

        error = report.results[0].error
        assert isinstance(error, IndexWriteError)
        assert error.details["playlist_id"] == "PLbroken"
        assert "zzzzzzzzzzz" not in fake_client.fetched_ids()
        assert report.results[1].ok is True
        assert report.results[1].synced == 3
        assert len(index_path_for(working.location).read_text(encoding="utf-8").splitlines()) == 3

    def test_fetch_failures_do_not_fail_the_run(self, synchronizer, fake_client, sample_items, make_target):
        fake_client.playlists["PL1"] = sample_items
        fake_client.failing_ids.update(item.id for item in sample_items)

        report = synchronizer.sync_all([make_target()])

        assert report.ok is True
        assert report.total_synced == 0
        assert len(report.results[0].failed) == 3

    def test_no_targets(self, synchronizer):
        report = synchronizer.sync_all([])

        assert report.ok is True
        assert report.results == []


class TestFormatSyncMessage:
    """Test the completion message"""

    @pytest.mark.parametrize("count,expected", [
        (0, "0 new songs successfully synced to /music/mix"),
        (1, "1 new song successfully synced to /music/mix"),
        (2, "2 new songs successfully synced to /music/mix"),
    ])
    def test_singular_and_plural(self, count, expected):
        assert format_sync_message(count, Path("/music/mix")) == expected
