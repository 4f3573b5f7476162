"""Tests for date resolution and grouping."""

from datetime import date, datetime

from conftest import RecordingSink, make_jpeg, write_photo
from ds_app.core.progress import ProgressTracker
from ds_app.modules.organize.classifier import DateClassifier
from ds_app.modules.organize.scanner import PhotoScanner
from ds_app.modules.organize.schemas import PhotoEntry
from ds_app.modules.organize.storage import LocalStorage


class BrokenStorage(LocalStorage):
    def read_all(self, handle):
        raise OSError("gone")

    def last_modified(self, handle):
        raise OSError("gone")


class TestResolveDate:
    """metadata -> last-modified -> now."""

    def test_metadata_wins(self, photo_dir):
        path = write_photo(
            photo_dir, "a.jpg", make_jpeg(original="2024:01:15 10:00:00"), mtime=datetime(2020, 5, 5, 12)
        )
        entry = PhotoEntry("a.jpg", path)
        assert DateClassifier(LocalStorage()).resolve_date(entry) == date(2024, 1, 15)

    def test_falls_back_to_mtime(self, photo_dir):
        mtime = datetime(2020, 5, 5, 12, 30)
        path = write_photo(photo_dir, "a.jpg", b"not a jpeg", mtime=mtime)
        resolved = DateClassifier(LocalStorage()).resolve_date(PhotoEntry("a.jpg", path))
        assert resolved == datetime.fromtimestamp(mtime.timestamp())

    def test_extractor_errors_fall_back_to_mtime(self, photo_dir):
        mtime = datetime(2021, 6, 1, 9)
        path = write_photo(photo_dir, "a.jpg", make_jpeg(), mtime=mtime)

        def explode(data):
            raise RuntimeError("parser bug")

        resolved = DateClassifier(LocalStorage(), extract=explode).resolve_date(PhotoEntry("a.jpg", path))
        assert resolved == datetime.fromtimestamp(mtime.timestamp())

    def test_last_resort_is_clock(self):
        now = datetime(2030, 1, 1, 8)
        classifier = DateClassifier(BrokenStorage(), clock=lambda: now)
        assert classifier.resolve_date(PhotoEntry("a.jpg", "nowhere")) == now
        assert classifier.date_key(PhotoEntry("a.jpg", "nowhere")) == "2030-01-01"


class TestClassify:
    def test_groups_partition_entries_in_scan_order(self, scenario_a):
        (scenario_a / "f4.jpg").write_bytes(make_jpeg(original="2024:01:15 06:00:00"))
        entries = PhotoScanner(LocalStorage()).scan(scenario_a)

        groups = DateClassifier(LocalStorage()).classify(entries)

        flattened = [e for group in groups.values() for e in group]
        assert sorted(e.name for e in flattened) == sorted(e.name for e in entries)
        assert len(flattened) == len(set(flattened)) == len(entries)
        for group in groups.values():
            order = [entries.index(e) for e in group]
            assert order == sorted(order)
        assert set(groups) == {"2024-01-15", "2024-02-01"}
        assert {e.name for e in groups["2024-01-15"]} == {"f1.jpg", "f2.jpg", "f4.jpg"}

    def test_one_tick_per_entry(self, scenario_a):
        sink = RecordingSink()
        tracker = ProgressTracker(sink)
        tracker.reset(6)
        entries = PhotoScanner(LocalStorage()).scan(scenario_a)

        DateClassifier(LocalStorage()).classify(entries, tracker)

        assert sink.ticks == [(0, 6), (1, 6), (2, 6), (3, 6)]
