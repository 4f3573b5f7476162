# src/ds_app/modules/organize/classifier.py
from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime

from ds_app.core.logging import get_logger
from ds_app.core.progress import ProgressTracker

from .dates import format_date_key
from .extractor import MetadataDateExtractor
from .schemas import PhotoEntry
from .storage import Storage

log = get_logger(__name__)


class DateClassifier:
    """
    Resolve one date per entry: embedded metadata, else the file's last-modified
    time, else the current time. Resolution never fails.
    """

    def __init__(
        self,
        storage: Storage,
        extract: Callable[[bytes], date | None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.storage = storage
        self.extract = extract or MetadataDateExtractor()
        self.clock = clock

    def resolve_date(self, entry: PhotoEntry) -> date | datetime:
        try:
            found = self.extract(self.storage.read_all(entry.handle))
            if found is not None:
                return found
        except Exception as e:
            log.debug("metadata read failed for %s: %s", entry.name, e)

        try:
            return self.storage.last_modified(entry.handle)
        except Exception as e:
            log.warning("No date for %s (%s); using current time", entry.name, e)
            return self.clock()

    def date_key(self, entry: PhotoEntry) -> str:
        return format_date_key(self.resolve_date(entry))

    def classify(
        self, entries: Iterable[PhotoEntry], tracker: ProgressTracker | None = None
    ) -> dict[str, list[PhotoEntry]]:
        groups: dict[str, list[PhotoEntry]] = {}
        for entry in entries:
            groups.setdefault(self.date_key(entry), []).append(entry)
            if tracker:
                tracker.advance()
        return groups
