# src/ds_app/modules/organize/engine.py
from __future__ import annotations

import os
from collections.abc import Callable
from enum import Enum
from typing import Any

from ds_app.core.errors import BadRequest, ErrorKind, OrganizeError, UserCancelled
from ds_app.core.logging import get_logger
from ds_app.core.progress import LoggingSink, ProgressSink, ProgressTracker, Severity

from .classifier import DateClassifier
from .scanner import PhotoScanner
from .schemas import (
    OrganizeOptions,
    OrganizePlan,
    OrganizeReport,
    PhotoEntry,
    TransferOutcome,
)
from .storage import LocalStorage, Storage

log = get_logger(__name__)


class EngineState(str, Enum):
    idle = "idle"
    scanning = "scanning"
    classifying = "classifying"
    transferring = "transferring"
    reporting = "reporting"


class OrganizeEngine:
    """
    scan -> classify -> group -> create date folders -> copy/move.

    Every phase runs to completion before the next one starts and storage calls
    are issued one at a time. Progress is counted in units: one per photo for
    the date pass and one per photo for the transfer pass.
    """

    def __init__(
        self,
        storage: Storage | None = None,
        sink: ProgressSink | None = None,
        scanner: PhotoScanner | None = None,
        classifier: DateClassifier | None = None,
    ) -> None:
        self.storage = storage or LocalStorage()
        self.sink = sink or LoggingSink()
        self.scanner = scanner or PhotoScanner(self.storage)
        self.classifier = classifier or DateClassifier(self.storage)
        self.state = EngineState.idle

    # ---- trigger boundary ---------------------------------------------------------

    def run(
        self,
        select_source: Callable[[], Any],
        options: OrganizeOptions | None = None,
    ) -> OrganizeReport | None:
        """
        Ask for a folder, then organize it. Never raises: a cancelled selection is
        logged as info, anything unexpected as an error, and no report is returned.
        """
        try:
            root = select_source()
            self.sink.log(f"Selected folder: {root}", Severity.success)
            return self.organize(root, options)
        except UserCancelled as e:
            self.sink.log(str(e), Severity.info)
        except Exception as e:
            err = OrganizeError(ErrorKind.UNEXPECTED, f"Error: {e}", cause=e)
            log.exception("Organize run aborted")
            self.sink.log(str(err), Severity.error)
        return None

    # ---- operations ---------------------------------------------------------------

    def plan(self, root: Any) -> OrganizePlan:
        """Scan and classify only; nothing is written."""
        self._claim()
        try:
            tracker = ProgressTracker(self.sink)
            tracker.reset(0)
            self.state = EngineState.scanning
            entries = self.scanner.scan(root)
            tracker.reset(len(entries))
            self.state = EngineState.classifying
            groups = self.classifier.classify(entries, tracker)
            return OrganizePlan(
                source=str(root),
                groups={k: [e.name for e in v] for k, v in groups.items()},
            )
        finally:
            self.state = EngineState.idle

    def organize(
        self, root: Any, options: OrganizeOptions | None = None
    ) -> OrganizeReport | None:
        """
        Sort the top-level photos of `root` into YYYY-MM-DD folders.

        Returns None when there is nothing to organize. Per-file and per-folder
        failures end up in the report; other errors propagate.
        """
        self._claim()
        try:
            return self._organize(root, options or OrganizeOptions())
        finally:
            self.state = EngineState.idle

    # ---- phases -------------------------------------------------------------------

    def _claim(self) -> None:
        # not thread-safe: check-then-set without a lock
        if self.state is not EngineState.idle:
            raise BadRequest(f"An organize run is already in progress ({self.state.value}).")
        self.state = EngineState.scanning

    def _organize(self, root: Any, options: OrganizeOptions) -> OrganizeReport | None:
        tracker = ProgressTracker(self.sink)
        tracker.reset(0)
        log.info("Organizing %s (copy_mode=%s)", root, options.copy_mode)

        self.state = EngineState.scanning
        self.sink.log("Scanning for photos…", Severity.info)
        entries = self.scanner.scan(root)
        if not entries:
            err = OrganizeError(ErrorKind.NO_ELIGIBLE_FILES, f"No photos found in {root}")
            self.sink.log(str(err), Severity.error)
            return None
        self.sink.log(f"Found {len(entries)} photo(s)", Severity.success)

        self.state = EngineState.classifying
        tracker.reset(2 * len(entries))
        self.sink.log("Reading photo dates…", Severity.info)
        groups = self.classifier.classify(entries, tracker)
        self.sink.log(f"Classified into {len(groups)} date(s)", Severity.success)

        self.state = EngineState.transferring
        destination, outcomes, created = self._transfer(root, groups, options, tracker)

        self.state = EngineState.reporting
        success = sum(1 for o in outcomes if o.ok)
        report = OrganizeReport(
            source=str(root),
            destination=str(destination),
            copy_mode=options.copy_mode,
            folder_count=len(groups),
            folders_created=created,
            success_count=success,
            error_count=len(outcomes) - success,
            warning_count=sum(
                1 for o in outcomes if o.ok and o.error_kind is ErrorKind.ORIGINAL_DELETION
            ),
            outcomes=outcomes,
        )
        self.sink.log(
            f"Done. Succeeded: {report.success_count}, failed: {report.error_count}",
            Severity.success,
        )
        log.info(
            "Organized %s: folders=%d ok=%d failed=%d",
            root,
            report.folder_count,
            report.success_count,
            report.error_count,
        )
        return report

    def _transfer(
        self,
        root: Any,
        groups: dict[str, list[PhotoEntry]],
        options: OrganizeOptions,
        tracker: ProgressTracker,
    ) -> tuple[Any, list[TransferOutcome], int]:
        action = "Copying" if options.copy_mode else "Moving"
        self.sink.log(f"{action} photos into date folders…", Severity.info)
        outcomes: list[TransferOutcome] = []

        try:
            destination = self._destination_root(root, options)
        except Exception as e:
            err = OrganizeError(
                ErrorKind.FOLDER_CREATION,
                f"Could not create folder {options.subfolder_name}",
                name=options.subfolder_name,
                cause=e,
            )
            self._report_failure(err)
            for key, group in groups.items():
                outcomes.extend(self._failed_group(key, group, err))
                tracker.advance(len(group))
            return os.path.join(str(root), options.subfolder_name), outcomes, 0

        created = 0
        for key, group in groups.items():
            try:
                folder = self.storage.ensure_subfolder(destination, key)
            except Exception as e:
                err = OrganizeError(
                    ErrorKind.FOLDER_CREATION,
                    f"Could not create folder {key}",
                    name=key,
                    cause=e,
                )
                self._report_failure(err)
                outcomes.extend(self._failed_group(key, group, err))
                tracker.advance(len(group))
                continue

            created += 1
            self.sink.log(f"Created folder: {key}", Severity.info)
            for entry in group:
                outcomes.append(self._transfer_one(root, folder, key, entry, options))
                tracker.advance()

        return destination, outcomes, created

    def _destination_root(self, root: Any, options: OrganizeOptions) -> Any:
        if not options.create_subfolder:
            return root
        return self.storage.ensure_subfolder(root, options.subfolder_name)

    def _report_failure(
        self, err: OrganizeError, severity: Severity = Severity.error, sep: str = ": "
    ) -> None:
        self.sink.log(f"{err}{sep}{err.reason}", severity)
        log.warning("%s on %s: %s", err.kind.value, err.name, err.reason)

    @staticmethod
    def _failed_group(
        key: str, group: list[PhotoEntry], err: OrganizeError
    ) -> list[TransferOutcome]:
        return [
            TransferOutcome(
                name=entry.name,
                date_key=key,
                ok=False,
                error_kind=err.kind,
                reason=err.reason,
            )
            for entry in group
        ]

    def _transfer_one(
        self,
        root: Any,
        folder: Any,
        key: str,
        entry: PhotoEntry,
        options: OrganizeOptions,
    ) -> TransferOutcome:
        try:
            data = self.storage.read_all(entry.handle)
            written = self.storage.write_all(folder, entry.name, data)
        except Exception as e:
            verb = "Copy" if options.copy_mode else "Move"
            err = OrganizeError(
                ErrorKind.PER_FILE_TRANSFER,
                f"{verb} failed: {entry.name}",
                name=entry.name,
                cause=e,
            )
            self._report_failure(err, sep=" - ")
            return TransferOutcome(
                name=entry.name,
                date_key=key,
                ok=False,
                error_kind=err.kind,
                reason=err.reason,
            )

        destination = str(written) if written is not None else None
        if options.copy_mode:
            self.sink.log(f"Copied: {entry.name}", Severity.success)
            return TransferOutcome(
                name=entry.name, date_key=key, ok=True, destination=destination
            )

        try:
            self.storage.remove(root, entry.name)
        except Exception as e:
            err = OrganizeError(
                ErrorKind.ORIGINAL_DELETION,
                f"Warning: {entry.name} was copied but the original could not be deleted",
                name=entry.name,
                cause=e,
            )
            self._report_failure(err, Severity.warning, sep=" - ")
            return TransferOutcome(
                name=entry.name,
                date_key=key,
                ok=True,
                error_kind=err.kind,
                reason=err.reason,
                destination=destination,
            )

        self.sink.log(f"Moved: {entry.name}", Severity.success)
        return TransferOutcome(
            name=entry.name, date_key=key, ok=True, destination=destination
        )
