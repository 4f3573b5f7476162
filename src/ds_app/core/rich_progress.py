# src/ds_app/core/rich_progress.py
from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.text import Text

from ds_app.core.progress import ProgressSink, Severity

STYLES = {
    Severity.info: "cyan",
    Severity.success: "green",
    Severity.warning: "yellow",
    Severity.error: "bold red",
}


class RichProgressSink(ProgressSink):
    """Bridge engine ticks/log lines to a single Rich task plus timestamped console lines."""

    def __init__(self, progress: Progress, label: str = "Organizing") -> None:
        self.progress = progress
        self.label = label
        self.task_id: TaskID | None = None

    def tick(self, processed: int, total: int) -> None:
        if self.task_id is None:
            self.task_id = self.progress.add_task(self.label, total=total or None)
        self.progress.update(self.task_id, completed=processed, total=total or None)

    def log(self, message: str, severity: Severity = Severity.info) -> None:
        severity = Severity(severity)
        stamp = datetime.now().strftime("%H:%M:%S")
        line = Text(f"[{stamp}] ", style="dim")
        line.append(message, style=STYLES[severity])
        # progress.console prints above the live bar
        self.progress.console.print(line)


def make_organize_progress(
    console: Console, label: str = "Organizing"
) -> tuple[Progress, RichProgressSink]:
    """Standardized Rich progress layout + sink instance."""
    progress = Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TaskProgressColumn(),
        TextColumn("•"),
        TimeRemainingColumn(),
        console=console,
    )
    return progress, RichProgressSink(progress, label=label)
