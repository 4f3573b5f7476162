# src\ds_app\commands\organize.py
from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ds_app.commands.common import prompt_existing_dir, prompt_mode, resolve_dry_run
from ds_app.core.config import get_settings
from ds_app.core.errors import UserCancelled
from ds_app.core.rich_progress import make_organize_progress
from ds_app.modules.organize.engine import OrganizeEngine
from ds_app.modules.organize.schemas import OrganizeOptions, OrganizePlan, OrganizeReport


class OrganizeRunner:
    def __init__(
        self,
        src_root: Path | None,
        options: OrganizeOptions,
        dry_run: bool,
        console: Console | None = None,
    ) -> None:
        self.src_root = src_root
        self.options = options
        self.dry_run = dry_run
        self.console = console or Console()

    def _select(self) -> Path:
        try:
            return prompt_existing_dir(self.src_root, "source")
        except typer.Abort as e:
            raise UserCancelled() from e

    def run(self) -> OrganizeReport | None:
        try:
            root = self._select()
        except UserCancelled as e:
            self.console.print(str(e), style="dim")
            return None

        # PLAN first, then offer to apply
        if self.dry_run:
            progress, sink = make_organize_progress(self.console, label="Reading dates")
            with progress:
                planned = OrganizeEngine(sink=sink).plan(root)
            if not planned.groups:
                self.console.print("No photos found.", style="dim")
                return None
            self._render_plan(planned)
            if not typer.confirm("Apply now?", default=False):
                return None

        progress, sink = make_organize_progress(self.console)
        with progress:
            report = OrganizeEngine(sink=sink).run(lambda: root, self.options)
        if report is not None:
            self._render_report(report)
        return report

    def _render_plan(self, planned: OrganizePlan) -> None:
        typer.echo(
            f"[PLAN] photos={planned.photo_count} folders={len(planned.groups)}"
        )
        for key, names in planned.groups.items():
            typer.echo(f"{key}/  ({len(names)})")
            for name in names:
                typer.echo(f"  {name}")

    def _render_report(self, report: OrganizeReport) -> None:
        mode = "Copied" if report.copy_mode else "Moved"
        table = Table(title="Done", show_header=False)
        table.add_column("", style="bold")
        table.add_column("", justify="right")
        table.add_row("Date folders", str(report.folder_count))
        table.add_row(mode, f"[green]{report.success_count}[/green]")
        if report.error_count:
            table.add_row("Failed", f"[red]{report.error_count}[/red]")
        if report.warning_count:
            table.add_row("Originals kept", f"[yellow]{report.warning_count}[/yellow]")
        table.add_row("Destination", report.destination)
        self.console.print(table)


def register(app: typer.Typer) -> None:
    """Attach the organize command to the given Typer app."""

    @app.command(
        "organize", help="Sort the photos of a folder into YYYY-MM-DD subfolders."
    )
    def organize_cmd(
        src_root: Path | None = typer.Argument(
            None, exists=False, file_okay=False, dir_okay=True
        ),
        copy: bool | None = typer.Option(
            None, "--copy/--move", help="Copy photos instead of moving them."
        ),
        subfolder: bool | None = typer.Option(
            None,
            "--subfolder/--no-subfolder",
            help="Create the date folders inside one top-level subfolder.",
        ),
        subfolder_name: str | None = typer.Option(
            None, "--subfolder-name", help="Name of that top-level subfolder."
        ),
        apply: bool = typer.Option(False, "--apply", help="Execute changes"),
        plan: bool = typer.Option(False, "--plan", help="Plan only (dry-run)"),
    ):
        settings = get_settings()

        # Prompt for any missing inputs (the runner asks for the source folder)
        if copy is None:
            copy = typer.confirm(
                "Copy photos (keep originals) instead of moving them?",
                default=settings.COPY_MODE,
            )
        if subfolder is None:
            subfolder = typer.confirm(
                "Put the date folders inside one subfolder?",
                default=settings.CREATE_SUBFOLDER,
            )
        if not apply and not plan:
            apply, plan = prompt_mode()

        try:
            options = OrganizeOptions.from_settings(
                settings,
                copy_mode=copy,
                create_subfolder=subfolder,
                subfolder_name=subfolder_name,
            )
        except ValidationError as e:
            raise typer.BadParameter(
                e.errors()[0]["msg"], param_hint="--subfolder-name"
            ) from e
        dry_run = resolve_dry_run(apply, plan)
        report = OrganizeRunner(src_root, options, dry_run).run()
        if report is not None and report.error_count:
            raise typer.Exit(code=1)
