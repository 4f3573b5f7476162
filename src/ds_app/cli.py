# src/ds_app/cli.py
from __future__ import annotations

import typer

from ds_app.commands.organize import register as register_organize
from ds_app.core.config import get_settings
from ds_app.core.logging import configure_logging
from ds_app.version import get_version

app = typer.Typer(help="Daysort CLI: sort photos into one folder per day")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (default: DS_LOG_LEVEL or INFO)."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True
    ),
) -> None:
    settings = get_settings()
    configure_logging(log_level or settings.LOG_LEVEL, json=settings.LOG_JSON)


register_organize(app)


if __name__ == "__main__":
    app()
