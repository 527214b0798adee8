"""
Command line entry point for building the event-function catalog.

Examples::

    docstoapi scan ~/Unity/5.6/Editor/Data=5.6 ~/Unity/2017.1/Editor/Data=2017.1 -o api.xml
    docstoapi --config docstoapi.toml scan docs=2018.2 --format json
    docstoapi config show
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from packaging.version import InvalidVersion, Version
from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .errors import CLIValidationError, DocsToApiError, format_cli_error
from .logging import configure_logging
from .parser import ApiParser, ScanSummary
from .settings import OutputFormat, ScanSettings, load_settings

__all__ = ["app", "main", "parse_root_spec"]

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    help="[bold]DocsToApi[/bold]: build a versioned catalog of engine event functions from script reference HTML.",
)

config_app = typer.Typer(no_args_is_help=True, rich_markup_mode="rich")
app.add_typer(config_app, name="config", help="Introspect configuration")

_stderr = Console(stderr=True)


def parse_root_spec(spec: str) -> Tuple[Path, Version]:
    """Split a ``ROOT=VERSION`` argument."""

    root, sep, raw_version = spec.rpartition("=")
    if not sep or not root or not raw_version:
        raise CLIValidationError(
            option="ROOTS",
            message=f"'{spec}' is not of the form ROOT=VERSION",
            hint="e.g. ~/Unity/2017.1/Editor/Data=2017.1",
        )
    try:
        version = Version(raw_version.strip())
    except InvalidVersion:
        raise CLIValidationError(
            option="ROOTS",
            message=f"'{raw_version}' is not a valid version",
            hint="use dotted release numbers such as 5.6 or 2017.1.0",
        ) from None
    return Path(root).expanduser(), version


def _fail(message: str) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.callback()
def root_callback(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path], typer.Option("--config", help="TOML, YAML or JSON settings file")
    ] = None,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)")
    ] = None,
    log_format: Annotated[
        Optional[str], typer.Option("--log-format", help="Logging format (console|json)")
    ] = None,
) -> None:
    """
    Layer configuration and set up logging.

    [bold yellow]Precedence:[/bold yellow] CLI args > ENV vars > config file > defaults
    """
    try:
        settings = load_settings(config, log_level=log_level, log_format=log_format)
    except (DocsToApiError, ValidationError) as exc:
        _fail(f"✗ Configuration error: {exc}")
    configure_logging(settings.log_level.value, settings.log_format.value)
    ctx.obj = settings


def _summary_table(summaries: List[ScanSummary], parser: ApiParser) -> Table:
    table = Table(title="Documentation sweep")
    table.add_column("Version")
    table.add_column("Pages", justify="right")
    table.add_column("Type pages", justify="right")
    table.add_column("Event functions", justify="right")
    for summary in summaries:
        table.add_row(
            str(summary.version),
            str(summary.pages),
            str(summary.type_pages),
            str(summary.observations),
        )
    table.caption = f"{len(parser.catalog)} types in catalog"
    return table


@app.command("scan")
def scan(
    ctx: typer.Context,
    roots: Annotated[
        List[str], typer.Argument(help="Documentation roots as ROOT=VERSION pairs")
    ],
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write the catalog here (default: stdout)")
    ] = None,
    fmt: Annotated[
        Optional[OutputFormat], typer.Option("--format", help="Export format (xml|json)")
    ] = None,
    reference_path: Annotated[
        Optional[Path],
        typer.Option("--reference-path", help="Script reference directory inside each root"),
    ] = None,
    workers: Annotated[
        Optional[int], typer.Option("--workers", min=1, help="Threads used to extract pages")
    ] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Hide progress and summary")] = False,
) -> None:
    """Scan documentation roots, oldest release first, and export the merged catalog."""

    base: ScanSettings = ctx.obj
    overrides = {
        "output_format": fmt,
        "script_reference_path": reference_path,
        "workers": workers,
    }
    try:
        settings = ScanSettings(
            **{
                **base.model_dump(),
                **{key: value for key, value in overrides.items() if value is not None},
            }
        )
    except ValidationError as exc:
        _fail(f"✗ Configuration error: {exc}")
    try:
        targets = sorted((parse_root_spec(spec) for spec in roots), key=lambda item: item[1])
    except CLIValidationError as exc:
        _fail(format_cli_error(exc))

    parser = ApiParser(
        script_reference_path=settings.script_reference_path, workers=settings.workers
    )
    summaries: List[ScanSummary] = []
    try:
        with Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=_stderr,
            disable=quiet,
        ) as progress:
            for root, version in targets:
                task = progress.add_task(f"{version}", total=None)

                def report(completed: int, total: int, task=task) -> None:
                    progress.update(task, completed=completed, total=total)

                summaries.append(parser.parse_folder(root, version, progress=report))
    except DocsToApiError as exc:
        _fail(f"✗ {exc}")

    if output is None:
        parser.export(sys.stdout.buffer, settings.output_format)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("wb") as stream:
            parser.export(stream, settings.output_format)

    if not quiet:
        _stderr.print(_summary_table(summaries, parser))


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display the effective configuration after layering."""

    settings: ScanSettings = ctx.obj
    typer.echo(json.dumps(settings.as_dict(), indent=2))


def main() -> None:
    app()
