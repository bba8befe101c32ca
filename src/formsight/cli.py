"""formsight CLI - typer application entry point."""

from __future__ import annotations

import atexit
import json
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from formsight.config import EngineConfig, resolve_config
from formsight.engine.classifier import is_blocking
from formsight.engine.messages import resolve_message_text
from formsight.engine.visibility import resolve_display_strategy
from formsight.engine.walker import format_path
from formsight.errors import FormsightError
from formsight.inspection import FormAuditReport, inspect_form
from formsight.models.field import DisplayStrategy, SubmissionStatus
from formsight.models.messages import ValidationMessage
from formsight.observability import close_file_logging, configure_logging, get_logger
from formsight.static import load_form_document

# Load environment variables (FORMSIGHT_*) from a .env file
load_dotenv()

app = typer.Typer(
    name="formsight",
    help="formsight: audit which validation errors a display strategy shows.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

STRATEGY_DESCRIPTIONS: dict[DisplayStrategy, str] = {
    DisplayStrategy.IMMEDIATE: "Show errors as soon as a field is invalid.",
    DisplayStrategy.ON_TOUCH: "Show after the field is touched or a submit was attempted.",
    DisplayStrategy.ON_SUBMIT: "Show only after a submit was attempted.",
    DisplayStrategy.MANUAL: "Never shown automatically; the caller decides.",
}

# Global state set by the callback, used by commands
_config_path: Path | None = None


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Engine config file (default: ~/.config/formsight/config.yaml).",
            envvar="FORMSIGHT_CONFIG",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write every log event to this JSONL file."),
    ] = None,
) -> None:
    """formsight: audit which validation errors a display strategy shows."""
    global _config_path
    _config_path = config

    configure_logging(verbosity=verbose, log_file=log_file)
    if log_file is not None:
        atexit.register(close_file_logging)


def _load_config() -> EngineConfig:
    try:
        return resolve_config(_config_path)
    except FormsightError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def _print_report(report: FormAuditReport, config: EngineConfig, title: str) -> None:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Kind")
    table.add_column("Message")
    table.add_column("Severity")
    table.add_column("Visible")

    for result in report.field_results:
        _add_result_row(table, format_path(result.path), result.message, result.visible, config)
    for result in report.root_results:
        _add_result_row(table, "<form>", result.message, result.visible, config)

    console.print()
    if report.all_results:
        console.print(table)
    else:
        console.print("[green]✓[/green] No validation messages.")

    console.print()
    console.print(f"Strategy: [bold]{report.strategy}[/bold]  Submission: {report.submission}")
    console.print(
        f"Blocking: {report.visible_blocking_count}/{len(report.blocking)} visible  "
        f"Warnings: {report.visible_warning_count}/{len(report.warnings)} visible"
    )
    if report.pending:
        console.print("[yellow]Async validation pending; results may change.[/yellow]")


def _add_result_row(
    table: Table, where: str, message: ValidationMessage, visible: bool, config: EngineConfig
) -> None:
    text = resolve_message_text(
        message, config.messages, strip_warning_prefix=config.strip_warning_prefix
    )
    severity = "[red]error[/red]" if is_blocking(message) else "[yellow]warning[/yellow]"
    shown = "[green]yes[/green]" if visible else "[dim]no[/dim]"
    table.add_row(escape(where), escape(message.kind), escape(text), severity, shown)


@app.command()
def version() -> None:
    """Show version information."""
    from formsight import __version__

    console.print(f"formsight v{__version__}")


@app.command()
def audit(
    snapshot: Annotated[
        Path,
        typer.Argument(help="YAML or JSON form snapshot document."),
    ],
    strategy: Annotated[
        DisplayStrategy | None,
        typer.Option("--strategy", "-s", help="Display strategy (overrides the document)."),
    ] = None,
    submission: Annotated[
        SubmissionStatus | None,
        typer.Option("--submission", help="Submission status (overrides the document)."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the report as JSON."),
    ] = False,
    fail_on_errors: Annotated[
        bool,
        typer.Option("--fail-on-errors", help="Exit with code 1 if any error is visible."),
    ] = False,
) -> None:
    """List every validation message in a form snapshot and whether it shows."""
    config = _load_config()
    try:
        document = load_form_document(snapshot)
        effective = resolve_display_strategy(
            strategy, document.strategy, config.effective_strategy()
        )
    except FormsightError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    log.debug("audit_started", snapshot=str(snapshot), strategy=str(effective))
    report = inspect_form(
        document.root,
        effective,
        submission if submission is not None else document.submission,
        model=document.model,
    )

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report, config, title=f"Validation audit: {snapshot.name}")

    if fail_on_errors and report.visible_blocking_count > 0:
        raise typer.Exit(1)


@app.command()
def strategies() -> None:
    """Describe the available display strategies."""
    config = _load_config()
    try:
        default = config.effective_strategy()
    except FormsightError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    table = Table(title="Display strategies")
    table.add_column("Strategy", style="cyan")
    table.add_column("Behaviour")
    table.add_column("Default", style="bold")
    for name, description in STRATEGY_DESCRIPTIONS.items():
        table.add_row(str(name), description, "✓" if name is default else "")

    console.print()
    console.print(table)
    console.print()
