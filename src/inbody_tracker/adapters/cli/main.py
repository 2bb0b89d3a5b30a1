"""
adapters.cli.main - CLI adapter for the InBody tracker.

Mirrors inbody_tracker/adapters/rest/ but for terminal use. Uses the same
ServiceFactory and services as the REST API so validation, insights and
trends are identical.

Commands
--------
  extract    Read an InBody report (image or PDF), review the values and save
  add        Enter a measurement manually
  history    List saved measurements, oldest first
  insights   Change per metric over a window (range, rolling, calendar_month)
  attend     Log trained / rest / missed for a day
  adherence  Attendance streak, consistency and risk flags
  dashboard  Insights, trends and adherence in one view

Usage
-----
  inbody-tracker extract report.jpg --owner alice
  INBODY_OWNER_ID=alice inbody-tracker insights --window rolling
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.prompt import Confirm, Prompt
from rich.table import Table

from inbody_tracker import __version__
from inbody_tracker.application.context import SessionContext
from inbody_tracker.application.dto import MeasurementDraft
from inbody_tracker.application.services.record_store import INSIGHT_WINDOWS
from inbody_tracker.domain.exceptions import StorageUnavailable, ValidationError
from inbody_tracker.domain.models import (
    AdherenceSummary,
    ExtractionStatus,
    Favorability,
    Insight,
)
from inbody_tracker.factory import ServiceFactory
from inbody_tracker.infrastructure.config import Settings

T = TypeVar("T")

console = Console()
app = typer.Typer(
    help="InBody body-composition tracker",
    add_completion=False,
    no_args_is_help=True,
)

_OWNER_OPTION = typer.Option(
    ..., "--owner", "-o",
    envvar="INBODY_OWNER_ID",
    help="Owner id of the records (defaults to $INBODY_OWNER_ID).",
)

_FIELD_LABELS = {
    "weight_kg": "Weight (kg)",
    "skeletal_muscle_kg": "Skeletal muscle (kg)",
    "body_fat_percentage": "Body fat (%)",
    "date": "Date (YYYY-MM-DD)",
}

_FAVORABILITY_STYLE = {
    Favorability.FAVORABLE: "green",
    Favorability.UNFAVORABLE: "red",
    Favorability.NEUTRAL: "dim",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def _make_factory() -> ServiceFactory:
    config = Settings.from_env()
    logging.basicConfig(level=config.log_level)
    factory = ServiceFactory(config)
    await factory.initialize()
    return factory


def _run(work: Callable[[ServiceFactory], Awaitable[T]]) -> T:
    """Build the factory, run one command and translate storage failures."""
    async def _main() -> T:
        factory = await _make_factory()
        return await work(factory)

    try:
        return asyncio.run(_main())
    except StorageUnavailable:
        console.print(
            "[bold red]Storage is unavailable.[/bold red] "
            "Nothing was changed; please retry in a moment."
        )
        raise typer.Exit(code=1)


def _print_field_errors(exc: ValidationError) -> None:
    for field_name, message in exc.field_errors.items():
        label = _FIELD_LABELS.get(field_name, field_name)
        console.print(f"  [bold red]{label}:[/bold red] {message}")


def _fmt_change(value: Optional[float], unit: str) -> str:
    if value is None:
        return "[dim]n/a[/dim]"
    return f"{value:+.1f} {unit}"


def _insight_table(title: str, insight: Insight) -> Table:
    t = Table(title=title, box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Metric", style="bold")
    t.add_column("Change")
    t.add_row("Weight", _fmt_change(insight.weight_change, "kg"))
    t.add_row("Skeletal muscle", _fmt_change(insight.muscle_change, "kg"))
    t.add_row("Body fat", _fmt_change(insight.fat_change, "%"))
    t.add_row("Period", f"{insight.period_days} days")
    return t


def _adherence_panel(summary: AdherenceSummary) -> Panel:
    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Trained / rest / missed",
              f"{summary.trained_days} / {summary.rest_days} / {summary.missed_days}")
    t.add_row("Current streak", f"{summary.current_streak} days")
    t.add_row("Consistency", f"{summary.consistency_score}%")
    t.add_row("Best day", summary.best_day or "[dim]n/a[/dim]")
    t.add_row("Last trained",
              summary.last_trained_date.isoformat() if summary.last_trained_date else "[dim]never[/dim]")
    for flag in summary.risk_flags:
        t.add_row("[bold yellow]Risk[/bold yellow]", flag)
    return Panel(t, title="Adherence", border_style="blue")


def _review_draft(draft: MeasurementDraft, only: Optional[list[str]] = None) -> dict[str, str]:
    """Prompt for each draft field, offering the current value as default."""
    values = draft.to_dict()
    answers = {}
    for field_name in only or ["date", "weight_kg", "skeletal_muscle_kg", "body_fat_percentage"]:
        answers[field_name] = Prompt.ask(
            f"[bold]{_FIELD_LABELS[field_name]}[/bold]",
            default=values[field_name] or None,
        )
    return answers


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"inbody-tracker v{__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Commands: Measurements
# ---------------------------------------------------------------------------

@app.command()
def extract(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="InBody report image or PDF."),
    owner: str = _OWNER_OPTION,
    save: bool = typer.Option(True, "--save/--no-save", help="Review and save after reading."),
) -> None:
    """Read an InBody report, review the extracted values and save them."""

    async def _work(factory: ServiceFactory) -> None:
        service = factory.get_ingestion_service()
        ctx = SessionContext(owner_id=owner, role="client")

        with Progress(
            TextColumn("[bold cyan]Reading report with {task.fields[provider]}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("ocr", total=100, provider=service.provider_name)
            outcome = await service.extract(
                ctx, file, on_progress=lambda pct: progress.update(task, completed=pct),
            )

        result = outcome.result
        status_style = {
            ExtractionStatus.COMPLETE: "green",
            ExtractionStatus.PARTIAL: "yellow",
            ExtractionStatus.FAILED: "red",
        }[result.status]
        t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        t.add_column("Field", style="bold")
        t.add_column("Value")
        for field_name in ("weight_kg", "skeletal_muscle_kg", "body_fat_percentage"):
            value = getattr(result, field_name)
            t.add_row(_FIELD_LABELS[field_name], "[dim]not found[/dim]" if value is None else f"{value:g}")
        t.add_row("Confidence", f"{result.confidence:.0%}")
        console.print(Panel(
            t,
            title=f"Extraction [{status_style}]{result.status.value}[/{status_style}]",
            border_style=status_style,
        ))
        if result.status is ExtractionStatus.FAILED:
            console.print("[yellow]Could not read the report. Enter the values manually.[/yellow]")
        elif result.status is ExtractionStatus.PARTIAL:
            console.print("[yellow]Some values are missing. Please complete them.[/yellow]")

        if not save:
            return

        answers = _review_draft(outcome.draft)
        while True:
            try:
                record = await service.save_draft(ctx, **answers)
            except ValidationError as exc:
                _print_field_errors(exc)
                answers = _review_draft(service.get_draft(ctx), only=list(exc.field_errors))
                continue
            except StorageUnavailable:
                console.print(
                    "[bold red]Storage is unavailable.[/bold red] "
                    "Your reviewed values are kept."
                )
                if not Confirm.ask("Retry saving?", default=True):
                    console.print("[dim]Measurement not saved.[/dim]")
                    raise typer.Exit(code=1)
                # The draft already holds the reviewed values.
                answers = {}
                continue
            break
        console.print(
            f"[bold green]Saved[/bold green] measurement for {record.date.isoformat()} "
            f"([dim]{record.source}[/dim])."
        )

    _run(_work)


@app.command()
def add(
    owner: str = _OWNER_OPTION,
    day: Optional[datetime] = typer.Option(
        None, "--date", "-d", formats=["%Y-%m-%d"], help="Measurement date (default: today).",
    ),
    weight: str = typer.Option(..., "--weight", "-w", help="Weight in kg."),
    muscle: str = typer.Option(..., "--muscle", "-m", help="Skeletal muscle mass in kg."),
    fat: str = typer.Option(..., "--fat", "-f", help="Body fat percentage."),
) -> None:
    """Enter a measurement manually. Replaces any measurement on the same date."""

    async def _work(factory: ServiceFactory) -> None:
        store = factory.create_record_store(owner)
        target = day.date() if day else factory.clock.now().date()
        try:
            record = await store.save(target, weight, muscle, fat)
        except ValidationError as exc:
            console.print("[bold red]Measurement not saved.[/bold red]")
            _print_field_errors(exc)
            raise typer.Exit(code=2)
        console.print(f"[bold green]Saved[/bold green] measurement for {record.date.isoformat()}.")

    _run(_work)


@app.command()
def history(owner: str = _OWNER_OPTION) -> None:
    """List saved measurements, oldest first."""

    async def _work(factory: ServiceFactory) -> None:
        store = factory.create_record_store(owner)
        records = await store.load()
        if not records:
            console.print("[dim]No measurements yet.[/dim]")
            return
        t = Table(title=f"InBody history ({len(records)})", box=box.SIMPLE)
        t.add_column("Date", style="bold")
        t.add_column("Weight (kg)", justify="right")
        t.add_column("Muscle (kg)", justify="right")
        t.add_column("Body fat (%)", justify="right")
        t.add_column("Source", style="dim")
        for r in records:
            t.add_row(
                r.date.isoformat(),
                f"{r.weight_kg:g}",
                f"{r.skeletal_muscle_kg:g}",
                f"{r.body_fat_percentage:g}",
                r.source,
            )
        console.print(t)

    _run(_work)


@app.command()
def insights(
    owner: str = _OWNER_OPTION,
    window: str = typer.Option("range", "--window", help="range, rolling or calendar_month."),
) -> None:
    """Show the change in each metric over a window."""
    if window not in INSIGHT_WINDOWS:
        console.print(f"[bold red]Unknown window[/bold red] '{window}'. "
                      f"Choose one of: {', '.join(INSIGHT_WINDOWS)}.")
        raise typer.Exit(code=2)

    async def _work(factory: ServiceFactory) -> None:
        store = factory.create_record_store(owner)
        await store.load()
        insight = store.insights_for(window)
        if not insight.has_data:
            console.print("[dim]At least two measurements are needed for insights.[/dim]")
        console.print(_insight_table(f"Insights ({window})", insight))

    _run(_work)


# ---------------------------------------------------------------------------
# Commands: Attendance
# ---------------------------------------------------------------------------

@app.command()
def attend(
    status: str = typer.Argument(..., help="trained, rest or missed."),
    owner: str = _OWNER_OPTION,
    day: Optional[datetime] = typer.Option(
        None, "--date", "-d", formats=["%Y-%m-%d"], help="Day to log (default: today).",
    ),
    notes: str = typer.Option("", "--notes", "-n"),
) -> None:
    """Log trained / rest / missed for a day."""

    async def _work(factory: ServiceFactory) -> None:
        service = factory.create_attendance_service()
        ctx = SessionContext(owner_id=owner, role="client")
        target: Optional[date] = day.date() if day else None
        try:
            record = await service.log(ctx, status, target, notes)
        except ValidationError as exc:
            _print_field_errors(exc)
            raise typer.Exit(code=2)
        console.print(f"Logged [bold]{record.status.value}[/bold] for {record.date.isoformat()}.")

    _run(_work)


@app.command()
def adherence(owner: str = _OWNER_OPTION) -> None:
    """Show attendance streak, consistency and risk flags."""

    async def _work(factory: ServiceFactory) -> None:
        summary = await factory.create_attendance_service().summary(owner)
        console.print(_adherence_panel(summary))

    _run(_work)


@app.command()
def dashboard(
    owner: str = _OWNER_OPTION,
    goal: Optional[str] = typer.Option(
        None, "--goal", "-g",
        help="lose_fat, gain_muscle, performance, general_fitness or other.",
    ),
) -> None:
    """Insights, goal-relative trends and adherence in one view."""

    async def _work(factory: ServiceFactory) -> None:
        data = await factory.create_dashboard_service().client_insights(owner, goal)

        console.print(Panel(
            f"[bold]{owner}[/bold]  goal: {data.goal or '[dim]not set[/dim]'}  "
            f"measurements: {data.record_count}",
            border_style="cyan",
        ))
        console.print(_insight_table("Overall", data.range_insight))
        console.print(_insight_table("Last 30 days", data.rolling_insight))

        t = Table(title="Trends", box=box.SIMPLE)
        t.add_column("Metric", style="bold")
        t.add_column("Trend")
        t.add_column("Reading")
        for overview in data.metrics:
            style = _FAVORABILITY_STYLE[overview.favorability]
            t.add_row(
                _FIELD_LABELS[overview.metric],
                overview.trend or "[dim]n/a[/dim]",
                f"[{style}]{overview.favorability.value}[/{style}]",
            )
        console.print(t)
        console.print(_adherence_panel(data.adherence))

    _run(_work)


# ---------------------------------------------------------------------------
# Global version option
# ---------------------------------------------------------------------------

@app.callback()
def _callback(
    version: bool = typer.Option(
        False, "--version", "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """InBody body-composition tracker"""


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
