"""
Command-line interface for fitarc analytics.

Provides commands for:
- Progress summaries (volume, movement balance, strength trends)
- Single-lift history
- Viewing and editing tracking preferences
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fitarc_analytics.aggregator import SessionAggregator
from fitarc_analytics.logger import setup_logger
from fitarc_analytics.schemas import (
    LiftId,
    RawSession,
    TrackingCategory,
    TrackingPreferences,
    WorkoutAnalytics,
)
from fitarc_analytics.selectors import (
    LiftHistoryView,
    MovementPatternView,
    StrengthTrendView,
    VolumeEntryView,
    build_lift_history,
    build_movement_balance_summary,
    build_strength_trends,
    build_weekly_volume_summary,
    get_overall_strength_delta,
    today_in_zone,
)
from fitarc_analytics.session_mapper import map_session_rows
from fitarc_analytics.settings import settings
from fitarc_analytics.tracking import (
    ExerciseCatalog,
    TrackingKeyError,
    TrackingPreferenceResolver,
    format_tracking_label,
)

# Initialize Typer app and Rich console
app = typer.Typer(
    help="FitArc Workout Analytics - training volume, movement balance and strength trends"
)
console = Console()
resolver = TrackingPreferenceResolver()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging before any command runs."""
    setup_logger(level="DEBUG" if verbose else settings.log_level, log_file=settings.log_file)


# ===== LOADING HELPERS =====


def _read_json(path: Path, what: str):
    try:
        with open(path) as f:
            return json.load(f)
    except Exception as e:
        console.print(f"[red]✗ Failed to load {what}: {e}[/red]")
        raise typer.Exit(1)


def _load_sessions(path: Path) -> List[RawSession]:
    """
    Load sessions from JSON.

    Accepts a list of sessions, a ``{"sessions": [...]}`` document, or raw
    backend rows (detected by their ``session_exercises`` key).
    """
    data = _read_json(path, "sessions")
    rows = data.get("sessions", []) if isinstance(data, dict) else data
    try:
        if rows and "session_exercises" in rows[0]:
            return map_session_rows(rows, time_zone=settings.time_zone)
        return [RawSession(**row) for row in rows]
    except Exception as e:
        console.print(f"[red]✗ Failed to load sessions: {e}[/red]")
        raise typer.Exit(1)


def _load_preferences(path: Optional[Path]) -> TrackingPreferences:
    if path is None or not path.exists():
        return TrackingPreferences()
    data = _read_json(path, "preferences")
    try:
        return TrackingPreferences(**data)
    except Exception as e:
        console.print(f"[red]✗ Failed to load preferences: {e}[/red]")
        raise typer.Exit(1)


def _load_default_weights(path: Optional[Path]) -> Dict[str, float]:
    if path is None:
        return {}
    data = _read_json(path, "default weights")
    try:
        return {str(k): float(v) for k, v in data.items()}
    except Exception as e:
        console.print(f"[red]✗ Failed to load default weights: {e}[/red]")
        raise typer.Exit(1)


def _aggregate(sessions_path: Path, defaults_path: Optional[Path]) -> WorkoutAnalytics:
    sessions = _load_sessions(sessions_path)
    analytics = SessionAggregator(_load_default_weights(defaults_path)).aggregate(sessions)
    console.print(
        f"✓ Loaded [green]{len(sessions)}[/green] sessions, "
        f"[green]{len(analytics.strength_snapshots)}[/green] strength snapshots"
    )
    return analytics


def _save_preferences(path: Path, preferences: TrackingPreferences) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(preferences.model_dump(), f, indent=2)


# ===== DISPLAY HELPER FUNCTIONS =====


def _display_label(key: str, label: str) -> str:
    """Title-case labels that fell back to the raw key."""
    return format_tracking_label(key) if label == key else label


def _display_volume(entries: List[VolumeEntryView], window_days: int):
    table = Table(title=f"Sets per Muscle Group (last {window_days} days)", box=box.ROUNDED)
    table.add_column("Muscle Group", style="cyan")
    table.add_column("Sets", justify="right", style="yellow")
    for entry in entries:
        table.add_row(_display_label(entry.key, entry.group), str(entry.sets))
    console.print(table)


def _display_movements(entries: List[MovementPatternView], window_days: int):
    table = Table(title=f"Movement Balance (last {window_days} days)", box=box.ROUNDED)
    table.add_column("Pattern", style="cyan")
    table.add_column("Sets", justify="right", style="yellow")
    for entry in entries:
        table.add_row(_display_label(entry.key, entry.name), str(entry.sessions))
    console.print(table)


def _display_trends(trends: List[StrengthTrendView]):
    table = Table(title="Strength Trends", box=box.ROUNDED)
    table.add_column("Lift", style="cyan")
    table.add_column("Trend")
    table.add_column("Weights")
    table.add_column("Δ lbs", justify="right")
    table.add_column("Δ %", justify="right")
    for trend in trends:
        color = "green" if trend.delta_lbs > 0 else "red" if trend.delta_lbs < 0 else "white"
        table.add_row(
            _display_label(trend.key, trend.lift),
            trend.sparkline or "-",
            ", ".join(f"{w:g}" for w in trend.weights) or "no data",
            f"[{color}]{trend.delta_lbs:+g}[/{color}]",
            f"[{color}]{trend.delta_percent:+d}%[/{color}]",
        )
    console.print(table)


def _display_lift_history(view: LiftHistoryView):
    content = [
        f"[bold]{view.sparkline or 'no data'}[/bold]",
        f"Start: {view.start_weight:g} lbs   End: {view.end_weight:g} lbs",
        "",
    ]
    for entry in view.rep_history:
        content.append(
            f"#{entry.index} {entry.performed_on}: top set {entry.reps} reps "
            f"({entry.total_sets} sets, {entry.total_reps} total reps)"
        )
    content.extend(["", f"[italic]{view.insight}[/italic]"])
    console.print(Panel("\n".join(content), title=view.title, border_style="cyan"))


# ===== COMMANDS =====


@app.command()
def analyze(
    sessions: Path = typer.Option(
        ...,
        "--sessions",
        "-s",
        help="Path to sessions JSON file",
        exists=True,
    ),
    preferences: Optional[Path] = typer.Option(
        None,
        "--preferences",
        "-p",
        help="Path to tracking preferences JSON file",
    ),
    defaults: Optional[Path] = typer.Option(
        None,
        "--defaults",
        "-d",
        help="Path to default weights JSON file (exercise id -> weight)",
        exists=True,
    ),
    as_of: Optional[datetime] = typer.Option(
        None,
        "--as-of",
        help="Last day of the summary windows (YYYY-MM-DD, default today)",
        formats=["%Y-%m-%d"],
    ),
):
    """
    Summarize training volume, movement balance and strength trends.
    """
    console.print("\n[bold cyan]FitArc Progress Summary[/bold cyan]\n")

    analytics = _aggregate(sessions, defaults)
    prefs = _load_preferences(preferences)
    window_end: date = as_of.date() if as_of else today_in_zone()

    volume = build_weekly_volume_summary(analytics.workout_logs, prefs, as_of=window_end)
    movements = build_movement_balance_summary(analytics.workout_logs, prefs, as_of=window_end)
    trends = build_strength_trends(analytics.strength_snapshots, prefs)

    console.print(f"  Window ends: {window_end}\n")
    _display_volume(volume, settings.volume_window_days)
    _display_movements(movements, settings.movement_window_days)
    _display_trends(trends)

    overall = get_overall_strength_delta(trends)
    color = "green" if overall > 0 else "red" if overall < 0 else "white"
    console.print(f"\n[bold]Overall strength change: [{color}]{overall:+d}%[/{color}][/bold]\n")


@app.command()
def lift_history(
    sessions: Path = typer.Option(
        ...,
        "--sessions",
        "-s",
        help="Path to sessions JSON file",
        exists=True,
    ),
    lift: LiftId = typer.Option(..., "--lift", "-l", help="Lift to chart"),
    preferences: Optional[Path] = typer.Option(
        None,
        "--preferences",
        "-p",
        help="Path to tracking preferences JSON file",
    ),
    defaults: Optional[Path] = typer.Option(
        None,
        "--defaults",
        "-d",
        help="Path to default weights JSON file",
        exists=True,
    ),
):
    """
    Show the long-form history for one lift.
    """
    analytics = _aggregate(sessions, defaults)
    view = build_lift_history(analytics.strength_snapshots, lift, _load_preferences(preferences))
    _display_lift_history(view)


@app.command()
def tracking(
    preferences: Path = typer.Option(
        ...,
        "--preferences",
        "-p",
        help="Path to tracking preferences JSON file",
    ),
    catalog: Path = typer.Option(
        ...,
        "--catalog",
        "-c",
        help="Path to exercise catalog JSON file",
        exists=True,
    ),
    category: TrackingCategory = typer.Option(
        TrackingCategory.MUSCLES, "--category", help="Category to show"
    ),
):
    """
    Show tracked vs. available items for a category.
    """
    try:
        exercise_catalog = ExerciseCatalog(**_read_json(catalog, "catalog"))
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]✗ Failed to load catalog: {e}[/red]")
        raise typer.Exit(1)

    partition = resolver.partition(
        _load_preferences(preferences), category, exercise_catalog.labels_for(category)
    )

    table = Table(title=f"Tracking: {category.value}", box=box.ROUNDED)
    table.add_column("Key", style="cyan")
    table.add_column("Label")
    table.add_column("Status", justify="center")
    for item in partition.selected:
        table.add_row(item.key, item.label, "[green]tracked[/green]")
    for item in partition.available:
        table.add_row(item.key, item.label, "[dim]available[/dim]")
    console.print(table)

    if not partition.selected:
        console.print(
            "[yellow]Nothing tracked yet - summaries show everything observed in your sessions.[/yellow]"
        )


@app.command()
def track_add(
    preferences: Path = typer.Option(..., "--preferences", "-p", help="Preferences file to update"),
    category: TrackingCategory = typer.Option(..., "--category", help="Category to edit"),
    label: str = typer.Argument(..., help="Label to start tracking"),
):
    """
    Start tracking an item. Adding an already-tracked item changes nothing.
    """
    current = _load_preferences(preferences)
    try:
        updated = resolver.add_item(current, category, label)
    except TrackingKeyError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    if updated == current:
        console.print(f"[yellow]'{label}' is already tracked[/yellow]")
        return
    _save_preferences(preferences, updated)
    logger.debug(f"Wrote preferences to {preferences}")
    console.print(f"✓ Now tracking [green]{label.strip()}[/green] ({category.value})")


@app.command()
def track_remove(
    preferences: Path = typer.Option(..., "--preferences", "-p", help="Preferences file to update"),
    category: TrackingCategory = typer.Option(..., "--category", help="Category to edit"),
    key: str = typer.Argument(..., help="Key to stop tracking"),
):
    """
    Stop tracking an item. Removing an untracked key changes nothing.
    """
    current = _load_preferences(preferences)
    updated = resolver.remove_item(current, category, key)
    if updated == current:
        console.print(f"[yellow]'{key}' is not tracked[/yellow]")
        return
    _save_preferences(preferences, updated)
    console.print(f"✓ Stopped tracking [green]{key}[/green] ({category.value})")


if __name__ == "__main__":
    app()
