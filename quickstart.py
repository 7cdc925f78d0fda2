#!/usr/bin/env python3
"""
Quick start script to demonstrate FitArc workout analytics.

This script shows the complete workflow:
1. Load sample sessions, preferences and default weights
2. Aggregate sessions into workout logs and strength snapshots
3. Summarize weekly volume and movement balance
4. Chart strength trends and a single-lift history
5. Reconcile tracking preferences with the exercise catalog
"""

import json
from datetime import date
from pathlib import Path

# Rich console for pretty output
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fitarc_analytics.aggregator import SessionAggregator
from fitarc_analytics.logger import setup_logger
from fitarc_analytics.schemas import LiftId, RawSession, TrackingCategory, TrackingPreferences
from fitarc_analytics.selectors import (
    build_lift_history,
    build_movement_balance_summary,
    build_strength_trends,
    build_weekly_volume_summary,
    get_overall_strength_delta,
)
from fitarc_analytics.tracking import ExerciseCatalog, TrackingPreferenceResolver

console = Console()
DATA_DIR = Path("data")
AS_OF = date(2026, 10, 18)


def print_header(title: str):
    """Print a formatted header."""
    console.print(f"\n[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))


def load_json(name: str):
    with open(DATA_DIR / name) as f:
        return json.load(f)


def main():
    """Run the complete demonstration workflow."""
    setup_logger(level="WARNING")
    console.print("\n[bold magenta]🏋️  FitArc Workout Analytics[/bold magenta]")

    # Step 1: Load inputs
    print_header("Step 1: Loading Sample Data")
    sessions = [RawSession(**row) for row in load_json("sample_sessions.json")]
    preferences = TrackingPreferences(**load_json("preferences.json"))
    default_weights = load_json("default_weights.json")
    catalog = ExerciseCatalog(**load_json("catalog.json"))
    console.print(f"✓ Loaded [green]{len(sessions)}[/green] sessions")
    console.print(f"✓ Default weights for: {', '.join(default_weights)}")

    # Step 2: Aggregate
    print_header("Step 2: Aggregating Sessions")
    analytics = SessionAggregator(default_weights).aggregate(sessions)

    logs_table = Table(box=box.ROUNDED)
    logs_table.add_column("Session", style="cyan")
    logs_table.add_column("Date")
    logs_table.add_column("Sets", justify="right")
    logs_table.add_column("Volume (lbs)", justify="right", style="yellow")
    logs_table.add_column("Lifts")
    for log in analytics.workout_logs:
        logs_table.add_row(
            log.id,
            str(log.date),
            str(log.total_sets),
            f"{log.total_volume:,.0f}",
            ", ".join(f"{s.lift.value} {s.weight:g}x{s.reps}" for s in log.lifts) or "-",
        )
    console.print(logs_table)
    console.print(f"✓ {len(analytics.strength_snapshots)} strength snapshots")

    # Step 3: Volume and movement balance
    print_header(f"Step 3: Training Balance (as of {AS_OF})")
    volume = build_weekly_volume_summary(analytics.workout_logs, preferences, as_of=AS_OF)
    movements = build_movement_balance_summary(analytics.workout_logs, preferences, as_of=AS_OF)

    balance_table = Table(box=box.ROUNDED)
    balance_table.add_column("Muscle Group", style="cyan")
    balance_table.add_column("Sets", justify="right")
    balance_table.add_column("Pattern", style="cyan")
    balance_table.add_column("Sets", justify="right")
    for index in range(max(len(volume), len(movements))):
        muscle = volume[index] if index < len(volume) else None
        movement = movements[index] if index < len(movements) else None
        balance_table.add_row(
            muscle.group if muscle else "",
            str(muscle.sets) if muscle else "",
            movement.name if movement else "",
            str(movement.sessions) if movement else "",
        )
    console.print(balance_table)

    # Step 4: Strength
    print_header("Step 4: Strength Trends")
    trends = build_strength_trends(analytics.strength_snapshots, preferences)
    for trend in trends:
        color = "green" if trend.delta_lbs > 0 else "white"
        console.print(
            f"  {trend.lift:<14} {trend.sparkline or '-':<6} "
            f"[{color}]{trend.delta_lbs:+g} lbs ({trend.delta_percent:+d}%)[/{color}]"
        )
    console.print(f"\n  Overall strength change: [bold]{get_overall_strength_delta(trends):+d}%[/bold]")

    history = build_lift_history(analytics.strength_snapshots, LiftId.SQUAT, preferences)
    lines = [f"{history.sparkline}   {history.start_weight:g} → {history.end_weight:g} lbs", ""]
    lines.extend(
        f"#{entry.index} {entry.performed_on}: {entry.reps} reps, {entry.total_sets} sets"
        for entry in history.rep_history
    )
    lines.extend(["", f"[italic]{history.insight}[/italic]"])
    console.print(Panel("\n".join(lines), title=history.title, border_style="cyan"))

    # Step 5: Tracking
    print_header("Step 5: Tracking Preferences")
    resolver = TrackingPreferenceResolver()
    partition = resolver.partition(
        preferences, TrackingCategory.MUSCLES, catalog.labels_for(TrackingCategory.MUSCLES)
    )
    console.print(f"  Tracked:   {', '.join(i.label for i in partition.selected)}")
    console.print(f"  Available: {', '.join(i.label for i in partition.available)}")

    updated = resolver.add_item(preferences, TrackingCategory.MUSCLES, "Core")
    core_volume = build_weekly_volume_summary(analytics.workout_logs, updated, as_of=AS_OF)
    console.print(
        "  After tracking Core: "
        + ", ".join(f"{v.group} {v.sets}" for v in core_volume)
    )

    console.print("\n[bold green]✓ Quickstart Complete![/bold green]\n")
    console.print("Next steps:")
    console.print("  - fitarc analyze --sessions data/sample_sessions.json --preferences data/preferences.json")
    console.print("  - fitarc lift-history --sessions data/sample_sessions.json --lift squat")
    console.print("  - uvicorn fitarc_analytics.api.main:app --reload")


if __name__ == "__main__":
    main()
