"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of programs, forecasts and TM trends.
"""

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_tm_delta_chart, create_tm_trend_plot
from ..core.calendar import ProgramPhase, TimelineStats
from ..core.models import RtfForecast, TmEvent, TmEventSummary, TmTrendSnapshot, VariantGoal, WeekPlan
from ..core.tm_trend import is_large_adjustment
from ..core.variants.registry import get_variant

console = Console()


def _fmt_pct(intensity: float | None) -> str:
    return f"{intensity * 100:.0f}%" if intensity is not None else "-"


def _fmt_scheme(goal: VariantGoal | None) -> str:
    if goal is None:
        return "[dim]deload[/dim]"
    return (
        f"{goal.sets}×{goal.fixed_reps} @ {_fmt_pct(goal.intensity)}, "
        f"AMRAP {goal.amrap_target}+"
    )


def format_schedule_table(schedule: list[WeekPlan], title: str) -> Table:
    """
    Build a table of program weeks.

    Args:
        schedule: Generated program
        title: Table title

    Returns:
        Rich Table
    """
    table = Table(title=title)

    table.add_column("Wk", justify="right", style="dim", width=3)
    table.add_column("Intensity", justify="right")
    table.add_column("Sets", style="magenta")
    table.add_column("Weight", justify="right", style="bold")
    table.add_column("TM", justify="right", style="cyan")
    table.add_column("Action")

    for week in schedule:
        if week.is_deload:
            table.add_row(str(week.week), "-", "[dim]deload[/dim]", "-", "-", "[dim]Deload week[/dim]")
            continue
        table.add_row(
            str(week.week),
            _fmt_pct(week.intensity),
            f"{week.sets - 1}×{week.fixed_reps} + {week.amrap_target}+",
            f"{week.weight:g} kg",
            f"{week.tm:.1f}",
            week.action or "",
        )

    return table


def print_schedule(schedule: list[WeekPlan], style: str, initial_weight: float) -> None:
    """Print a generated program with a one-line header."""
    variant = get_variant(style)
    console.print()
    console.print(
        f"[bold cyan]{variant.display_name} RTF[/bold cyan] "
        f"from TM {initial_weight:g} kg ({len(schedule)} weeks)"
    )
    console.print(format_schedule_table(schedule, title="Program"))
    console.print()


def print_forecast(forecast: RtfForecast) -> None:
    """Print Standard and Hypertrophy goals side by side."""
    table = Table(title=f"RTF Forecast ({forecast.routine_id})")

    table.add_column("Wk", justify="right", style="dim", width=3)
    table.add_column("Standard", style="cyan")
    table.add_column("Hypertrophy", style="magenta")

    for week in forecast.forecast:
        table.add_row(str(week.week), _fmt_scheme(week.standard), _fmt_scheme(week.hypertrophy))

    console.print()
    console.print(table)
    shown = len(forecast.forecast)
    if shown < forecast.weeks:
        console.print(f"[dim]Showing {shown} of {forecast.weeks} weeks.[/dim]")
    console.print()


def print_trend(snapshot: TmTrendSnapshot, total_weeks: int, width: int = 60, height: int = 16) -> None:
    """
    Print TM adjustments as a table followed by an ASCII chart.

    Args:
        snapshot: Trend snapshot to show
        total_weeks: Program length, for the chart's x-axis
        width: Chart width in characters
        height: Chart height in lines
    """
    if not snapshot.adjustments:
        console.print("[dim]No TM adjustments recorded.[/dim]")
        return

    table = Table(title="TM Adjustments")
    table.add_column("Wk", justify="right", style="dim", width=3)
    table.add_column("Previous", justify="right")
    table.add_column("New", justify="right", style="bold")
    table.add_column("Change", justify="right")
    if snapshot.exercise_id is None and any(a.exercise_id for a in snapshot.adjustments):
        table.add_column("Exercise", style="cyan")

    for adj in snapshot.adjustments:
        color = "green" if adj.new_tm >= adj.previous_tm else "red"
        row = [
            str(adj.week),
            f"{adj.previous_tm:.1f}",
            f"{adj.new_tm:.1f}",
            f"[{color}]{adj.display_percent}[/{color}]",
        ]
        if len(table.columns) == 5:
            row.append(adj.exercise_id or "-")
        table.add_row(*row)

    console.print()
    console.print(table)
    console.print()

    points = list(snapshot.points)
    first = snapshot.adjustments[0]
    if not points or points[0][0] > 1:
        points.insert(0, (1, first.previous_tm))
    console.print(create_tm_trend_plot(points, total_weeks, width=width, height=height))
    console.print()


def print_event_summaries(summaries: list[TmEventSummary], events: list[TmEvent]) -> None:
    """Print per-exercise totals and flag large manual changes."""
    for event in events:
        if is_large_adjustment(event):
            print_warning(
                f"{event.exercise_id} week {event.week_number}: "
                f"{event.delta_kg:+.1f} kg is a large TM change"
            )

    if not summaries:
        return
    console.print(
        create_tm_delta_chart(
            [s.exercise_id for s in summaries],
            [s.total_delta_kg for s in summaries],
            title="Total TM change by exercise",
        )
    )
    for s in summaries:
        console.print(
            f"  {s.exercise_id}: {s.adjustment_count} change(s), "
            f"total {s.total_delta_kg:+.1f} kg, avg {s.average_delta_kg:+.1f} kg, "
            f"last week {s.last_week}"
        )
    console.print()


def print_timeline(
    stats: TimelineStats,
    phase: ProgramPhase,
    is_deload: bool,
    next_deload: int | None,
) -> None:
    """Print where the current week sits in the program."""
    console.print()
    console.print(
        f"[bold]Week {stats.current_week} of {stats.total_weeks}[/bold] "
        f"({stats.progress}% through)"
    )
    if is_deload:
        console.print("[cyan]Deload week.[/cyan]")
    console.print(f"{phase.label} (weeks {phase.week_range[0]}-{phase.week_range[1]}): {phase.description}")
    console.print(
        f"Training weeks: {stats.training_weeks}  Deload weeks: {stats.deload_weeks}  "
        f"Remaining: {stats.remaining_weeks}"
    )
    if next_deload is not None:
        console.print(f"Next deload: week {next_deload}")
    console.print()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
