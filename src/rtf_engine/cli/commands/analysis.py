"""Analysis commands: forecast, trend, week."""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.calendar import (
    current_program_week,
    is_deload_week,
    next_deload_week,
    program_phase,
    timeline_stats,
)
from ...core.config import PREVIEW_WEEKS, program_length
from ...core.engine.config_loader import load_settings, setting
from ...core.errors import ValidationError
from ...core.forecast import build_forecast
from ...core.scheduler import generate_program
from ...core.tm_trend import (
    TmTrendBuffer,
    adjustments_from_events,
    derive_adjustments,
    summarize_events,
)
from ...io.serializers import forecast_to_dict, load_tm_events, snapshot_to_dict
from .. import views
from ..app import (
    DeloadsOption,
    JsonOption,
    PerformanceOption,
    RoundingOption,
    StyleOption,
    WeightOption,
    app,
    build_config,
    read_performance,
)


@app.command()
def forecast(
    weight: WeightOption = None,
    deloads: DeloadsOption = None,
    rounding: RoundingOption = None,
    preview: Annotated[
        bool,
        typer.Option("--preview", help="Show only the first weeks of the program"),
    ] = False,
    routine_id: Annotated[
        Optional[str],
        typer.Option("--routine-id", help="Routine identifier for the forecast envelope"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Compare Standard and Hypertrophy targets week by week.
    """
    config = build_config(weight, None, deloads, rounding)
    settings = load_settings()

    try:
        result = build_forecast(
            config,
            routine_id or str(setting(settings, "forecast", "routine_id", "local-preview")),
            mode="preview" if preview else "full",
            preview_weeks=int(setting(settings, "forecast", "preview_weeks", PREVIEW_WEEKS)),
        )
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(forecast_to_dict(result), indent=2))
        return

    views.print_forecast(result)


@app.command()
def trend(
    weight: WeightOption = None,
    style: StyleOption = None,
    deloads: DeloadsOption = None,
    rounding: RoundingOption = None,
    performance: PerformanceOption = None,
    events_path: Annotated[
        Optional[Path],
        typer.Option("--events", "-e", help="JSON file of manual TM adjustments"),
    ] = None,
    exercise_id: Annotated[
        Optional[str],
        typer.Option("--exercise", help="Only show adjustments for this exercise"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show training-max adjustments and an ASCII TM chart.
    """
    config = build_config(weight, style, deloads, rounding)
    prior_log = read_performance(performance)

    try:
        events = load_tm_events(events_path) if events_path is not None else []
    except (FileNotFoundError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        schedule = generate_program(config, prior_log)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    buffer = TmTrendBuffer(derive_adjustments(schedule, config.style, exercise_id=exercise_id))
    buffer.extend(adjustments_from_events(events, config.style))
    snap = buffer.snapshot(config.style, exercise_id)

    if json_out:
        print(json.dumps(snapshot_to_dict(snap), indent=2))
        return

    settings = load_settings()
    views.print_trend(
        snap,
        total_weeks=len(schedule),
        width=int(setting(settings, "display", "chart_width", 60)),
        height=int(setting(settings, "display", "chart_height", 16)),
    )
    if events:
        views.print_event_summaries(summarize_events(events), events)


@app.command()
def week(
    start: Annotated[
        str,
        typer.Option("--start", help="Program start date (YYYY-MM-DD)"),
    ],
    timezone: Annotated[
        str,
        typer.Option("--timezone", "-t", help="IANA timezone, e.g. Europe/Berlin"),
    ] = "UTC",
    deloads: DeloadsOption = None,
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date instead of now (YYYY-MM-DD)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the current program week for a start date.
    """
    if deloads is None:
        deloads = bool(setting(load_settings(), "program", "with_deloads", True))
    total = program_length(deloads)

    try:
        reference = datetime.fromisoformat(today) if today else None
        current = current_program_week(start, total, timezone, today=reference)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    # Weights do not matter here, only the week layout.
    layout = build_config(100.0, None, deloads, None)
    schedule = generate_program(layout)
    stats = timeline_stats(schedule, current)
    deload = is_deload_week(current, deloads)
    upcoming = next_deload_week(schedule, current)

    if json_out:
        print(json.dumps({
            "week": current,
            "totalWeeks": stats.total_weeks,
            "isDeload": deload,
            "nextDeload": upcoming,
            "progress": stats.progress,
            "phase": program_phase(total, current).phase,
        }, indent=2))
        return

    views.print_timeline(stats, program_phase(total, current), deload, upcoming)
