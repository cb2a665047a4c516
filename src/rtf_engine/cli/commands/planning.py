"""Planning commands: plan, explain."""

import json
from typing import Annotated

import typer

from ...core.errors import ValidationError
from ...core.scheduler import explain_week, generate_program
from ...io.serializers import program_config_to_dict, schedule_to_list
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
def plan(
    weight: WeightOption = None,
    style: StyleOption = None,
    deloads: DeloadsOption = None,
    rounding: RoundingOption = None,
    performance: PerformanceOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Generate and display an RTF program.
    """
    config = build_config(weight, style, deloads, rounding)
    prior_log = read_performance(performance)

    try:
        schedule = generate_program(config, prior_log)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "config": program_config_to_dict(config),
            "weeks": schedule_to_list(schedule),
        }, indent=2))
        return

    views.print_schedule(schedule, config.style, config.initial_weight)


@app.command()
def explain(
    week: Annotated[
        int,
        typer.Option("--week", "-k", help="Program week to explain"),
    ],
    weight: WeightOption = None,
    style: StyleOption = None,
    deloads: DeloadsOption = None,
    rounding: RoundingOption = None,
    performance: PerformanceOption = None,
) -> None:
    """
    Show how a week's load and TM were calculated.
    """
    config = build_config(weight, style, deloads, rounding)
    prior_log = read_performance(performance)

    try:
        text = explain_week(config, week, prior_log)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.console.print()
    views.console.print(text)
    views.console.print()
