"""Shared Typer app object, shared option types, and config utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import DEFAULT_ROUNDING_INCREMENT_KG, DEFAULT_STYLE
from ..core.engine.config_loader import load_settings, setting
from ..core.models import ProgramConfig, WeekPerformance
from ..io.serializers import load_performance_log
from . import views

# Shared program options used by plan / explain / forecast / trend
WeightOption = Annotated[
    Optional[float],
    typer.Option("--weight", "-w", help="Initial training max in kg"),
]
StyleOption = Annotated[
    Optional[str],
    typer.Option("--style", "-s", help="Program style: STANDARD or HYPERTROPHY"),
]
DeloadsOption = Annotated[
    Optional[bool],
    typer.Option("--deloads/--no-deloads", help="Include deload weeks 7, 14 and 21"),
]
RoundingOption = Annotated[
    Optional[float],
    typer.Option("--rounding", "-r", help="Plate increment in kg: 0.5, 1, 2.5 or 5"),
]
PerformanceOption = Annotated[
    Optional[Path],
    typer.Option("--performance", "-p", help="JSON file of logged AMRAP results"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="rtf-engine",
    help="Reps-to-Failure program generator with Standard and Hypertrophy styles.",
    no_args_is_help=True,
)


def build_config(
    weight: float | None,
    style: str | None,
    deloads: bool | None,
    rounding: float | None,
) -> ProgramConfig:
    """
    Merge command-line options over settings.yaml defaults.

    Exits with status 1 when the resulting config is invalid.
    """
    settings = load_settings()
    if weight is None:
        weight = setting(settings, "program", "initial_weight", None)
    if weight is None:
        views.print_error("No training max given (use --weight or set program.initial_weight)")
        raise typer.Exit(1)

    try:
        return ProgramConfig(
            initial_weight=weight,
            style=(style or setting(settings, "program", "style", DEFAULT_STYLE)).upper(),
            with_deloads=(
                deloads if deloads is not None
                else bool(setting(settings, "program", "with_deloads", True))
            ),
            rounding_increment_kg=float(
                rounding if rounding is not None
                else setting(settings, "program", "rounding_increment_kg", DEFAULT_ROUNDING_INCREMENT_KG)
            ),
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def read_performance(path: Path | None) -> list[WeekPerformance]:
    """Load a performance log, or [] when no path was given."""
    if path is None:
        return []
    try:
        return load_performance_log(path)
    except (FileNotFoundError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
