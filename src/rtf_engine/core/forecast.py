"""
Standard vs Hypertrophy forecast projection.

Merges two schedules generated with the same deload setting into one
side-by-side table, used to preview and compare the variants before a
program is committed.  The output matches the shape the backend forecast
endpoint returns, so the same views can render either.
"""

from dataclasses import replace
from typing import Literal

from .config import (
    DEFAULT_ROUNDING_INCREMENT_KG,
    FORECAST_VERSION,
    HYPERTROPHY,
    INTENSITY_DECIMALS,
    INTENSITY_STEP,
    PREVIEW_WEEKS,
    STANDARD,
    program_length,
)
from .errors import InvariantViolation, ValidationError
from .models import (
    ForecastWeek,
    ProgramConfig,
    RtfForecast,
    VariantGoal,
    WeekPlan,
    validate_rounding_increment,
)
from .scheduler import format_goal, generate_program, round_to_increment
from .variants.registry import get_variant

ForecastMode = Literal["preview", "full"]


def variant_goal(week: WeekPlan) -> VariantGoal:
    """Extract the comparison fragment from a training week."""
    if week.is_deload:
        raise InvariantViolation(f"Week {week.week} is a deload week and has no goal")
    return VariantGoal(
        intensity=week.intensity,  # type: ignore[arg-type]
        fixed_reps=week.fixed_reps,  # type: ignore[arg-type]
        amrap_target=week.amrap_target,  # type: ignore[arg-type]
        sets=week.sets,  # type: ignore[arg-type]
        amrap_set=week.amrap_set_index,  # type: ignore[arg-type]
    )


def _check_same_shape(standard: list[WeekPlan], hypertrophy: list[WeekPlan]) -> None:
    if len(standard) != len(hypertrophy):
        raise InvariantViolation(
            f"Schedules differ in length: {len(standard)} vs {len(hypertrophy)} weeks"
        )
    for std, hyp in zip(standard, hypertrophy):
        if std.week != hyp.week or std.is_deload != hyp.is_deload:
            raise InvariantViolation(
                f"Schedules diverge at week {std.week}: "
                f"(week={std.week}, deload={std.is_deload}) vs "
                f"(week={hyp.week}, deload={hyp.is_deload})"
            )


def _slice_for_mode(
    weeks: list[ForecastWeek], mode: str, preview_weeks: int
) -> list[ForecastWeek]:
    if mode == "full":
        return weeks
    if mode == "preview":
        if preview_weeks < 1:
            raise ValidationError(f"preview_weeks must be >= 1, got {preview_weeks}")
        return weeks[:preview_weeks]
    raise ValidationError(f"Invalid forecast mode: {mode!r}. Must be 'preview' or 'full'")


def project_forecast(
    standard_schedule: list[WeekPlan],
    hypertrophy_schedule: list[WeekPlan],
    mode: ForecastMode = "full",
    preview_weeks: int = PREVIEW_WEEKS,
) -> list[ForecastWeek]:
    """
    Merge two schedules week-by-week into a comparison table.

    Args:
        standard_schedule: Schedule generated with style STANDARD
        hypertrophy_schedule: Schedule generated with style HYPERTROPHY
        mode: "full" for every week, "preview" for the first weeks only
        preview_weeks: Number of weeks kept in preview mode

    Returns:
        One ForecastWeek per week; deload rows carry no variant payload

    Raises:
        InvariantViolation: If the schedules differ in week or deload layout
    """
    _check_same_shape(standard_schedule, hypertrophy_schedule)

    merged = [
        ForecastWeek(week=std.week, is_deload=True)
        if std.is_deload
        else ForecastWeek(
            week=std.week,
            is_deload=False,
            standard=variant_goal(std),
            hypertrophy=variant_goal(hyp),
        )
        for std, hyp in zip(standard_schedule, hypertrophy_schedule)
    ]
    return _slice_for_mode(merged, mode, preview_weeks)


def derive_counterpart(
    schedule: list[WeekPlan],
    style: str,
    rounding_increment_kg: float = DEFAULT_ROUNDING_INCREMENT_KG,
) -> list[WeekPlan]:
    """
    Build a schedule for *style* with the same layout and TM as *schedule*.

    Lets a forecast be projected when only one variant was generated.
    Each training week keeps its TM; intensity and rep scheme follow the
    target variant's profile.

    Args:
        schedule: Source schedule (any style)
        style: Style of the schedule to derive
        rounding_increment_kg: Increment for the derived weights

    Returns:
        Derived schedule of the same length and deload layout

    Raises:
        ValidationError: If the increment or style is not supported
    """
    validate_rounding_increment(rounding_increment_kg)
    variant = get_variant(style)
    derived: list[WeekPlan] = []
    training_index = 0
    for week in schedule:
        if week.is_deload:
            derived.append(WeekPlan.deload(week.week))
            continue
        training_index += 1
        intensity = variant.intensity_for(training_index, INTENSITY_STEP, INTENSITY_DECIMALS)
        tm = week.tm  # type: ignore[assignment]
        derived.append(
            WeekPlan(
                week=week.week,
                is_deload=False,
                intensity=intensity,
                fixed_reps=variant.fixed_reps,
                amrap_target=variant.amrap_target,
                sets=variant.sets,
                amrap_set_index=variant.amrap_set,
                weight=round_to_increment(tm * intensity, rounding_increment_kg),
                goal=format_goal(week.week, variant, intensity),
                action=f"Derived {variant.display_name} week at TM {tm:.1f}kg.",
                tm=tm,
            )
        )
    return derived


def build_forecast(
    config: ProgramConfig,
    routine_id: str,
    version: int = FORECAST_VERSION,
    mode: ForecastMode = "full",
    preview_weeks: int = PREVIEW_WEEKS,
) -> RtfForecast:
    """
    Generate both variants for *config* and wrap them in the forecast envelope.

    ``config.style`` is ignored; both styles are generated with the same
    initial weight, deload setting and rounding increment.
    """
    standard = generate_program(replace(config, style=STANDARD))
    hypertrophy = generate_program(replace(config, style=HYPERTROPHY))
    return RtfForecast(
        routine_id=routine_id,
        weeks=program_length(config.with_deloads),
        version=version,
        with_deloads=config.with_deloads,
        forecast=project_forecast(standard, hypertrophy, mode, preview_weeks),
    )
