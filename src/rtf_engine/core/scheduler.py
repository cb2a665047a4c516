"""
Program generation for rtf-engine.

Generates deterministic 18- or 21-week Reps-to-Failure programs from a
ProgramConfig.  The program is parameterised by a VariantProfile so the
same engine serves the Standard and Hypertrophy styles.

Training max (TM) changes come only from the explicitly logged AMRAP
results passed as ``prior_log``; with no log the output is a pure linear
projection of the intensity ramp.
"""

import math
from dataclasses import dataclass, replace
from typing import Generator, Iterable

from .config import (
    DELOAD_WEEKS,
    INTENSITY_DECIMALS,
    INTENSITY_STEP,
    amrap_tm_multiplier,
    program_length,
)
from .errors import InvariantViolation, ValidationError
from .models import ProgramConfig, WeekPerformance, WeekPlan
from .variants.base import VariantProfile
from .variants.registry import get_variant


@dataclass
class _WeekTrace:
    """
    All intermediate values from _schedule_core() for one week.

    Consumed by _format_explain() so explanations never diverge from the
    generated program.
    """

    week: int
    is_deload: bool
    training_index: int          # 0 for deload weeks
    variant: VariantProfile
    increment: float

    # Training max
    tm_before: float             # TM carried in from the previous week
    tm_after: float              # TM used for this week
    source_week: int | None      # training week whose AMRAP result was applied
    performance: WeekPerformance | None
    multiplier: float

    # Load
    intensity: float | None
    raw_weight: float | None
    weight: float | None


def round_to_increment(value: float, increment: float) -> float:
    """
    Round *value* to the nearest multiple of *increment*, halves rounding up.

    Float noise from the multiplication (e.g. 30.499999999) is trimmed
    before rounding so exact halves always go up.

    Args:
        value: Load in kg
        increment: Plate increment in kg

    Returns:
        Rounded load in kg
    """
    steps = round(value / increment, 9)
    return round(math.floor(steps + 0.5) * increment, 6)


def adjust_training_max(reps: int, target: int, training_max: float) -> float:
    """
    New TM after an AMRAP result.

    +5 or more reps over target: +3%, +4: +2%, +3: +1.5%, +2: +1%,
    +1: +0.5%, on target: unchanged, -1: -2%, -2 or worse: -5%.

    Args:
        reps: Reps achieved on the AMRAP set
        target: AMRAP target for that week
        training_max: Current TM in kg

    Returns:
        Adjusted TM in kg
    """
    return training_max * amrap_tm_multiplier(reps, target)


def deload_layout(with_deloads: bool) -> list[bool]:
    """is_deload flag for each emitted week (index 0 = week 1)."""
    return [
        with_deloads and week in DELOAD_WEEKS
        for week in range(1, program_length(with_deloads) + 1)
    ]


def _index_performance(
    prior_log: Iterable[WeekPerformance] | None,
    total_weeks: int,
) -> dict[int, WeekPerformance]:
    """Map week → performance, rejecting duplicates and out-of-range weeks."""
    by_week: dict[int, WeekPerformance] = {}
    for perf in prior_log or ():
        if not isinstance(perf, WeekPerformance):
            raise ValidationError(
                f"prior_log entries must be WeekPerformance, got {type(perf).__name__}"
            )
        if perf.week > total_weeks:
            raise ValidationError(
                f"Performance logged for week {perf.week} but the program has "
                f"{total_weeks} weeks"
            )
        if perf.week in by_week:
            raise ValidationError(f"Duplicate performance entry for week {perf.week}")
        by_week[perf.week] = perf
    return by_week


def format_goal(week: int, variant: VariantProfile, intensity: float) -> str:
    """Human label for a training week, e.g. "Week 3: 5×5 @ 72%, AMRAP 8+"."""
    pct = intensity * 100
    return (
        f"Week {week}: {variant.sets}×{variant.fixed_reps} @ {pct:.0f}%, "
        f"AMRAP {variant.amrap_target}+"
    )


def _format_action(trace: _WeekTrace, after_deload: bool) -> str:
    if trace.training_index == 1:
        return f"Starting TM: {trace.tm_after:.1f}kg."

    step_pct = INTENSITY_STEP * 100
    parts = []
    if after_deload:
        parts.append("Back from deload.")
    parts.append(f"Increase intensity +{step_pct:.0f}%.")

    perf = trace.performance
    if perf is not None:
        result = f"Week {trace.source_week}: {perf.reps_on_last_set}/{trace.variant.amrap_target} reps."
        if trace.tm_after != trace.tm_before:
            pct = (trace.tm_after - trace.tm_before) / trace.tm_before * 100
            sign = "+" if pct >= 0 else ""
            parts.append(
                f"{result} TM adjusted from {trace.tm_before:.1f} to "
                f"{trace.tm_after:.1f}kg ({sign}{pct:.1f}%)."
            )
        else:
            parts.append(f"{result} TM unchanged at {trace.tm_after:.1f}kg.")
    return " ".join(parts)


def validate_config(config: ProgramConfig) -> ProgramConfig:
    """
    Check a config before any computation.

    Raises:
        ValidationError: If config is not a ProgramConfig or a field is invalid
    """
    if not isinstance(config, ProgramConfig):
        raise ValidationError(f"Expected ProgramConfig, got {type(config).__name__}")
    config.validate()
    return config


def _schedule_core(
    config: ProgramConfig,
    prior_log: Iterable[WeekPerformance] | None,
) -> Generator[tuple[WeekPlan, _WeekTrace], None, None]:
    """
    Single source of truth for program generation.

    Validates everything up front, then yields (WeekPlan, trace) per week.
    """
    validate_config(config)
    variant = get_variant(config.style)
    layout = deload_layout(config.with_deloads)
    performance = _index_performance(prior_log, len(layout))
    increment = config.rounding_increment_kg

    tm = float(config.initial_weight)
    training_index = 0
    last_training_week: int | None = None
    after_deload = False

    for week, is_deload in enumerate(layout, start=1):
        if is_deload:
            trace = _WeekTrace(
                week=week,
                is_deload=True,
                training_index=0,
                variant=variant,
                increment=increment,
                tm_before=tm,
                tm_after=tm,
                source_week=None,
                performance=None,
                multiplier=1.0,
                intensity=None,
                raw_weight=None,
                weight=None,
            )
            after_deload = True
            yield WeekPlan.deload(week), trace
            continue

        training_index += 1
        tm_before = tm
        perf = performance.get(last_training_week) if last_training_week else None
        multiplier = 1.0
        if perf is not None:
            multiplier = amrap_tm_multiplier(perf.reps_on_last_set, variant.amrap_target)
            tm = adjust_training_max(perf.reps_on_last_set, variant.amrap_target, tm)

        intensity = variant.intensity_for(training_index, INTENSITY_STEP, INTENSITY_DECIMALS)
        if not variant.intensity_min <= intensity <= variant.intensity_max:
            raise InvariantViolation(
                f"Week {week} intensity {intensity:.2f} outside "
                f"[{variant.intensity_min}, {variant.intensity_max}] for {variant.style}"
            )
        raw_weight = tm * intensity
        trace = _WeekTrace(
            week=week,
            is_deload=False,
            training_index=training_index,
            variant=variant,
            increment=increment,
            tm_before=tm_before,
            tm_after=tm,
            source_week=last_training_week if perf is not None else None,
            performance=perf,
            multiplier=multiplier,
            intensity=intensity,
            raw_weight=raw_weight,
            weight=round_to_increment(raw_weight, increment),
        )

        plan = WeekPlan(
            week=week,
            is_deload=False,
            intensity=intensity,
            fixed_reps=variant.fixed_reps,
            amrap_target=variant.amrap_target,
            sets=variant.sets,
            amrap_set_index=variant.amrap_set,
            weight=trace.weight,
            goal=format_goal(week, variant, intensity),
            action=_format_action(trace, after_deload),
            tm=tm,
        )
        after_deload = False
        last_training_week = week
        yield plan, trace


def generate_program(
    config: ProgramConfig,
    prior_log: Iterable[WeekPerformance] | None = None,
) -> list[WeekPlan]:
    """
    Generate a deterministic RTF program.

    Args:
        config: Validated program configuration
        prior_log: Logged AMRAP results used to recalculate the TM
            (None or empty = pure projection)

    Returns:
        21 WeekPlans (deloads at weeks 7, 14, 21) or 18 WeekPlans without deloads

    Raises:
        ValidationError: If config or prior_log is invalid
    """
    return [plan for plan, _ in _schedule_core(config, prior_log)]


def generate_hypertrophy_program(
    config: ProgramConfig,
    prior_log: Iterable[WeekPerformance] | None = None,
) -> list[WeekPlan]:
    """generate_program() with the style forced to HYPERTROPHY."""
    return generate_program(replace(config, style="HYPERTROPHY"), prior_log)


def training_weeks(schedule: list[WeekPlan]) -> list[WeekPlan]:
    """Non-deload weeks of a schedule, in order."""
    return [w for w in schedule if not w.is_deload]


def explain_week(
    config: ProgramConfig,
    week: int,
    prior_log: Iterable[WeekPerformance] | None = None,
) -> str:
    """
    Generate a step-by-step Rich-markup explanation of one program week.

    Delegates to _schedule_core() so the explanation matches
    generate_program() exactly.

    Args:
        config: Program configuration
        week: Emitted week number to explain
        prior_log: Logged AMRAP results

    Returns:
        Rich-markup string ready for console.print()

    Raises:
        ValidationError: If config/prior_log is invalid or week is out of range
    """
    for plan, trace in _schedule_core(config, prior_log):
        if plan.week == week:
            return _format_explain(plan, trace)
    raise ValidationError(
        f"Week {week} is outside the program (1-{program_length(config.with_deloads)})"
    )


def _format_explain(plan: WeekPlan, trace: _WeekTrace) -> str:
    """Render the trace for one week as Rich markup."""
    v = trace.variant
    lines = [f"[bold]Week {plan.week}[/bold] — {v.display_name} RTF"]

    if trace.is_deload:
        lines.append("")
        lines.append("[cyan]Deload week.[/cyan] No intensity, rep or set targets.")
        lines.append(f"TM carried forward: {trace.tm_after:.1f} kg")
        return "\n".join(lines)

    lines.append("")
    lines.append("[bold]Training max[/bold]")
    if trace.performance is None:
        lines.append(f"  TM = {trace.tm_after:.2f} kg (no logged result to apply)")
    else:
        perf = trace.performance
        diff = perf.reps_on_last_set - v.amrap_target
        lines.append(
            f"  Week {trace.source_week} AMRAP: {perf.reps_on_last_set} reps vs target "
            f"{v.amrap_target} (diff {diff:+d})"
        )
        lines.append(
            f"  TM = {trace.tm_before:.2f} × {trace.multiplier:g} = {trace.tm_after:.2f} kg"
        )

    lines.append("")
    lines.append("[bold]Intensity[/bold]")
    lines.append(
        f"  training week {trace.training_index}: {v.base_intensity:.2f} + "
        f"({trace.training_index} - 1) × {INTENSITY_STEP:.2f} = {trace.intensity:.2f}"
    )

    lines.append("")
    lines.append("[bold]Load[/bold]")
    lines.append(
        f"  {trace.tm_after:.2f} × {trace.intensity:.2f} = {trace.raw_weight:.2f} kg "
        f"→ nearest {trace.increment:g} kg = [green]{trace.weight:g} kg[/green]"
    )

    lines.append("")
    lines.append("[bold]Sets[/bold]")
    lines.append(
        f"  {v.sets - 1} × {v.fixed_reps} reps, then set {v.amrap_set} AMRAP "
        f"(target {v.amrap_target}+)"
    )
    return "\n".join(lines)
