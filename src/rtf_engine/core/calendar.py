"""
Program calendar helpers.

Maps wall-clock dates onto program weeks and summarises where a lifter
is within a generated schedule.  Week boundaries follow the lifter's
local calendar days in their IANA timezone.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import (
    DELOAD_WEEKS,
    EARLY_PHASE_FRACTION,
    MID_PHASE_FRACTION,
    PROGRESSION_SCHEME_STYLES,
)
from .errors import ValidationError
from .models import Style, WeekPlan

Phase = Literal["early", "mid", "late"]


@dataclass(frozen=True)
class TimelineStats:
    """Position of the current week within a schedule."""

    total_weeks: int
    training_weeks: int
    deload_weeks: int
    current_week: int
    progress: int  # percent, 0-100
    completed_weeks: int
    remaining_weeks: int


@dataclass(frozen=True)
class ProgramPhase:
    """Coarse training phase for a week."""

    phase: Phase
    label: str
    week_range: tuple[int, int]
    description: str


def _zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown timezone: {tz_name!r}") from e


def _local_date(moment: date | datetime | str, zone: ZoneInfo) -> date:
    """Calendar date of *moment* as seen in *zone*."""
    if isinstance(moment, str):
        try:
            if len(moment) == 10:
                return date.fromisoformat(moment)
            moment = datetime.fromisoformat(moment.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(f"Invalid date: {moment!r}") from e
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(zone).date()
    return moment


def current_program_week(
    program_start: date | datetime | str,
    duration_weeks: int,
    tz_name: str,
    today: datetime | None = None,
) -> int:
    """
    Current 1-based program week.

    Counts whole local days between the start and today in *tz_name*,
    then clamps the week to [1, duration_weeks].

    Args:
        program_start: Start date (date, datetime or ISO string)
        duration_weeks: Program length in weeks
        tz_name: IANA timezone, e.g. "America/New_York"
        today: Reference moment (default: now, UTC)

    Returns:
        Week number within the program
    """
    if duration_weeks < 1:
        raise ValidationError(f"duration_weeks must be >= 1, got {duration_weeks}")
    zone = _zone(tz_name)
    if today is None:
        today = datetime.now(timezone.utc)

    days = (_local_date(today, zone) - _local_date(program_start, zone)).days
    week = days // 7 + 1
    return max(1, min(week, duration_weeks))


def is_deload_week(week: int, with_deloads: bool) -> bool:
    """True for weeks 7, 14 and 21 of a program that includes deloads."""
    return with_deloads and week in DELOAD_WEEKS


def variant_for_scheme(progression_scheme: str) -> Style | None:
    """RTF style for a routine progression scheme, or None if it is not RTF."""
    return PROGRESSION_SCHEME_STYLES.get(progression_scheme)  # type: ignore[return-value]


def is_rtf_scheme(progression_scheme: str) -> bool:
    return progression_scheme in PROGRESSION_SCHEME_STYLES


def timeline_stats(schedule: list[WeekPlan], current_week: int | None = None) -> TimelineStats:
    """
    Summarise a schedule relative to the current week.

    Args:
        schedule: Generated program
        current_week: 1-based current week (default 1)

    Returns:
        TimelineStats
    """
    if not schedule:
        raise ValidationError("Cannot compute timeline stats for an empty schedule")
    total = len(schedule)
    deloads = sum(1 for w in schedule if w.is_deload)
    current = current_week or 1
    return TimelineStats(
        total_weeks=total,
        training_weeks=total - deloads,
        deload_weeks=deloads,
        current_week=current,
        progress=round(current / total * 100),
        completed_weeks=max(0, current - 1),
        remaining_weeks=max(0, total - current + 1),
    )


def next_deload_week(schedule: list[WeekPlan], current_week: int) -> int | None:
    """First deload week strictly after *current_week*, or None."""
    upcoming = [w.week for w in schedule if w.is_deload and w.week > current_week]
    return min(upcoming) if upcoming else None


def program_phase(total_weeks: int, current_week: int) -> ProgramPhase:
    """
    Phase of *current_week*: first third early, second third mid, rest late.
    """
    if total_weeks < 1:
        raise ValidationError(f"total_weeks must be >= 1, got {total_weeks}")
    progress = current_week / total_weeks
    early_end = math.ceil(total_weeks * EARLY_PHASE_FRACTION)
    mid_end = math.ceil(total_weeks * MID_PHASE_FRACTION)

    if progress <= EARLY_PHASE_FRACTION:
        return ProgramPhase(
            phase="early",
            label="Early Phase",
            week_range=(1, early_end),
            description="Building base strength and technique",
        )
    if progress <= MID_PHASE_FRACTION:
        return ProgramPhase(
            phase="mid",
            label="Mid Phase",
            week_range=(early_end + 1, mid_end),
            description="Progressive overload and intensity",
        )
    return ProgramPhase(
        phase="late",
        label="Late Phase",
        week_range=(mid_end + 1, total_weeks),
        description="Peak performance and testing",
    )
