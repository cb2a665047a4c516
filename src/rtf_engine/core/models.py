"""
Data models for rtf-engine.

All core dataclasses representing program configuration, generated weeks,
logged performance, forecasts and TM adjustment history.  Every model is
plain data (numbers, strings, lists) so it serializes losslessly to JSON.
"""

import math
from dataclasses import dataclass, field
from typing import ClassVar, Literal

from .config import (
    HYPERTROPHY,
    STANDARD,
    SUPPORTED_ROUNDING_INCREMENTS_KG,
    TM_EVENT_DELTA_TOLERANCE_KG,
    TM_EVENT_MAX_REASON_LENGTH,
    TM_EVENT_MAX_WEEK,
    TM_EVENT_MIN_DELTA_KG,
    TM_EVENT_MIN_WEEK,
)
from .errors import ValidationError

Style = Literal["STANDARD", "HYPERTROPHY"]
STYLES: tuple[str, ...] = (STANDARD, HYPERTROPHY)


def validate_style(style: str) -> Style:
    """Return *style* if it names a known variant, else raise ValidationError."""
    if style not in STYLES:
        raise ValidationError(
            f"Invalid style: {style!r}. Must be one of {', '.join(STYLES)}"
        )
    return style  # type: ignore[return-value]


def validate_rounding_increment(increment: float) -> float:
    """Return *increment* if it is a supported plate increment, else raise ValidationError."""
    if isinstance(increment, bool) or increment not in SUPPORTED_ROUNDING_INCREMENTS_KG:
        supported = ", ".join(f"{v:g}" for v in SUPPORTED_ROUNDING_INCREMENTS_KG)
        raise ValidationError(
            f"Unsupported rounding increment: {increment!r}. "
            f"Must be one of {supported} kg"
        )
    return increment


@dataclass(frozen=True)
class ProgramConfig:
    """
    Input to the schedule generator.

    Created once per preview/submission cycle and never mutated.
    ``initial_weight`` is the starting training max in kg.
    """

    initial_weight: float
    style: Style = STANDARD
    with_deloads: bool = True
    rounding_increment_kg: float = 5.0

    def __post_init__(self) -> None:
        """Validate config data."""
        self.validate()

    def validate(self) -> None:
        """Raise ValidationError if any field is out of range."""
        if isinstance(self.initial_weight, bool) or not isinstance(
            self.initial_weight, (int, float)
        ):
            raise ValidationError(
                f"initial_weight must be a number, got {self.initial_weight!r}"
            )
        if not math.isfinite(self.initial_weight):
            raise ValidationError(
                f"initial_weight must be a finite number, got {self.initial_weight!r}"
            )
        if self.initial_weight <= 0:
            raise ValidationError("Training Max must be greater than 0")
        validate_rounding_increment(self.rounding_increment_kg)
        validate_style(self.style)


@dataclass(frozen=True)
class WeekPlan:
    """
    One week of a generated program.

    Deload weeks are markers only: every training field is None.
    ``week`` is the position in the emitted sequence (1-indexed).
    ``tm`` is the training max the week's weight was derived from.
    """

    week: int
    is_deload: bool = False
    intensity: float | None = None
    fixed_reps: int | None = None
    amrap_target: int | None = None
    sets: int | None = None
    amrap_set_index: int | None = None
    weight: float | None = None
    goal: str | None = None
    action: str | None = None
    tm: float | None = None

    _TRAINING_FIELDS: ClassVar[tuple[str, ...]] = (
        "intensity",
        "fixed_reps",
        "amrap_target",
        "sets",
        "amrap_set_index",
        "weight",
        "goal",
        "action",
        "tm",
    )

    def __post_init__(self) -> None:
        """Validate week data."""
        if self.week < 1:
            raise ValidationError(f"week must be >= 1, got {self.week}")

        values = [getattr(self, name) for name in self._TRAINING_FIELDS]
        if self.is_deload:
            if any(v is not None for v in values):
                raise ValidationError(
                    f"Deload week {self.week} must not carry training targets"
                )
            return

        missing = [n for n, v in zip(self._TRAINING_FIELDS, values) if v is None]
        if missing:
            raise ValidationError(
                f"Training week {self.week} missing fields: {', '.join(missing)}"
            )
        if not 0 < self.intensity <= 1:  # type: ignore[operator]
            raise ValidationError(f"intensity must be in (0, 1], got {self.intensity}")
        for name in ("fixed_reps", "amrap_target", "sets"):
            if getattr(self, name) <= 0:
                raise ValidationError(f"{name} must be positive")
        if self.amrap_set_index != self.sets:
            raise ValidationError("amrap_set_index must equal sets")
        if not self.goal or not self.action:
            raise ValidationError("goal and action must be non-empty")

    @classmethod
    def deload(cls, week: int) -> "WeekPlan":
        """Build a deload marker for the given week."""
        return cls(week=week, is_deload=True)


@dataclass(frozen=True)
class WeekPerformance:
    """
    Logged result for one training week.

    ``week`` refers to WeekPlan.week of the schedule the result was
    trained from.  Only the AMRAP set drives TM adjustments.
    """

    week: int
    reps_on_last_set: int
    sets_completed: int = 0
    single_at_8: float | None = None

    def __post_init__(self) -> None:
        """Validate performance data."""
        if self.week < 1:
            raise ValidationError(f"week must be >= 1, got {self.week}")
        if self.reps_on_last_set < 0:
            raise ValidationError("reps_on_last_set must be non-negative")
        if self.sets_completed < 0:
            raise ValidationError("sets_completed must be non-negative")
        if self.single_at_8 is not None and self.single_at_8 <= 0:
            raise ValidationError("single_at_8 must be positive")


@dataclass(frozen=True)
class TmAdjustment:
    """
    A change of the underlying training max.

    ``percent_change`` is stored exactly; use ``display_percent`` for a
    one-decimal label.
    """

    week: int
    previous_tm: float
    new_tm: float
    percent_change: float
    style: Style = STANDARD
    exercise_id: str | None = None

    @property
    def delta_kg(self) -> float:
        return self.new_tm - self.previous_tm

    @property
    def display_percent(self) -> str:
        """Signed percent with one decimal, e.g. '+2.0%'."""
        sign = "+" if self.percent_change >= 0 else ""
        return f"{sign}{self.percent_change:.1f}%"


@dataclass(frozen=True)
class TmTrendSnapshot:
    """Summary of TM adjustments for one style (and optionally one exercise)."""

    style: Style
    exercise_id: str | None = None
    adjustments: list[TmAdjustment] = field(default_factory=list)
    points: list[tuple[int, float]] = field(default_factory=list)  # (week, tm)
    latest_tm: float | None = None


@dataclass(frozen=True)
class TmEvent:
    """
    An operator-entered TM change for one exercise.

    ``delta_kg`` must agree with ``post_tm_kg - pre_tm_kg``.
    """

    exercise_id: str
    week_number: int
    delta_kg: float
    pre_tm_kg: float
    post_tm_kg: float
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate event data."""
        if not self.exercise_id:
            raise ValidationError("exercise_id must be a non-empty string")
        if not TM_EVENT_MIN_WEEK <= self.week_number <= TM_EVENT_MAX_WEEK:
            raise ValidationError(
                f"week_number must be between {TM_EVENT_MIN_WEEK} and "
                f"{TM_EVENT_MAX_WEEK}, got {self.week_number}"
            )
        if self.delta_kg < TM_EVENT_MIN_DELTA_KG:
            raise ValidationError(
                f"delta_kg must be at least {TM_EVENT_MIN_DELTA_KG:g} kg, got {self.delta_kg}"
            )
        if self.pre_tm_kg <= 0 or self.post_tm_kg <= 0:
            raise ValidationError("pre_tm_kg and post_tm_kg must be positive")
        if abs((self.post_tm_kg - self.pre_tm_kg) - self.delta_kg) > TM_EVENT_DELTA_TOLERANCE_KG:
            raise ValidationError(
                f"delta_kg ({self.delta_kg}) does not match post - pre "
                f"({self.post_tm_kg - self.pre_tm_kg:.2f})"
            )
        if self.reason is not None and len(self.reason) > TM_EVENT_MAX_REASON_LENGTH:
            raise ValidationError(
                f"reason must be at most {TM_EVENT_MAX_REASON_LENGTH} characters"
            )


@dataclass(frozen=True)
class TmEventSummary:
    """Aggregate of TM events for one exercise."""

    exercise_id: str
    total_delta_kg: float
    average_delta_kg: float
    adjustment_count: int
    last_week: int | None


@dataclass(frozen=True)
class VariantGoal:
    """Per-variant training targets for one forecast week."""

    intensity: float
    fixed_reps: int
    amrap_target: int
    sets: int
    amrap_set: int


@dataclass(frozen=True)
class ForecastWeek:
    """One row of the Standard vs Hypertrophy comparison."""

    week: int
    is_deload: bool
    standard: VariantGoal | None = None
    hypertrophy: VariantGoal | None = None


@dataclass(frozen=True)
class RtfForecast:
    """Forecast envelope, shaped like the backend forecast endpoint response."""

    routine_id: str
    weeks: int
    version: int
    with_deloads: bool
    forecast: list[ForecastWeek] = field(default_factory=list)
