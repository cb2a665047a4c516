"""
Training-max trend tracking.

Reconstructs the series of TM adjustments from a generated (or logged)
week sequence and summarises it for history/analytics display.  Operator
entered TM events are a second, explicit source of adjustments.

The buffer is owned by the caller; this module keeps no state.
"""

from typing import Iterable

from .config import STANDARD, TM_EVENT_MAX_DELTA_KG
from .models import (
    Style,
    TmAdjustment,
    TmEvent,
    TmEventSummary,
    TmTrendSnapshot,
    WeekPlan,
    validate_style,
)


def percent_change(previous_tm: float, new_tm: float) -> float:
    """Exact percent change from *previous_tm* to *new_tm*."""
    return (new_tm - previous_tm) / previous_tm * 100


def derive_adjustments(
    schedule: list[WeekPlan],
    style: Style,
    exercise_id: str | None = None,
) -> list[TmAdjustment]:
    """
    Extract TM changes from a week sequence.

    Walks training weeks in week order and records an adjustment wherever
    the TM differs from the previous training week.  The per-week working
    weight is not compared: it already moves with the intensity ramp.

    Args:
        schedule: Generated or logged weeks (deload weeks are skipped)
        style: Program style the schedule was generated with
        exercise_id: Optional exercise the schedule belongs to

    Returns:
        Adjustments in week order (empty for an empty schedule)
    """
    validate_style(style)
    adjustments: list[TmAdjustment] = []
    previous_tm: float | None = None

    for week in sorted(schedule, key=lambda w: w.week):
        if week.is_deload or week.tm is None:
            continue
        if previous_tm is not None and week.tm != previous_tm:
            adjustments.append(
                TmAdjustment(
                    week=week.week,
                    previous_tm=previous_tm,
                    new_tm=week.tm,
                    percent_change=percent_change(previous_tm, week.tm),
                    style=style,
                    exercise_id=exercise_id,
                )
            )
        previous_tm = week.tm

    return adjustments


def latest_training_max(schedule: list[WeekPlan]) -> float | None:
    """TM of the last training week, or None if there is none."""
    for week in sorted(schedule, key=lambda w: w.week, reverse=True):
        if not week.is_deload and week.tm is not None:
            return week.tm
    return None


class TmTrendBuffer:
    """
    Append-only store of TM adjustments.

    push() is O(1); snapshot() scans the buffer once and never mutates it,
    so repeated snapshots without new pushes are equal.
    """

    def __init__(self, events: Iterable[TmAdjustment] | None = None) -> None:
        self._events: list[TmAdjustment] = list(events or ())

    def push(self, adjustment: TmAdjustment) -> None:
        self._events.append(adjustment)

    def extend(self, adjustments: Iterable[TmAdjustment]) -> None:
        self._events.extend(adjustments)

    def clear(self) -> None:
        self._events = []

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> list[TmAdjustment]:
        """Copy of the buffered adjustments in push order."""
        return list(self._events)

    def snapshot(
        self,
        style: Style | None = None,
        exercise_id: str | None = None,
    ) -> TmTrendSnapshot:
        """
        Summarise buffered adjustments.

        Args:
            style: Only include this style (None = all)
            exercise_id: Only include this exercise (None = all)

        Returns:
            Snapshot with adjustments sorted by week, one point per week
            (the last adjustment pushed for that week wins) and latest_tm
        """
        filtered = [
            e
            for e in self._events
            if (style is None or e.style == style)
            and (exercise_id is None or e.exercise_id == exercise_id)
        ]
        ordered = sorted(filtered, key=lambda e: e.week)

        by_week: dict[int, float] = {}
        for event in filtered:
            by_week[event.week] = event.new_tm
        points = sorted(by_week.items())

        if style is None:
            style = filtered[0].style if filtered else STANDARD

        return TmTrendSnapshot(
            style=style,
            exercise_id=exercise_id,
            adjustments=ordered,
            points=points,
            latest_tm=points[-1][1] if points else None,
        )


def snapshot(
    adjustments: Iterable[TmAdjustment],
    style: Style,
    exercise_id: str | None = None,
) -> TmTrendSnapshot:
    """Snapshot of *adjustments* for one style, via a throwaway buffer."""
    return TmTrendBuffer(adjustments).snapshot(validate_style(style), exercise_id)


# ---------------------------------------------------------------------------
# Operator TM events
# ---------------------------------------------------------------------------


def adjustments_from_events(
    events: Iterable[TmEvent],
    style: Style,
) -> list[TmAdjustment]:
    """Convert operator TM events into adjustments, in week order."""
    validate_style(style)
    return [
        TmAdjustment(
            week=e.week_number,
            previous_tm=e.pre_tm_kg,
            new_tm=e.post_tm_kg,
            percent_change=percent_change(e.pre_tm_kg, e.post_tm_kg),
            style=style,
            exercise_id=e.exercise_id,
        )
        for e in sorted(events, key=lambda e: e.week_number)
    ]


def is_large_adjustment(event: TmEvent) -> bool:
    """True when the change reaches the large-adjustment warning threshold."""
    return abs(event.delta_kg) >= TM_EVENT_MAX_DELTA_KG


def summarize_events(events: Iterable[TmEvent]) -> list[TmEventSummary]:
    """
    Per-exercise totals of TM events.

    Returns:
        One summary per exercise, sorted by exercise_id
    """
    grouped: dict[str, list[TmEvent]] = {}
    for event in events:
        grouped.setdefault(event.exercise_id, []).append(event)

    summaries = []
    for exercise_id in sorted(grouped):
        group = grouped[exercise_id]
        total = sum(e.delta_kg for e in group)
        summaries.append(
            TmEventSummary(
                exercise_id=exercise_id,
                total_delta_kg=total,
                average_delta_kg=total / len(group),
                adjustment_count=len(group),
                last_week=max(e.week_number for e in group),
            )
        )
    return summaries
