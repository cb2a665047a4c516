"""
Tests for TM trend tracking and operator TM events.
"""

import pytest

from rtf_engine.core.errors import ValidationError
from rtf_engine.core.models import ProgramConfig, TmAdjustment, TmEvent, WeekPerformance
from rtf_engine.core.scheduler import generate_program
from rtf_engine.core.tm_trend import (
    TmTrendBuffer,
    adjustments_from_events,
    derive_adjustments,
    is_large_adjustment,
    latest_training_max,
    percent_change,
    snapshot,
    summarize_events,
)


def _adj(week: int, prev: float, new: float, style: str = "STANDARD", exercise_id: str | None = None) -> TmAdjustment:
    return TmAdjustment(
        week=week,
        previous_tm=prev,
        new_tm=new,
        percent_change=percent_change(prev, new),
        style=style,
        exercise_id=exercise_id,
    )


def _event(exercise_id: str = "squat", week: int = 3, pre: float = 100.0, post: float = 105.0, reason: str | None = None) -> TmEvent:
    return TmEvent(
        exercise_id=exercise_id,
        week_number=week,
        delta_kg=post - pre,
        pre_tm_kg=pre,
        post_tm_kg=post,
        reason=reason,
    )


class TestDeriveAdjustments:
    def test_projection_has_no_adjustments(self):
        schedule = generate_program(ProgramConfig(100.0))
        assert derive_adjustments(schedule, "STANDARD") == []

    def test_empty_schedule(self):
        assert derive_adjustments([], "STANDARD") == []
        assert latest_training_max([]) is None

    def test_logged_result_produces_one_adjustment(self):
        log = [WeekPerformance(week=1, reps_on_last_set=13)]
        schedule = generate_program(ProgramConfig(100.0), log)
        adjustments = derive_adjustments(schedule, "STANDARD", exercise_id="bench")
        assert len(adjustments) == 1
        adj = adjustments[0]
        assert adj.week == 2
        assert adj.previous_tm == 100.0
        assert adj.new_tm == pytest.approx(103.0)
        assert adj.percent_change == pytest.approx(3.0)
        assert adj.display_percent == "+3.0%"
        assert adj.exercise_id == "bench"

    def test_adjustment_across_deload(self):
        log = [WeekPerformance(week=6, reps_on_last_set=6)]
        schedule = generate_program(ProgramConfig(100.0), log)
        (adj,) = derive_adjustments(schedule, "STANDARD")
        # -2 reps → ×0.95
        assert adj.week == 8
        assert adj.new_tm == pytest.approx(95.0)
        assert adj.display_percent == "-5.0%"
        assert adj.delta_kg == pytest.approx(-5.0)

    def test_latest_training_max(self):
        log = [WeekPerformance(week=1, reps_on_last_set=12)]
        schedule = generate_program(ProgramConfig(100.0), log)
        assert latest_training_max(schedule) == pytest.approx(102.0)

    def test_invalid_style(self):
        with pytest.raises(ValidationError):
            derive_adjustments([], "POWER")  # type: ignore[arg-type]


class TestTmTrendBuffer:
    def test_empty_snapshot(self):
        snap = TmTrendBuffer().snapshot()
        assert snap.adjustments == []
        assert snap.points == []
        assert snap.latest_tm is None
        assert snap.style == "STANDARD"

    def test_snapshot_is_idempotent(self):
        buf = TmTrendBuffer([_adj(4, 100.0, 102.0), _adj(2, 98.0, 100.0)])
        first = buf.snapshot()
        assert buf.snapshot() == first
        assert len(buf) == 2

    def test_snapshot_sorts_by_week(self):
        buf = TmTrendBuffer()
        buf.push(_adj(9, 102.0, 103.0))
        buf.push(_adj(3, 100.0, 102.0))
        snap = buf.snapshot()
        assert [a.week for a in snap.adjustments] == [3, 9]
        assert snap.points == [(3, 102.0), (9, 103.0)]
        assert snap.latest_tm == 103.0

    def test_last_push_for_a_week_wins(self):
        buf = TmTrendBuffer([_adj(5, 100.0, 102.0), _adj(5, 100.0, 101.0)])
        assert buf.snapshot().points == [(5, 101.0)]

    def test_filters_by_style_and_exercise(self):
        buf = TmTrendBuffer([
            _adj(2, 100.0, 102.0, exercise_id="squat"),
            _adj(3, 60.0, 61.0, exercise_id="bench"),
            _adj(4, 80.0, 81.0, style="HYPERTROPHY", exercise_id="squat"),
        ])
        snap = buf.snapshot("STANDARD", "squat")
        assert [a.week for a in snap.adjustments] == [2]
        assert snap.exercise_id == "squat"
        assert buf.snapshot("HYPERTROPHY").latest_tm == 81.0

    def test_events_is_a_copy(self):
        buf = TmTrendBuffer([_adj(2, 100.0, 102.0)])
        buf.events.clear()
        assert len(buf) == 1

    def test_clear(self):
        buf = TmTrendBuffer([_adj(2, 100.0, 102.0)])
        buf.clear()
        assert buf.snapshot().latest_tm is None

    def test_module_snapshot(self):
        snap = snapshot([_adj(2, 100.0, 102.0)], "STANDARD")
        assert snap.latest_tm == 102.0


class TestTmEvents:
    def test_valid_event(self):
        event = _event(reason="Missed two sessions")
        assert event.delta_kg == 5.0

    def test_delta_must_match_pre_post(self):
        with pytest.raises(ValidationError, match="does not match"):
            TmEvent("squat", 3, 10.0, 100.0, 105.0)

    def test_delta_floor(self):
        with pytest.raises(ValidationError, match="at least"):
            _event(pre=100.0, post=80.0)

    def test_large_increase_is_flagged_not_rejected(self):
        event = _event(pre=100.0, post=120.0)
        assert is_large_adjustment(event)
        assert not is_large_adjustment(_event(pre=100.0, post=110.0))

    @pytest.mark.parametrize("week", [0, 22])
    def test_week_range(self, week):
        with pytest.raises(ValidationError, match="week_number"):
            _event(week=week)

    def test_reason_length(self):
        _event(reason="x" * 160)
        with pytest.raises(ValidationError, match="reason"):
            _event(reason="x" * 161)

    def test_empty_exercise(self):
        with pytest.raises(ValidationError):
            _event(exercise_id="")

    def test_adjustments_from_events(self):
        adjustments = adjustments_from_events([_event(week=9), _event(week=2, pre=95.0, post=100.0)], "STANDARD")
        assert [a.week for a in adjustments] == [2, 9]
        assert adjustments[0].percent_change == pytest.approx(5.2631578947)
        assert adjustments[1].exercise_id == "squat"

    def test_summarize_events(self):
        events = [
            _event("squat", 3, 100.0, 105.0),
            _event("squat", 10, 105.0, 100.0),
            _event("bench", 5, 60.0, 62.5),
        ]
        bench, squat = summarize_events(events)
        assert bench.exercise_id == "bench"
        assert bench.total_delta_kg == pytest.approx(2.5)
        assert squat.adjustment_count == 2
        # (5 + -5) / 2
        assert squat.total_delta_kg == pytest.approx(0.0)
        assert squat.average_delta_kg == pytest.approx(0.0)
        assert squat.last_week == 10

    def test_summarize_no_events(self):
        assert summarize_events([]) == []


class TestTmDeltaChart:
    def test_losses_left_gains_right(self):
        from rtf_engine.core.ascii_plot import create_tm_delta_chart

        chart = create_tm_delta_chart(["squat", "bench"], [-10.0, 2.5], width=40)
        squat, bench = chart.splitlines()
        # half width 20; -10 kg sets the scale, 2.5 kg → 5 cells
        assert squat == "squat " + "░" * 20 + "│" + " " * 20 + " -10.0 kg"
        assert bench == "bench " + " " * 20 + "│" + "█" * 5 + " " * 15 + " +2.5 kg"

    def test_small_change_still_visible(self):
        from rtf_engine.core.ascii_plot import create_tm_delta_chart

        chart = create_tm_delta_chart(["a", "b"], [20.0, -0.5], width=20)
        assert chart.splitlines()[1].count("░") == 1

    def test_zero_change_has_no_bar(self):
        from rtf_engine.core.ascii_plot import create_tm_delta_chart

        line = create_tm_delta_chart(["squat"], [0.0], width=10)
        assert "█" not in line and "░" not in line
        assert line.endswith("+0.0 kg")

    def test_title_and_empty(self):
        from rtf_engine.core.ascii_plot import create_tm_delta_chart

        chart = create_tm_delta_chart(["squat"], [5.0], title="Total TM change by exercise")
        assert chart.splitlines()[0] == "Total TM change by exercise"
        assert create_tm_delta_chart([], []) == "No TM changes to display."
