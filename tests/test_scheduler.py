"""
Unit tests for the RTF schedule generator.

Covers program shape, the intensity ramp, weight rounding and the
AMRAP-driven TM adjustment.  Expected loads are hand-computed from
weight = round_half_up(TM × intensity / increment) × increment.
"""

import dataclasses

import pytest

from rtf_engine.core import scheduler
from rtf_engine.core.config import DELOAD_WEEKS, INTENSITY_STEP, amrap_tm_multiplier
from rtf_engine.core.errors import InvariantViolation, ValidationError
from rtf_engine.core.models import ProgramConfig, WeekPerformance, WeekPlan
from rtf_engine.core.scheduler import (
    adjust_training_max,
    deload_layout,
    explain_week,
    generate_hypertrophy_program,
    generate_program,
    round_to_increment,
    training_weeks,
    validate_config,
)
from rtf_engine.core.variants import get_variant

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _config(
    weight: float = 100.0,
    style: str = "STANDARD",
    with_deloads: bool = True,
    increment: float = 5.0,
) -> ProgramConfig:
    return ProgramConfig(
        initial_weight=weight,
        style=style,
        with_deloads=with_deloads,
        rounding_increment_kg=increment,
    )


def _perf(week: int, reps: int) -> WeekPerformance:
    return WeekPerformance(week=week, reps_on_last_set=reps, sets_completed=5)


def _week(schedule: list[WeekPlan], n: int) -> WeekPlan:
    return next(w for w in schedule if w.week == n)


# ---------------------------------------------------------------------------
# Program shape
# ---------------------------------------------------------------------------


class TestProgramShape:
    def test_with_deloads_has_21_weeks(self):
        schedule = generate_program(_config())
        assert len(schedule) == 21
        assert [w.week for w in schedule] == list(range(1, 22))

    def test_deloads_at_7_14_21(self):
        schedule = generate_program(_config())
        assert {w.week for w in schedule if w.is_deload} == set(DELOAD_WEEKS)

    def test_without_deloads_has_18_training_weeks(self):
        schedule = generate_program(_config(with_deloads=False))
        assert len(schedule) == 18
        assert not any(w.is_deload for w in schedule)

    def test_always_18_training_weeks(self):
        for with_deloads in (True, False):
            schedule = generate_program(_config(with_deloads=with_deloads))
            assert len(training_weeks(schedule)) == 18

    def test_deload_weeks_carry_no_targets(self):
        for week in generate_program(_config()):
            if week.is_deload:
                assert week.intensity is None
                assert week.weight is None
                assert week.sets is None
                assert week.tm is None

    def test_deload_layout(self):
        layout = deload_layout(True)
        assert len(layout) == 21
        assert [i + 1 for i, d in enumerate(layout) if d] == [7, 14, 21]
        assert deload_layout(False) == [False] * 18

    def test_deterministic(self):
        assert generate_program(_config()) == generate_program(_config())


# ---------------------------------------------------------------------------
# Intensity ramp
# ---------------------------------------------------------------------------


class TestIntensityRamp:
    def test_standard_starts_at_70_percent(self):
        first = training_weeks(generate_program(_config()))[0]
        assert first.intensity == pytest.approx(0.70)

    def test_hypertrophy_starts_at_65_percent(self):
        first = training_weeks(generate_program(_config(style="HYPERTROPHY")))[0]
        assert first.intensity == pytest.approx(0.65)

    def test_strictly_increasing_by_one_percent(self):
        weeks = training_weeks(generate_program(_config()))
        for prev, cur in zip(weeks, weeks[1:]):
            assert cur.intensity - prev.intensity == pytest.approx(INTENSITY_STEP)

    def test_ramp_skips_deloads(self):
        schedule = generate_program(_config())
        # Week 8 is the 7th training week: 0.70 + 6 × 0.01
        assert _week(schedule, 8).intensity == pytest.approx(0.76)

    def test_last_training_week(self):
        # 18th training week: 0.70 + 17 × 0.01 = 0.87 (standard), 0.82 (hypertrophy)
        std = training_weeks(generate_program(_config()))
        hyp = training_weeks(generate_program(_config(style="HYPERTROPHY")))
        assert std[-1].intensity == pytest.approx(0.87)
        assert hyp[-1].intensity == pytest.approx(0.82)

    @pytest.mark.parametrize("style", ["STANDARD", "HYPERTROPHY"])
    def test_intensity_within_variant_band(self, style):
        variant = get_variant(style)
        for week in training_weeks(generate_program(_config(style=style))):
            assert variant.intensity_min <= week.intensity <= variant.intensity_max

    def test_intensity_outside_band_is_an_invariant_violation(self, monkeypatch):
        # Standard week 18 is 0.87; a 0.80 ceiling is crossed at training week 12
        narrow = dataclasses.replace(get_variant("STANDARD"), intensity_max=0.80)
        monkeypatch.setattr(scheduler, "get_variant", lambda style: narrow)
        with pytest.raises(InvariantViolation, match="0.81"):
            generate_program(_config())

    @pytest.mark.parametrize("with_deloads, length", [(True, 21), (False, 18)])
    def test_scenario_100kg_2_5kg(self, with_deloads, length):
        schedule = generate_program(_config(increment=2.5, with_deloads=with_deloads))
        weeks = training_weeks(schedule)
        assert len(schedule) == length
        assert weeks[0].intensity == pytest.approx(0.70)
        assert weeks[-1].intensity == pytest.approx(0.87)
        # 100 × 0.87 = 87 → 87.5 (34.8 steps → 35)
        assert weeks[-1].weight == 87.5

    def test_layout_does_not_change_ramp(self):
        with_d = training_weeks(generate_program(_config(with_deloads=True)))
        without_d = training_weeks(generate_program(_config(with_deloads=False)))
        assert [w.intensity for w in with_d] == [w.intensity for w in without_d]


# ---------------------------------------------------------------------------
# Rep/set scheme
# ---------------------------------------------------------------------------


class TestRepScheme:
    def test_standard_scheme(self):
        for week in training_weeks(generate_program(_config())):
            assert (week.fixed_reps, week.amrap_target, week.sets, week.amrap_set_index) == (5, 8, 5, 5)

    def test_hypertrophy_scheme(self):
        for week in training_weeks(generate_program(_config(style="HYPERTROPHY"))):
            assert (week.fixed_reps, week.amrap_target, week.sets, week.amrap_set_index) == (8, 12, 4, 4)

    def test_generate_hypertrophy_program_forces_style(self):
        schedule = generate_hypertrophy_program(_config(style="STANDARD"))
        assert training_weeks(schedule)[0].amrap_target == 12

    def test_goal_text(self):
        first = generate_program(_config())[0]
        assert first.goal == "Week 1: 5×5 @ 70%, AMRAP 8+"

    def test_first_week_action(self):
        first = generate_program(_config(weight=102.5))[0]
        assert first.action == "Starting TM: 102.5kg."

    def test_later_week_action_mentions_ramp(self):
        assert "Increase intensity +1%" in generate_program(_config())[1].action

    def test_week_after_deload(self):
        assert _week(generate_program(_config()), 8).action.startswith("Back from deload.")


# ---------------------------------------------------------------------------
# Weight rounding
# ---------------------------------------------------------------------------


class TestRounding:
    @pytest.mark.parametrize(
        "value, increment, expected",
        [
            (72.5, 5.0, 75.0),   # exact half rounds up
            (67.5, 5.0, 70.0),
            (62.5, 5.0, 65.0),   # banker's rounding would give 60
            (71.0, 2.5, 70.0),
            (71.25, 2.5, 72.5),  # 28.5 steps → 29
            (0.25, 0.5, 0.5),
            (73.4, 1.0, 73.0),
        ],
    )
    def test_round_half_up(self, value, increment, expected):
        assert round_to_increment(value, increment) == pytest.approx(expected)

    def test_known_weights_100kg_5kg(self):
        schedule = generate_program(_config())
        # TM 100: 70 → 70, 71 → 70, 72 → 70, 73 → 75, 74 → 75, 75 → 75
        assert [w.weight for w in schedule[:6]] == [70.0, 70.0, 70.0, 75.0, 75.0, 75.0]
        # Week 20: 87 → 85
        assert _week(schedule, 20).weight == 85.0

    def test_known_weights_hypertrophy(self):
        schedule = generate_program(_config(style="HYPERTROPHY", increment=2.5))
        # 65 → 65, 66 → 65, 67 → 67.5 (26.8 steps → 27)
        assert [w.weight for w in schedule[:3]] == [65.0, 65.0, 67.5]

    def test_every_weight_is_a_multiple_of_the_increment(self):
        for inc in (0.5, 1.0, 2.5, 5.0):
            for week in training_weeks(generate_program(_config(weight=137.3, increment=inc))):
                steps = week.weight / inc
                assert steps == pytest.approx(round(steps))

    def test_weight_within_half_increment(self):
        for week in training_weeks(generate_program(_config(weight=123.0, increment=2.5))):
            assert abs(week.weight - week.tm * week.intensity) <= 1.25 + 1e-9

    def test_tiny_weight_stays_valid(self):
        schedule = generate_program(_config(weight=1.0, increment=5.0))
        # 1 × 0.70 = 0.7 → 0 steps
        assert schedule[0].weight == 0.0


# ---------------------------------------------------------------------------
# TM adjustment from logged AMRAP results
# ---------------------------------------------------------------------------


class TestTrainingMaxAdjustment:
    @pytest.mark.parametrize(
        "diff, factor",
        [(7, 1.03), (5, 1.03), (4, 1.02), (3, 1.015), (2, 1.01), (1, 1.005),
         (0, 1.0), (-1, 0.98), (-2, 0.95), (-6, 0.95)],
    )
    def test_multiplier_table(self, diff, factor):
        assert amrap_tm_multiplier(8 + diff, 8) == factor

    def test_adjust_training_max(self):
        assert adjust_training_max(12, 8, 100.0) == pytest.approx(102.0)

    def test_no_log_keeps_tm_constant(self):
        tms = {w.tm for w in training_weeks(generate_program(_config()))}
        assert tms == {100.0}

    def test_empty_log_equals_no_log(self):
        assert generate_program(_config(), []) == generate_program(_config())

    def test_beating_target_raises_next_week(self):
        schedule = generate_program(_config(), [_perf(1, 13)])
        # +5 reps → ×1.03 → TM 103; 103 × 0.71 = 73.13 → 75
        week2 = _week(schedule, 2)
        assert week2.tm == pytest.approx(103.0)
        assert week2.weight == 75.0
        assert "TM adjusted from 100.0 to 103.0kg (+3.0%)" in week2.action

    def test_missing_target_lowers_next_week(self):
        schedule = generate_program(_config(), [_perf(1, 7)])
        # -1 rep → ×0.98 → TM 98; 98 × 0.71 = 69.58 → 70
        week2 = _week(schedule, 2)
        assert week2.tm == pytest.approx(98.0)
        assert week2.weight == 70.0
        assert "(-2.0%)" in week2.action

    def test_on_target_keeps_tm(self):
        week2 = _week(generate_program(_config(), [_perf(1, 8)]), 2)
        assert week2.tm == 100.0
        assert "TM unchanged at 100.0kg" in week2.action

    def test_adjustment_persists(self):
        schedule = generate_program(_config(), [_perf(1, 13)])
        assert all(w.tm == pytest.approx(103.0) for w in training_weeks(schedule)[1:])

    def test_deload_bridges_week_6_to_week_8(self):
        schedule = generate_program(_config(), [_perf(6, 10)])
        # +2 reps → ×1.01 → TM 101 from week 8; 101 × 0.76 = 76.76 → 75
        assert _week(schedule, 6).tm == 100.0
        week8 = _week(schedule, 8)
        assert week8.tm == pytest.approx(101.0)
        assert week8.weight == 75.0
        assert week8.action.startswith("Back from deload.")
        assert "Week 6: 10/8 reps." in week8.action

    def test_adjustments_compound(self):
        schedule = generate_program(_config(), [_perf(1, 12), _perf(2, 12)])
        # 100 × 1.02 × 1.02 = 104.04
        assert _week(schedule, 3).tm == pytest.approx(104.04)

    def test_deload_week_result_is_ignored(self):
        schedule = generate_program(_config(), [_perf(7, 20)])
        assert _week(schedule, 8).tm == 100.0

    def test_log_order_does_not_matter(self):
        log = [_perf(1, 12), _perf(3, 6)]
        assert generate_program(_config(), log) == generate_program(_config(), list(reversed(log)))

    def test_hypertrophy_uses_its_own_target(self):
        schedule = generate_program(_config(style="HYPERTROPHY"), [_perf(1, 12)])
        assert _week(schedule, 2).tm == 100.0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    @pytest.mark.parametrize("weight", [0, -5.0])
    def test_non_positive_weight(self, weight):
        with pytest.raises(ValidationError, match="Training Max must be greater than 0"):
            _config(weight=weight)

    def test_non_numeric_weight(self):
        with pytest.raises(ValidationError):
            _config(weight="100")  # type: ignore[arg-type]

    def test_bool_weight_rejected(self):
        with pytest.raises(ValidationError):
            _config(weight=True)  # type: ignore[arg-type]

    @pytest.mark.parametrize("weight", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_weight(self, weight):
        with pytest.raises(ValidationError, match="finite"):
            _config(weight=weight)

    def test_unsupported_increment(self):
        with pytest.raises(ValidationError, match="Unsupported rounding increment"):
            _config(increment=3.0)

    def test_bool_increment_rejected(self):
        # True == 1 would otherwise pass the membership check
        with pytest.raises(ValidationError, match="Unsupported rounding increment"):
            _config(increment=True)  # type: ignore[arg-type]

    def test_unknown_style(self):
        with pytest.raises(ValidationError, match="Invalid style"):
            _config(style="POWER")

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            _config(weight=-1.0)

    def test_validate_config_rejects_other_types(self):
        with pytest.raises(ValidationError):
            validate_config({"initial_weight": 100})  # type: ignore[arg-type]

    def test_log_beyond_program(self):
        with pytest.raises(ValidationError, match="week 19"):
            generate_program(_config(with_deloads=False), [_perf(19, 8)])

    def test_duplicate_log_week(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            generate_program(_config(), [_perf(2, 8), _perf(2, 9)])

    def test_log_entries_must_be_performance(self):
        with pytest.raises(ValidationError):
            generate_program(_config(), [{"week": 1, "repsOnLastSet": 8}])  # type: ignore[list-item]

    def test_negative_reps(self):
        with pytest.raises(ValidationError):
            WeekPerformance(week=1, reps_on_last_set=-1)

    def test_deload_marker_with_targets(self):
        with pytest.raises(ValidationError):
            WeekPlan(week=7, is_deload=True, intensity=0.7)


# ---------------------------------------------------------------------------
# explain_week
# ---------------------------------------------------------------------------


class TestExplainWeek:
    def test_training_week(self):
        text = explain_week(_config(), 4)
        assert "Week 4" in text
        # 4th training week: 0.70 + 3 × 0.01
        assert "= 0.73" in text
        assert "75 kg" in text

    def test_deload_week(self):
        assert "Deload week" in explain_week(_config(), 7)

    def test_shows_applied_result(self):
        text = explain_week(_config(), 2, [_perf(1, 13)])
        assert "diff +5" in text
        assert "× 1.03" in text

    @pytest.mark.parametrize("week", [0, 22])
    def test_out_of_range(self, week):
        with pytest.raises(ValidationError, match="outside the program"):
            explain_week(_config(), week)
