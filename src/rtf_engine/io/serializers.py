"""
JSON serialization for engine data models.

Handles conversion between dataclasses and JSON-compatible dicts.  Dict
keys use the camelCase wire names of the forecast API so a locally
generated preview and a server-fetched forecast share one format.
"""

import json
from pathlib import Path
from typing import Any

from ..core.errors import ValidationError
from ..core.models import (
    ForecastWeek,
    ProgramConfig,
    RtfForecast,
    TmAdjustment,
    TmEvent,
    TmTrendSnapshot,
    VariantGoal,
    WeekPerformance,
    WeekPlan,
    validate_style,
)


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is a positive number.

    Args:
        value: Value to validate
        name: Name for error message

    Returns:
        The value if valid

    Raises:
        ValidationError: If value is missing, not numeric or not positive
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def _object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"Expected an object, got {type(data).__name__}")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return _object(data)[key]
    except KeyError as e:
        raise ValidationError(f"Missing field: {key}") from e


def _number(value: Any, key: str, cast: type) -> Any:
    """Convert a JSON value with *cast*, rejecting null, bools and junk strings."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{key} must be a number, got {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"{key} must be a number, got {value!r}") from e


def _int(data: dict[str, Any], key: str) -> int:
    return _number(_require(data, key), key, int)


def _float(data: dict[str, Any], key: str) -> float:
    return _number(_require(data, key), key, float)


def _optional_float(data: dict[str, Any], key: str) -> float | None:
    value = _object(data).get(key)
    return None if value is None else _number(value, key, float)


def _bool(data: dict[str, Any], key: str) -> bool:
    value = _require(data, key)
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false, got {value!r}")
    return value


def _list(data: dict[str, Any], key: str, default: list | None = None) -> list[Any]:
    if default is not None and key not in _object(data):
        return default
    value = _require(data, key)
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list, got {type(value).__name__}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = _object(data).get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{key} must be a string, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Program config
# ---------------------------------------------------------------------------


def program_config_to_dict(config: ProgramConfig) -> dict[str, Any]:
    return {
        "initialWeight": config.initial_weight,
        "style": config.style,
        "withDeloads": config.with_deloads,
        "roundingIncrementKg": config.rounding_increment_kg,
    }


def dict_to_program_config(data: dict[str, Any]) -> ProgramConfig:
    """
    Convert dict to ProgramConfig.

    Missing optional keys take the ProgramConfig defaults.

    Raises:
        ValidationError: If data is invalid
    """
    weight = validate_positive(_require(data, "initialWeight"), "initialWeight")
    kwargs: dict[str, Any] = {"initial_weight": float(weight)}
    if "style" in data:
        kwargs["style"] = validate_style(data["style"])
    if "withDeloads" in data:
        kwargs["with_deloads"] = _bool(data, "withDeloads")
    if "roundingIncrementKg" in data:
        kwargs["rounding_increment_kg"] = float(
            validate_positive(data["roundingIncrementKg"], "roundingIncrementKg")
        )
    return ProgramConfig(**kwargs)


# ---------------------------------------------------------------------------
# Week plans
# ---------------------------------------------------------------------------


def week_plan_to_dict(week: WeekPlan) -> dict[str, Any]:
    """
    Convert WeekPlan to JSON-compatible dict.

    Deload weeks serialize to ``{"week", "isDeload"}`` only.
    """
    if week.is_deload:
        return {"week": week.week, "isDeload": True}
    return {
        "week": week.week,
        "isDeload": False,
        "intensity": week.intensity,
        "fixedReps": week.fixed_reps,
        "amrapTarget": week.amrap_target,
        "sets": week.sets,
        "amrapSetIndex": week.amrap_set_index,
        "weight": week.weight,
        "goal": week.goal,
        "action": week.action,
        "tm": week.tm,
    }


def dict_to_week_plan(data: dict[str, Any]) -> WeekPlan:
    """
    Convert dict to WeekPlan.

    Raises:
        ValidationError: If data is invalid
    """
    week = _int(data, "week")
    if "isDeload" in data and _bool(data, "isDeload"):
        return WeekPlan.deload(week)
    return WeekPlan(
        week=week,
        is_deload=False,
        intensity=_float(data, "intensity"),
        fixed_reps=_int(data, "fixedReps"),
        amrap_target=_int(data, "amrapTarget"),
        sets=_int(data, "sets"),
        amrap_set_index=_int(data, "amrapSetIndex"),
        weight=_float(data, "weight"),
        goal=str(_require(data, "goal")),
        action=str(_require(data, "action")),
        tm=_float(data, "tm"),
    )


def schedule_to_list(schedule: list[WeekPlan]) -> list[dict[str, Any]]:
    return [week_plan_to_dict(w) for w in schedule]


def list_to_schedule(data: list[dict[str, Any]]) -> list[WeekPlan]:
    return [dict_to_week_plan(d) for d in data]


# ---------------------------------------------------------------------------
# Performance log
# ---------------------------------------------------------------------------


def week_performance_to_dict(perf: WeekPerformance) -> dict[str, Any]:
    d: dict[str, Any] = {
        "week": perf.week,
        "repsOnLastSet": perf.reps_on_last_set,
        "setsCompleted": perf.sets_completed,
    }
    if perf.single_at_8 is not None:
        d["singleAt8"] = perf.single_at_8
    return d


def dict_to_week_performance(data: dict[str, Any]) -> WeekPerformance:
    """
    Convert dict to WeekPerformance.

    Raises:
        ValidationError: If data is invalid
    """
    return WeekPerformance(
        week=_int(data, "week"),
        reps_on_last_set=_int(data, "repsOnLastSet"),
        sets_completed=_int(data, "setsCompleted") if "setsCompleted" in data else 0,
        single_at_8=_optional_float(data, "singleAt8"),
    )


def load_performance_log(path: Path) -> list[WeekPerformance]:
    """
    Read a JSON array of logged weeks.

    Args:
        path: File containing ``[{"week": 1, "repsOnLastSet": 10}, ...]``

    Returns:
        Parsed performance entries in file order

    Raises:
        FileNotFoundError: If path does not exist
        ValidationError: If the file is not a valid performance log
    """
    return [dict_to_week_performance(d) for d in _load_json_array(path, "weeks")]


def _load_json_array(path: Path, what: str) -> list[Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, list):
        raise ValidationError(f"{path} must contain a JSON array of {what}")
    return data


# ---------------------------------------------------------------------------
# Forecast
# ---------------------------------------------------------------------------


def variant_goal_to_dict(goal: VariantGoal) -> dict[str, Any]:
    return {
        "intensity": goal.intensity,
        "fixedReps": goal.fixed_reps,
        "amrapTarget": goal.amrap_target,
        "sets": goal.sets,
        "amrapSet": goal.amrap_set,
    }


def dict_to_variant_goal(data: dict[str, Any]) -> VariantGoal:
    return VariantGoal(
        intensity=_float(data, "intensity"),
        fixed_reps=_int(data, "fixedReps"),
        amrap_target=_int(data, "amrapTarget"),
        sets=_int(data, "sets"),
        amrap_set=_int(data, "amrapSet"),
    )


def forecast_week_to_dict(week: ForecastWeek) -> dict[str, Any]:
    """Deload rows omit the variant payloads entirely."""
    d: dict[str, Any] = {"week": week.week, "isDeload": week.is_deload}
    if week.standard is not None:
        d["standard"] = variant_goal_to_dict(week.standard)
    if week.hypertrophy is not None:
        d["hypertrophy"] = variant_goal_to_dict(week.hypertrophy)
    return d


def dict_to_forecast_week(data: dict[str, Any]) -> ForecastWeek:
    std = _object(data).get("standard")
    hyp = data.get("hypertrophy")
    return ForecastWeek(
        week=_int(data, "week"),
        is_deload=_bool(data, "isDeload") if "isDeload" in data else False,
        standard=dict_to_variant_goal(std) if std is not None else None,
        hypertrophy=dict_to_variant_goal(hyp) if hyp is not None else None,
    )


def forecast_to_dict(forecast: RtfForecast) -> dict[str, Any]:
    return {
        "routineId": forecast.routine_id,
        "weeks": forecast.weeks,
        "version": forecast.version,
        "withDeloads": forecast.with_deloads,
        "forecast": [forecast_week_to_dict(w) for w in forecast.forecast],
    }


def dict_to_forecast(data: dict[str, Any]) -> RtfForecast:
    """
    Convert a forecast endpoint payload to RtfForecast.

    Raises:
        ValidationError: If data is invalid
    """
    return RtfForecast(
        routine_id=str(_require(data, "routineId")),
        weeks=_int(data, "weeks"),
        version=_int(data, "version"),
        with_deloads=_bool(data, "withDeloads"),
        forecast=[dict_to_forecast_week(w) for w in _list(data, "forecast")],
    )


# ---------------------------------------------------------------------------
# TM trend
# ---------------------------------------------------------------------------


def tm_adjustment_to_dict(adj: TmAdjustment) -> dict[str, Any]:
    d: dict[str, Any] = {
        "week": adj.week,
        "previousTm": adj.previous_tm,
        "newTm": adj.new_tm,
        "percentChange": adj.percent_change,
        "style": adj.style,
    }
    if adj.exercise_id is not None:
        d["exerciseId"] = adj.exercise_id
    return d


def dict_to_tm_adjustment(data: dict[str, Any]) -> TmAdjustment:
    return TmAdjustment(
        week=_int(data, "week"),
        previous_tm=_float(data, "previousTm"),
        new_tm=_float(data, "newTm"),
        percent_change=_float(data, "percentChange"),
        style=validate_style(data.get("style", "STANDARD")),
        exercise_id=data.get("exerciseId"),
    )


def snapshot_to_dict(snap: TmTrendSnapshot) -> dict[str, Any]:
    return {
        "style": snap.style,
        "exerciseId": snap.exercise_id,
        "adjustments": [tm_adjustment_to_dict(a) for a in snap.adjustments],
        "points": [{"week": week, "tm": tm} for week, tm in snap.points],
        "latestTm": snap.latest_tm,
    }


def dict_to_snapshot(data: dict[str, Any]) -> TmTrendSnapshot:
    return TmTrendSnapshot(
        style=validate_style(_require(data, "style")),
        exercise_id=data.get("exerciseId"),
        adjustments=[dict_to_tm_adjustment(a) for a in _list(data, "adjustments", [])],
        points=[(_int(p, "week"), _float(p, "tm")) for p in _list(data, "points", [])],
        latest_tm=_optional_float(data, "latestTm"),
    )


def dict_to_tm_event(data: dict[str, Any]) -> TmEvent:
    """
    Convert a TM adjustment request payload to TmEvent.

    Raises:
        ValidationError: If data is invalid
    """
    return TmEvent(
        exercise_id=str(_require(data, "exerciseId")),
        week_number=_int(data, "weekNumber"),
        delta_kg=_float(data, "deltaKg"),
        pre_tm_kg=_float(data, "preTmKg"),
        post_tm_kg=_float(data, "postTmKg"),
        reason=_optional_str(data, "reason"),
    )


def tm_event_to_dict(event: TmEvent) -> dict[str, Any]:
    d: dict[str, Any] = {
        "exerciseId": event.exercise_id,
        "weekNumber": event.week_number,
        "deltaKg": event.delta_kg,
        "preTmKg": event.pre_tm_kg,
        "postTmKg": event.post_tm_kg,
    }
    if event.reason is not None:
        d["reason"] = event.reason
    return d


def load_tm_events(path: Path) -> list[TmEvent]:
    """
    Read a JSON array of TM adjustment requests.

    Raises:
        FileNotFoundError: If path does not exist
        ValidationError: If the file or any event is invalid
    """
    return [dict_to_tm_event(d) for d in _load_json_array(path, "TM events")]
