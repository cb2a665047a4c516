"""
Configuration constants for the Reps-to-Failure program engine.

All program-shape parameters are centralized here.  Per-style rep/set
profiles live in the variant YAML files (see core/variants/).
"""

from typing import Final

# =============================================================================
# PROGRAM SHAPE
# =============================================================================

TRAINING_WEEKS: Final[int] = 18  # Training (non-deload) weeks in every program
PROGRAM_WEEKS_WITH_DELOADS: Final[int] = 21
DELOAD_WEEKS: Final[frozenset[int]] = frozenset({7, 14, 21})  # 1-indexed

# =============================================================================
# INTENSITY RAMP
# =============================================================================

INTENSITY_STEP: Final[float] = 0.01  # Added per training week
INTENSITY_DECIMALS: Final[int] = 2  # Ramp values are kept at 2 decimals

# =============================================================================
# WEIGHT ROUNDING
# =============================================================================

SUPPORTED_ROUNDING_INCREMENTS_KG: Final[tuple[float, ...]] = (0.5, 1.0, 2.5, 5.0)
DEFAULT_ROUNDING_INCREMENT_KG: Final[float] = 5.0

# =============================================================================
# STYLES
# =============================================================================

STANDARD: Final[str] = "STANDARD"
HYPERTROPHY: Final[str] = "HYPERTROPHY"
DEFAULT_STYLE: Final[str] = STANDARD

# Routine progression schemes that map onto an RTF style
PROGRESSION_SCHEME_STYLES: Final[dict[str, str]] = {
    "PROGRAMMED_RTF": STANDARD,
    "PROGRAMMED_RTF_HYPERTROPHY": HYPERTROPHY,
}

# =============================================================================
# FORECAST
# =============================================================================

PREVIEW_WEEKS: Final[int] = 6  # Weeks shown in preview mode
FORECAST_VERSION: Final[int] = 1

# =============================================================================
# AMRAP TM ADJUSTMENT
# =============================================================================

# Multiplier on TM keyed by (reps on last set - AMRAP target).
# Differences beyond the table clamp to the outermost entry.
AMRAP_TM_MULTIPLIERS: Final[dict[int, float]] = {
    5: 1.03,
    4: 1.02,
    3: 1.015,
    2: 1.01,
    1: 1.005,
    0: 1.0,
    -1: 0.98,
    -2: 0.95,
}
AMRAP_DIFF_MAX: Final[int] = 5
AMRAP_DIFF_MIN: Final[int] = -2

# =============================================================================
# OPERATOR TM EVENTS
# =============================================================================

TM_EVENT_MAX_DELTA_KG: Final[float] = 15.0  # Larger increases are flagged, not rejected
TM_EVENT_MIN_DELTA_KG: Final[float] = -15.0  # Hard floor
TM_EVENT_MIN_WEEK: Final[int] = 1
TM_EVENT_MAX_WEEK: Final[int] = PROGRAM_WEEKS_WITH_DELOADS
TM_EVENT_MAX_REASON_LENGTH: Final[int] = 160
TM_EVENT_DELTA_TOLERANCE_KG: Final[float] = 0.01

# =============================================================================
# PROGRAM PHASES
# =============================================================================

EARLY_PHASE_FRACTION: Final[float] = 0.33
MID_PHASE_FRACTION: Final[float] = 0.66


def program_length(with_deloads: bool) -> int:
    """Total number of emitted weeks for a program."""
    return PROGRAM_WEEKS_WITH_DELOADS if with_deloads else TRAINING_WEEKS


def amrap_tm_multiplier(reps: int, target: int) -> float:
    """
    TM multiplier for an AMRAP result.

    Args:
        reps: Reps achieved on the last (AMRAP) set
        target: AMRAP target for that week

    Returns:
        Factor to apply to the current training max
    """
    diff = max(AMRAP_DIFF_MIN, min(AMRAP_DIFF_MAX, reps - target))
    return AMRAP_TM_MULTIPLIERS[diff]
