"""
YAML → VariantProfile loader.

Loads variant definitions from individual YAML files in the bundled
``src/rtf_engine/variants/`` directory.  Each file (e.g. standard.yaml)
contains a flat definition matching the VariantProfile schema.

The set of variants is closed: unlike settings.yaml there is no user
override directory, since the program invariants depend on these values.

Usage (internal, called by registry.py):
    from .loader import load_variants_from_yaml
    variants = load_variants_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..config import INTENSITY_DECIMALS, INTENSITY_STEP, TRAINING_WEEKS
from .base import VariantProfile

_REQUIRED_VARIANT_FIELDS: frozenset[str] = frozenset(
    {
        "style",
        "display_name",
        "description",
        "base_intensity",
        "fixed_reps",
        "amrap_target",
        "sets",
        "intensity_min",
        "intensity_max",
    }
)


def variant_from_dict(d: dict) -> VariantProfile:
    """Convert a raw dict (from YAML) to a VariantProfile.

    Raises ValueError if any required field is absent or out of range.
    """
    missing = _REQUIRED_VARIANT_FIELDS - set(d)
    if missing:
        raise ValueError(f"VariantProfile missing fields: {sorted(missing)}")

    profile = VariantProfile(
        style=str(d["style"]).upper(),
        display_name=str(d["display_name"]),
        description=str(d["description"]),
        base_intensity=float(d["base_intensity"]),
        fixed_reps=int(d["fixed_reps"]),
        amrap_target=int(d["amrap_target"]),
        sets=int(d["sets"]),
        intensity_min=float(d["intensity_min"]),
        intensity_max=float(d["intensity_max"]),
    )

    if not 0 < profile.base_intensity <= 1:
        raise ValueError(f"base_intensity must be in (0, 1], got {profile.base_intensity}")
    if min(profile.fixed_reps, profile.amrap_target, profile.sets) <= 0:
        raise ValueError("fixed_reps, amrap_target and sets must be positive")

    # The whole ramp, week 1 to the last training week, must fit the band.
    first = profile.intensity_for(1, INTENSITY_STEP, INTENSITY_DECIMALS)
    last = profile.intensity_for(TRAINING_WEEKS, INTENSITY_STEP, INTENSITY_DECIMALS)
    if not profile.intensity_min <= first <= last <= profile.intensity_max:
        raise ValueError(
            f"intensity ramp {first:.2f}-{last:.2f} leaves the band "
            f"[{profile.intensity_min}, {profile.intensity_max}]"
        )
    return profile


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} if it is unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"rtf-engine: cannot read {path.name} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _get_bundled_variants_dir() -> Path | None:
    """Return path to the bundled variants/ data directory, or None if not found."""
    # loader.py lives at src/rtf_engine/core/variants/loader.py
    # three levels up → src/rtf_engine/
    candidate = Path(__file__).parent.parent.parent / "variants"
    return candidate if candidate.is_dir() else None


def load_variants_from_yaml(directory: Path | None = None) -> dict[str, VariantProfile] | None:
    """Return {style: VariantProfile} loaded from per-variant YAML files.

    Args:
        directory: Directory to scan; defaults to the bundled variants/ dir

    Returns None (rather than raising) so the registry can report the
    failure with a single clear message.
    """
    variants_dir = directory if directory is not None else _get_bundled_variants_dir()
    if variants_dir is None or not variants_dir.is_dir():
        return None

    result: dict[str, VariantProfile] = {}
    for path in sorted(variants_dir.glob("*.yaml")):
        raw = _load_yaml_file(path)
        if not raw:
            continue
        try:
            profile = variant_from_dict(raw)
        except (TypeError, ValueError) as exc:
            warnings.warn(
                f"rtf-engine: skipping variant '{path.stem}' ({exc})",
                stacklevel=2,
            )
            continue
        result[profile.style] = profile

    return result if result else None
