"""
YAML → settings loader.

Loads default settings from settings.yaml (bundled with the package) and
optionally merges user overrides from ~/.rtf-engine/settings.yaml.

Usage:
    from rtf_engine.core.engine.config_loader import load_settings, setting
    cfg = load_settings()
    weight = setting(cfg, "program", "initial_weight", 100.0)

If the bundled YAML cannot be parsed, lookups fall back to the caller's
default (no crash).  If the user override file exists but has parse
errors, a warning is emitted and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(
            f"rtf-engine: ignoring settings file {path} ({exc})",
            stacklevel=2,
        )
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_settings_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    ref = importlib.resources.files("rtf_engine").joinpath("settings.yaml")
    if ref.is_file():
        return Path(str(ref))
    candidate = Path(__file__).parent.parent.parent / "settings.yaml"
    return candidate if candidate.exists() else None


def get_user_settings_path() -> Path | None:
    """Return ~/.rtf-engine/settings.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".rtf-engine" / "settings.yaml"
    return p if p.exists() else None


def load_settings(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/rtf_engine/settings.yaml
    2. User override (``user_path`` or ~/.rtf-engine/settings.yaml)

    Returns:
        Merged dict of settings sections.  Empty dict if no YAML available.
    """
    settings: dict[str, Any] = {}

    bundled = get_bundled_settings_path()
    if bundled is not None:
        settings = _deep_merge(settings, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_settings_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            settings = _deep_merge(settings, user_cfg)

    return settings


def setting(settings: dict[str, Any], section: str, key: str, default: Any) -> Any:
    """Look up ``settings[section][key]``, returning *default* when absent."""
    block = settings.get(section)
    if not isinstance(block, dict):
        return default
    return block.get(key, default)
