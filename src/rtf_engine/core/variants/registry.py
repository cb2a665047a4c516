"""
Variant registry.

Maps each RTF style to its VariantProfile.  Use get_variant() to look up
a profile by style; the generator and forecast projector consume the
profile uniformly instead of branching on the style name.

Variants are loaded from the bundled ``src/rtf_engine/variants/`` YAML
files at import time.  If nothing can be loaded a RuntimeError is
raised: the engine cannot run without variant definitions.
"""

from types import MappingProxyType
from typing import Mapping

from ..errors import ValidationError
from .base import VariantProfile


def _build_registry() -> Mapping[str, VariantProfile]:
    from .loader import load_variants_from_yaml

    loaded = load_variants_from_yaml()
    if not loaded:
        raise RuntimeError(
            "rtf-engine: no variant definitions could be loaded from YAML. "
            "Check that src/rtf_engine/variants/*.yaml files are present and valid."
        )
    return MappingProxyType(loaded)


VARIANT_REGISTRY: Mapping[str, VariantProfile] = _build_registry()


def get_variant(style: str) -> VariantProfile:
    """
    Return the VariantProfile for the given style.

    Args:
        style: "STANDARD" or "HYPERTROPHY"

    Returns:
        VariantProfile for the requested style

    Raises:
        ValidationError: If style is not in the registry
    """
    if style not in VARIANT_REGISTRY:
        valid = ", ".join(VARIANT_REGISTRY)
        raise ValidationError(f"Unknown style '{style}'. Valid styles: {valid}")
    return VARIANT_REGISTRY[style]
