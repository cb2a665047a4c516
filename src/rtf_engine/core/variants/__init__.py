"""
RTF variant definitions.

Each style (Standard, Hypertrophy) is described by a VariantProfile that
parameterises the shared schedule generator.
"""

from .base import VariantProfile
from .registry import VARIANT_REGISTRY, get_variant

__all__ = [
    "VariantProfile",
    "VARIANT_REGISTRY",
    "get_variant",
]
