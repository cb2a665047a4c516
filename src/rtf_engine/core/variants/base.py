"""
Base type for RTF variant definitions.

A VariantProfile holds every per-style constant the generator and the
forecast projector need, so neither has to branch on the style name.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class VariantProfile:
    """
    Rep/set/intensity profile applied to every training week of a program.

    The AMRAP set is always the last set, so ``amrap_set == sets``.
    """

    # Identity
    style: str                # "STANDARD" | "HYPERTROPHY"
    display_name: str         # e.g. "Standard"
    description: str

    # Intensity ramp
    base_intensity: float     # Intensity of training week 1 (fraction of TM)

    # Set/rep scheme
    fixed_reps: int           # Reps on every set before the AMRAP set
    amrap_target: int         # Reps expected (or exceeded) on the AMRAP set
    sets: int

    # Every generated intensity must lie in this band (checked on load)
    intensity_min: float
    intensity_max: float

    @property
    def amrap_set(self) -> int:
        """1-based index of the AMRAP set."""
        return self.sets

    def intensity_for(self, training_index: int, step: float, decimals: int) -> float:
        """Intensity for the 1-based training week index."""
        return round(self.base_intensity + (training_index - 1) * step, decimals)
