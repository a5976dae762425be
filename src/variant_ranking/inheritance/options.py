"""Maximum population frequency allowed for each mode of inheritance."""

import math
from typing import Mapping

from variant_ranking.model.inheritance import ModeOfInheritance, SubModeOfInheritance

# Percentages
DEFAULT_MAX_FREQUENCIES = {
    SubModeOfInheritance.AUTOSOMAL_DOMINANT: 0.1,
    SubModeOfInheritance.AUTOSOMAL_RECESSIVE_COMP_HET: 2.0,
    SubModeOfInheritance.AUTOSOMAL_RECESSIVE_HOM_ALT: 1.0,
    SubModeOfInheritance.X_DOMINANT: 0.1,
    SubModeOfInheritance.X_RECESSIVE_COMP_HET: 2.0,
    SubModeOfInheritance.X_RECESSIVE_HOM_ALT: 1.0,
    SubModeOfInheritance.MITOCHONDRIAL: 0.2,
}

# Sub-mode whose ceiling applies to a whole mode
_MODE_CEILINGS = {
    ModeOfInheritance.AUTOSOMAL_DOMINANT: SubModeOfInheritance.AUTOSOMAL_DOMINANT,
    ModeOfInheritance.AUTOSOMAL_RECESSIVE: SubModeOfInheritance.AUTOSOMAL_RECESSIVE_COMP_HET,
    ModeOfInheritance.X_DOMINANT: SubModeOfInheritance.X_DOMINANT,
    ModeOfInheritance.X_RECESSIVE: SubModeOfInheritance.X_RECESSIVE_COMP_HET,
    ModeOfInheritance.MITOCHONDRIAL: SubModeOfInheritance.MITOCHONDRIAL,
}


class InheritanceModeOptions:
    """Immutable map of sub-mode to maximum frequency percentage.

    Modes without an entry are not analysed and have no frequency ceiling.

    Raises:
        ValueError: If ``ANY`` is used as a key or a value lies outside 0-100
    """

    def __init__(self, max_frequencies: Mapping[SubModeOfInheritance, float]):
        values = {}
        for sub_mode, max_freq in max_frequencies.items():
            sub_mode = SubModeOfInheritance(sub_mode)
            if sub_mode == SubModeOfInheritance.ANY:
                raise ValueError("ANY cannot be used as an inheritance mode option")
            if not 0.0 <= max_freq <= 100.0:
                raise ValueError(
                    f"Max frequency for {sub_mode.value} must be a percentage in 0-100, got {max_freq}"
                )
            values[sub_mode] = float(max_freq)
        self._max_frequencies = values

    @classmethod
    def defaults(cls) -> "InheritanceModeOptions":
        return cls(DEFAULT_MAX_FREQUENCIES)

    @classmethod
    def empty(cls) -> "InheritanceModeOptions":
        return cls({})

    @property
    def is_empty(self) -> bool:
        return not self._max_frequencies

    @property
    def defined_modes(self) -> list[ModeOfInheritance]:
        """Modes with at least one configured sub-mode, in a fixed order."""
        modes = {sub_mode.mode for sub_mode in self._max_frequencies}
        return [mode for mode in ModeOfInheritance if mode in modes]

    def max_freq_for_sub_mode(self, sub_mode: SubModeOfInheritance) -> float:
        return self._max_frequencies.get(sub_mode, math.inf)

    def max_freq_for(self, mode: ModeOfInheritance) -> float:
        """Frequency ceiling for a mode; recessive modes use the comp-het value."""
        sub_mode = _MODE_CEILINGS.get(mode)
        if sub_mode is None:
            return math.inf
        return self._max_frequencies.get(sub_mode, math.inf)

    def as_dict(self) -> dict[str, float]:
        return {sub_mode.value: value for sub_mode, value in self._max_frequencies.items()}

    def __eq__(self, other) -> bool:
        if not isinstance(other, InheritanceModeOptions):
            return NotImplemented
        return self._max_frequencies == other._max_frequencies

    def __repr__(self) -> str:
        return f"InheritanceModeOptions({self.as_dict()})"
