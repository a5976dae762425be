"""Modes of inheritance and their sub-modes."""

from enum import Enum


class ModeOfInheritance(str, Enum):
    """Mendelian modes of inheritance a variant or gene can be compatible with."""

    AUTOSOMAL_DOMINANT = "AD"
    AUTOSOMAL_RECESSIVE = "AR"
    X_DOMINANT = "XD"
    X_RECESSIVE = "XR"
    MITOCHONDRIAL = "MT"
    ANY = "ANY"

    @property
    def is_recessive(self) -> bool:
        return self in (ModeOfInheritance.AUTOSOMAL_RECESSIVE, ModeOfInheritance.X_RECESSIVE)


class SubModeOfInheritance(str, Enum):
    """Finer-grained modes, splitting recessive modes by zygosity model.

    Frequency ceilings are configured per sub-mode.
    """

    AUTOSOMAL_DOMINANT = "AD"
    AUTOSOMAL_RECESSIVE_COMP_HET = "AR_COMP_HET"
    AUTOSOMAL_RECESSIVE_HOM_ALT = "AR_HOM_ALT"
    X_DOMINANT = "XD"
    X_RECESSIVE_COMP_HET = "XR_COMP_HET"
    X_RECESSIVE_HOM_ALT = "XR_HOM_ALT"
    MITOCHONDRIAL = "MT"
    ANY = "ANY"

    @property
    def mode(self) -> ModeOfInheritance:
        """Parent mode of inheritance for this sub-mode."""
        return _SUB_MODE_PARENTS[self]


_SUB_MODE_PARENTS = {
    SubModeOfInheritance.AUTOSOMAL_DOMINANT: ModeOfInheritance.AUTOSOMAL_DOMINANT,
    SubModeOfInheritance.AUTOSOMAL_RECESSIVE_COMP_HET: ModeOfInheritance.AUTOSOMAL_RECESSIVE,
    SubModeOfInheritance.AUTOSOMAL_RECESSIVE_HOM_ALT: ModeOfInheritance.AUTOSOMAL_RECESSIVE,
    SubModeOfInheritance.X_DOMINANT: ModeOfInheritance.X_DOMINANT,
    SubModeOfInheritance.X_RECESSIVE_COMP_HET: ModeOfInheritance.X_RECESSIVE,
    SubModeOfInheritance.X_RECESSIVE_HOM_ALT: ModeOfInheritance.X_RECESSIVE,
    SubModeOfInheritance.MITOCHONDRIAL: ModeOfInheritance.MITOCHONDRIAL,
    SubModeOfInheritance.ANY: ModeOfInheritance.ANY,
}

# Modes evaluated through the Mendelian checker ("ANY" is handled separately)
CHECKED_MODES = (
    ModeOfInheritance.AUTOSOMAL_DOMINANT,
    ModeOfInheritance.AUTOSOMAL_RECESSIVE,
    ModeOfInheritance.X_DOMINANT,
    ModeOfInheritance.X_RECESSIVE,
    ModeOfInheritance.MITOCHONDRIAL,
)
