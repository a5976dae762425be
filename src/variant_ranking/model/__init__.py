"""Domain model: pedigrees, genotypes, variants and priority results.

Gene candidates and gene scores live in ``variant_ranking.model.gene``, which
depends on the ACMG records.
"""

from variant_ranking.model.inheritance import ModeOfInheritance, SubModeOfInheritance
from variant_ranking.model.pedigree import AffectedStatus, FamilyMember, Pedigree, Sex
from variant_ranking.model.genotype import AlleleCall, GenotypeCall
from variant_ranking.model.variant import (
    CandidateVariant,
    ClinVarData,
    ClinVarSignificance,
    FrequencyData,
    PathogenicityData,
    PathogenicitySource,
    TranscriptAnnotation,
    VariantEffect,
)
from variant_ranking.model.priority import (
    Disease,
    DiseaseInheritance,
    DiseaseMatch,
    ExomeWalkerPriorityResult,
    HiPhivePriorityResult,
    OmimPriorityResult,
    PhenixPriorityResult,
    PriorityResult,
    PriorityType,
)

__all__ = [
    "ModeOfInheritance",
    "SubModeOfInheritance",
    "AffectedStatus",
    "FamilyMember",
    "Pedigree",
    "Sex",
    "AlleleCall",
    "GenotypeCall",
    "CandidateVariant",
    "ClinVarData",
    "ClinVarSignificance",
    "FrequencyData",
    "PathogenicityData",
    "PathogenicitySource",
    "TranscriptAnnotation",
    "VariantEffect",
    "Disease",
    "DiseaseInheritance",
    "DiseaseMatch",
    "ExomeWalkerPriorityResult",
    "HiPhivePriorityResult",
    "OmimPriorityResult",
    "PhenixPriorityResult",
    "PriorityResult",
    "PriorityType",
]
