"""Phenotype-prioritization results attached to genes.

Each prioritizer produces one result type. The types form a tagged union
discriminated by ``priority_type`` so that input files can be validated
without inspecting classes at runtime, and every member exposes ``score``.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from variant_ranking.model.inheritance import ModeOfInheritance


class PriorityType(str, Enum):
    HIPHIVE = "HIPHIVE"
    EXOMEWALKER = "EXOMEWALKER"
    PHENIX = "PHENIX"
    OMIM = "OMIM"


class DiseaseInheritance(str, Enum):
    """Inheritance annotated on a known disease."""

    UNKNOWN = "UNKNOWN"
    AUTOSOMAL_DOMINANT = "AUTOSOMAL_DOMINANT"
    AUTOSOMAL_RECESSIVE = "AUTOSOMAL_RECESSIVE"
    AUTOSOMAL_DOMINANT_AND_RECESSIVE = "AUTOSOMAL_DOMINANT_AND_RECESSIVE"
    X_RECESSIVE = "X_RECESSIVE"
    X_DOMINANT = "X_DOMINANT"
    X_LINKED = "X_LINKED"
    Y_LINKED = "Y_LINKED"
    MITOCHONDRIAL = "MITOCHONDRIAL"
    SOMATIC = "SOMATIC"
    POLYGENIC = "POLYGENIC"

    def compatible_modes(self) -> frozenset[ModeOfInheritance]:
        """Modes of inheritance a sample could show for this disease."""
        return _DISEASE_MODES.get(self, frozenset())


_DISEASE_MODES = {
    DiseaseInheritance.AUTOSOMAL_DOMINANT: frozenset({ModeOfInheritance.AUTOSOMAL_DOMINANT}),
    DiseaseInheritance.AUTOSOMAL_RECESSIVE: frozenset({ModeOfInheritance.AUTOSOMAL_RECESSIVE}),
    DiseaseInheritance.AUTOSOMAL_DOMINANT_AND_RECESSIVE: frozenset(
        {ModeOfInheritance.AUTOSOMAL_DOMINANT, ModeOfInheritance.AUTOSOMAL_RECESSIVE}
    ),
    DiseaseInheritance.X_RECESSIVE: frozenset({ModeOfInheritance.X_RECESSIVE}),
    DiseaseInheritance.X_DOMINANT: frozenset({ModeOfInheritance.X_DOMINANT}),
    DiseaseInheritance.X_LINKED: frozenset(
        {ModeOfInheritance.X_RECESSIVE, ModeOfInheritance.X_DOMINANT}
    ),
    DiseaseInheritance.MITOCHONDRIAL: frozenset({ModeOfInheritance.MITOCHONDRIAL}),
}


class Disease(BaseModel):
    model_config = ConfigDict(frozen=True)

    disease_id: str
    name: str = ""
    inheritance: DiseaseInheritance = DiseaseInheritance.UNKNOWN


class DiseaseMatch(BaseModel):
    """Phenotype similarity between the sample and one known disease."""

    model_config = ConfigDict(frozen=True)

    disease: Disease
    score: float = Field(..., ge=0.0, le=1.0)


class HiPhivePriorityResult(BaseModel):
    """Cross-species phenotype similarity result.

    Attributes:
        score: Overall gene phenotype score
        human_score: Best human disease model match
        mouse_score: Best mouse model match
        fish_score: Best fish model match
        ppi_score: Best match propagated through the interaction network
        disease_matches: Disease matches keyed by the mode of inheritance they
            are compatible with
    """

    model_config = ConfigDict(frozen=True)

    priority_type: Literal["HIPHIVE"] = "HIPHIVE"
    score: float = Field(..., ge=0.0, le=1.0)
    human_score: float = Field(default=0.0, ge=0.0, le=1.0)
    mouse_score: float = Field(default=0.0, ge=0.0, le=1.0)
    fish_score: float = Field(default=0.0, ge=0.0, le=1.0)
    ppi_score: float = Field(default=0.0, ge=0.0, le=1.0)
    disease_matches: dict[ModeOfInheritance, list[DiseaseMatch]] = Field(default_factory=dict)

    @property
    def model_score(self) -> float:
        """Best score among the non-human model organisms and the network."""
        return max(self.mouse_score, self.fish_score, self.ppi_score)

    def compatible_disease_matches(self, mode: ModeOfInheritance) -> list[DiseaseMatch]:
        return list(self.disease_matches.get(mode, []))


class ExomeWalkerPriorityResult(BaseModel):
    """Interaction-network proximity to seed genes."""

    model_config = ConfigDict(frozen=True)

    priority_type: Literal["EXOMEWALKER"] = "EXOMEWALKER"
    score: float = Field(..., ge=0.0, le=1.0)


class PhenixPriorityResult(BaseModel):
    """Legacy human-only phenotype similarity."""

    model_config = ConfigDict(frozen=True)

    priority_type: Literal["PHENIX"] = "PHENIX"
    score: float = Field(..., ge=0.0, le=1.0)


class OmimPriorityResult(BaseModel):
    """Known diseases associated with the gene.

    The score is the gene-level inheritance agreement; the per-mode modifier
    applied during gene scoring is computed from ``diseases``.
    """

    model_config = ConfigDict(frozen=True)

    priority_type: Literal["OMIM"] = "OMIM"
    score: float = Field(default=1.0, ge=0.0, le=1.0)
    diseases: list[Disease] = Field(default_factory=list)


PriorityResult = Annotated[
    Union[
        HiPhivePriorityResult,
        ExomeWalkerPriorityResult,
        PhenixPriorityResult,
        OmimPriorityResult,
    ],
    Field(discriminator="priority_type"),
]
