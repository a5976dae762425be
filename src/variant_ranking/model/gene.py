"""Candidate genes and their per-mode scores."""

from pydantic import BaseModel, ConfigDict, Field

from variant_ranking.acmg.assignment import AcmgAssignment
from variant_ranking.model.inheritance import ModeOfInheritance
from variant_ranking.model.priority import DiseaseMatch, PriorityResult, PriorityType
from variant_ranking.model.variant import CandidateVariant


class GeneScore(BaseModel):
    """Score of one gene under one mode of inheritance.

    Attributes:
        gene_symbol: HGNC gene symbol
        gene_id: Gene identifier
        mode: Mode of inheritance the score was computed for
        variant_score: Mean score of the contributing variants (0 if none)
        phenotype_score: Phenotype relevance of the gene under this mode
        combined_score: Combined variant and phenotype score
        p_value: Probability of a combined score at least this high by chance
        contributing_variants: Variants selected as explaining the phenotype
        compatible_disease_matches: Known diseases matching both phenotype and mode
        acmg_assignments: ACMG classification of each contributing variant
    """

    model_config = ConfigDict(frozen=True)

    gene_symbol: str
    gene_id: str = ""
    mode: ModeOfInheritance
    variant_score: float = 0.0
    phenotype_score: float = 0.0
    combined_score: float = 0.0
    p_value: float = 1.0
    contributing_variants: list[CandidateVariant] = Field(default_factory=list)
    compatible_disease_matches: list[DiseaseMatch] = Field(default_factory=list)
    acmg_assignments: list[AcmgAssignment] = Field(default_factory=list)

    def sort_key(self) -> tuple:
        """Combined score descending, then gene symbol and mode ascending."""
        return (-self.combined_score, self.gene_symbol, self.mode.value)

    @property
    def has_compatible_disease_matches(self) -> bool:
        return bool(self.compatible_disease_matches)


class GeneCandidate(BaseModel):
    """A gene with its filtered variants and phenotype prioritization results.

    ``compatible_modes`` and ``gene_scores`` are filled in during analysis.
    """

    gene_symbol: str
    gene_id: str = ""
    variants: list[CandidateVariant] = Field(default_factory=list)
    priority_results: list[PriorityResult] = Field(default_factory=list)
    compatible_modes: set[ModeOfInheritance] = Field(default_factory=set)
    gene_scores: list[GeneScore] = Field(default_factory=list)

    @property
    def passed_variants(self) -> list[CandidateVariant]:
        return [variant for variant in self.variants if variant.passed_filters]

    def is_compatible_with(self, mode: ModeOfInheritance) -> bool:
        return mode in self.compatible_modes

    def priority_result(self, priority_type: PriorityType) -> PriorityResult | None:
        for result in self.priority_results:
            if result.priority_type == priority_type:
                return result
        return None

    @property
    def priority_types(self) -> set[PriorityType]:
        return {PriorityType(result.priority_type) for result in self.priority_results}

    def gene_score_for_mode(self, mode: ModeOfInheritance) -> GeneScore | None:
        for gene_score in self.gene_scores:
            if gene_score.mode == mode:
                return gene_score
        return None

    @property
    def top_gene_score(self) -> GeneScore | None:
        if not self.gene_scores:
            return None
        return min(self.gene_scores, key=GeneScore.sort_key)

    @property
    def combined_score(self) -> float:
        top = self.top_gene_score
        return top.combined_score if top is not None else 0.0
