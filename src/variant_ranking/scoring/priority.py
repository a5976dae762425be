"""Per-mode phenotype score of a gene."""

from variant_ranking.model.gene import GeneCandidate
from variant_ranking.model.inheritance import ModeOfInheritance
from variant_ranking.model.priority import (
    DiseaseInheritance,
    DiseaseMatch,
    HiPhivePriorityResult,
    OmimPriorityResult,
    PriorityType,
)

# Down-rank factor for genes whose known disease inheritance disagrees
MISMATCH_MODIFIER = 0.5


def _score_disease_inheritance(gene: GeneCandidate, inheritance: DiseaseInheritance) -> float:
    if inheritance in (DiseaseInheritance.SOMATIC, DiseaseInheritance.POLYGENIC):
        return MISMATCH_MODIFIER
    if inheritance == DiseaseInheritance.Y_LINKED:
        return 1.0
    if not gene.compatible_modes:
        return 1.0
    if any(gene.is_compatible_with(mode) for mode in inheritance.compatible_modes()):
        return 1.0
    return MISMATCH_MODIFIER


def known_disease_inheritance_modifier(gene: GeneCandidate, mode: ModeOfInheritance) -> float:
    """Factor in [0.5, 1] for agreement between known diseases and ``mode``.

    Genes without compatible modes, and the ``ANY`` mode, are never
    down-ranked. A gene incompatible with ``mode`` gets 0.5. Otherwise the
    best agreement over the gene's known diseases with an annotated
    inheritance is used, 1 when there are none.
    """
    if not gene.compatible_modes or mode == ModeOfInheritance.ANY:
        return 1.0
    if not gene.is_compatible_with(mode):
        return MISMATCH_MODIFIER
    omim = gene.priority_result(PriorityType.OMIM)
    diseases = omim.diseases if isinstance(omim, OmimPriorityResult) else []
    scores = [
        _score_disease_inheritance(gene, disease.inheritance)
        for disease in diseases
        if disease.inheritance != DiseaseInheritance.UNKNOWN
    ]
    return max(scores, default=1.0)


def prioritiser_score(gene: GeneCandidate) -> float:
    """Score of the first phenotype prioritizer result that is not the disease database."""
    for result in gene.priority_results:
        if result.priority_type != PriorityType.OMIM.value:
            return result.score
    return 0.0


def calculate_phenotype_score(
    gene: GeneCandidate, mode: ModeOfInheritance
) -> tuple[float, list[DiseaseMatch]]:
    """Phenotype score of ``gene`` under ``mode`` with its compatible disease matches.

    When the cross-species result lists known diseases matching the mode,
    the score is the better of the model organism score and the best
    disease match. Otherwise it is the prioritizer score scaled by the
    known-disease inheritance modifier.

    Returns:
        Tuple of (phenotype score, compatible disease matches best first)
    """
    hiphive = gene.priority_result(PriorityType.HIPHIVE)
    if isinstance(hiphive, HiPhivePriorityResult):
        matches = sorted(
            hiphive.compatible_disease_matches(mode),
            key=lambda match: match.score,
            reverse=True,
        )
        if matches:
            return max(hiphive.model_score, matches[0].score), matches
    return prioritiser_score(gene) * known_disease_inheritance_modifier(gene, mode), []
