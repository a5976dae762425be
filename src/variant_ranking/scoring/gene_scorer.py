"""Score every gene under every analysed mode of inheritance."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

import structlog

from variant_ranking.acmg.assigner import AcmgAssignmentCalculator
from variant_ranking.inheritance.annotator import InheritanceModeAnnotator
from variant_ranking.model.gene import GeneCandidate, GeneScore
from variant_ranking.model.inheritance import ModeOfInheritance
from variant_ranking.model.pedigree import Sex
from variant_ranking.model.priority import PriorityType
from variant_ranking.scoring.combined import combined_score
from variant_ranking.scoring.contributing import ContributingAlleleCalculator
from variant_ranking.scoring.priority import calculate_phenotype_score, prioritiser_score
from variant_ranking.scoring.pvalue import DEFAULT_NULL_SIZE, NullDistribution

logger = structlog.get_logger(__name__)


def analysis_priority_types(genes: Sequence[GeneCandidate]) -> set[PriorityType]:
    """Prioritizers that produced a result for at least one gene."""
    types: set[PriorityType] = set()
    for gene in genes:
        types.update(gene.priority_types)
    return types


def build_null_distribution(
    genes: Sequence[GeneCandidate],
    size: int = DEFAULT_NULL_SIZE,
    seed: int | None = None,
    workers: int | None = None,
    prioritiser: PriorityType | None = None,
) -> NullDistribution:
    """Null population resampled from the phenotype scores of ``genes``.

    The combined score model is chosen from ``prioritiser`` when given,
    otherwise from the prioritizers run on ``genes``.
    """
    phenotype_scores = [prioritiser_score(gene) for gene in genes]
    priority_types = {prioritiser} if prioritiser is not None else analysis_priority_types(genes)
    return NullDistribution.build(
        phenotype_scores,
        priority_types,
        size=size,
        seed=seed,
        workers=workers,
    )


class PvalueGeneScorer:
    """Per-mode gene scores with bootstrap p-values and ACMG assignments.

    Genes are scored independently on a thread pool, then sorted by
    combined score. Shared state (pedigree, null distribution, constraint
    table) must not change while ``score_genes`` runs.

    Args:
        proband_id: Proband sample identifier
        proband_sex: Sex of the proband
        annotator: Inheritance annotator of the analysis
        null_distribution: Prebuilt null population
        acmg_calculator: Calculator classifying contributing variants
        workers: Worker threads (executor default when None)
    """

    def __init__(
        self,
        proband_id: str,
        proband_sex: Sex,
        annotator: InheritanceModeAnnotator,
        null_distribution: NullDistribution,
        acmg_calculator: AcmgAssignmentCalculator,
        workers: int | None = None,
    ):
        self.proband_id = proband_id
        self.modes = annotator.options.defined_modes
        self.contributing_calculator = ContributingAlleleCalculator(proband_id, proband_sex, annotator)
        self.null_distribution = null_distribution
        self.acmg_calculator = acmg_calculator
        self.workers = workers

    def modes_to_score(self) -> list[ModeOfInheritance]:
        if not self.modes or self.modes == [ModeOfInheritance.ANY]:
            return [ModeOfInheritance.ANY]
        return list(self.modes)

    def score_gene(self, gene: GeneCandidate) -> list[GeneScore]:
        """One score per analysed mode, including modes without contributing variants."""
        return [self.calculate_gene_score(gene, mode) for mode in self.modes_to_score()]

    def calculate_gene_score(self, gene: GeneCandidate, mode: ModeOfInheritance) -> GeneScore:
        contributing = self.contributing_calculator.find_contributing_variants(
            mode, gene.passed_variants
        )
        phenotype_score, disease_matches = calculate_phenotype_score(gene, mode)
        variant_score = (
            sum(v.variant_score for v in contributing) / len(contributing) if contributing else 0.0
        )
        combined = combined_score(variant_score, phenotype_score, gene.priority_types)
        p_value = self.null_distribution.p_value(combined)

        acmg_assignments = self.acmg_calculator.calculate(
            gene.gene_symbol,
            mode,
            contributing,
            compatible_disease_matches=disease_matches,
            phenotype_similarity=self._phenotype_similarity(disease_matches),
        )
        gene_score = GeneScore(
            gene_symbol=gene.gene_symbol,
            gene_id=gene.gene_id,
            mode=mode,
            variant_score=variant_score,
            phenotype_score=phenotype_score,
            combined_score=combined,
            p_value=p_value,
            contributing_variants=contributing,
            compatible_disease_matches=disease_matches,
            acmg_assignments=acmg_assignments,
        )
        logger.debug(
            "gene_scored",
            gene=gene.gene_symbol,
            mode=mode.value,
            variant_score=round(variant_score, 4),
            phenotype_score=round(phenotype_score, 4),
            combined_score=round(combined, 4),
            p_value=p_value,
            contributing=len(contributing),
        )
        return gene_score

    @staticmethod
    def _phenotype_similarity(disease_matches) -> float:
        """Best match among diseases compatible with the scored mode."""
        return max((match.score for match in disease_matches), default=0.0)

    def score_genes(self, genes: Sequence[GeneCandidate]) -> list[GeneCandidate]:
        """Attach gene scores to every gene and return genes best first.

        Genes are ordered by their top combined score descending, then by
        symbol.
        """
        results: dict[int, list[GeneScore]] = {}
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            future_to_index = {
                executor.submit(self.score_gene, gene): i for i, gene in enumerate(genes)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        for i, gene in enumerate(genes):
            gene.gene_scores = results[i]

        ranked = sorted(genes, key=lambda gene: (-gene.combined_score, gene.gene_symbol))
        logger.info("genes_scored", genes=len(ranked), modes=[m.value for m in self.modes_to_score()])
        return ranked


def ranked_gene_scores(genes: Sequence[GeneCandidate]) -> list[GeneScore]:
    """Every gene score of every gene in deterministic rank order."""
    scores = [gene_score for gene in genes for gene_score in gene.gene_scores]
    return sorted(scores, key=GeneScore.sort_key)
