"""Contributing alleles, combined scores, p-values and gene ranking."""

from variant_ranking.scoring.combined import LOGISTIC_MODELS, combined_score, select_model
from variant_ranking.scoring.contributing import CompHetPair, ContributingAlleleCalculator
from variant_ranking.scoring.gene_scorer import (
    PvalueGeneScorer,
    build_null_distribution,
    ranked_gene_scores,
)
from variant_ranking.scoring.priority import (
    calculate_phenotype_score,
    known_disease_inheritance_modifier,
    prioritiser_score,
)
from variant_ranking.scoring.pvalue import NullDistribution

__all__ = [
    "LOGISTIC_MODELS",
    "combined_score",
    "select_model",
    "CompHetPair",
    "ContributingAlleleCalculator",
    "PvalueGeneScorer",
    "build_null_distribution",
    "ranked_gene_scores",
    "calculate_phenotype_score",
    "known_disease_inheritance_modifier",
    "prioritiser_score",
    "NullDistribution",
]
