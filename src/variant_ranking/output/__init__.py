"""Tabular output of ranking results."""

from variant_ranking.output.writers import (
    ACMG_SCHEMA,
    GENE_SCORE_SCHEMA,
    acmg_assignments_frame,
    gene_scores_frame,
    write_ranking_output,
)

__all__ = [
    "ACMG_SCHEMA",
    "GENE_SCORE_SCHEMA",
    "acmg_assignments_frame",
    "gene_scores_frame",
    "write_ranking_output",
]
