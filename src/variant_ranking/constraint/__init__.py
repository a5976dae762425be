"""Gene loss-of-function constraint metrics."""

from variant_ranking.constraint.models import GeneConstraint, GNOMAD_CONSTRAINT_URL
from variant_ranking.constraint.fetch import (
    download_constraint_metrics,
    parse_constraint_tsv,
    convert_constraint_tsv,
)
from variant_ranking.constraint.table import (
    ConstraintResourceError,
    GeneConstraints,
    load_gene_constraints,
    packaged_constraint_path,
    read_constraint_table,
    resolve_constraint_path,
)

__all__ = [
    "GeneConstraint",
    "GNOMAD_CONSTRAINT_URL",
    "download_constraint_metrics",
    "parse_constraint_tsv",
    "convert_constraint_tsv",
    "ConstraintResourceError",
    "GeneConstraints",
    "load_gene_constraints",
    "packaged_constraint_path",
    "read_constraint_table",
    "resolve_constraint_path",
]
