"""Process-wide gene constraint lookup loaded from a packaged TSV."""

from functools import lru_cache
from importlib import resources
from pathlib import Path

import polars as pl
import structlog

from variant_ranking.constraint.models import (
    CONSTRAINT_COLUMNS,
    LOEUF_INTOLERANT,
    NUMERIC_COLUMNS,
    PLI_INTOLERANT,
    GeneConstraint,
)

logger = structlog.get_logger(__name__)

PACKAGED_RESOURCE = "gene_constraint.tsv"
# Written to data_dir by refresh-constraint
REFRESHED_TABLE = "gene_constraint.tsv"


class ConstraintResourceError(FileNotFoundError):
    """The constraint table could not be found."""


def packaged_constraint_path() -> Path:
    return Path(str(resources.files("variant_ranking.constraint") / "data" / PACKAGED_RESOURCE))


def resolve_constraint_path(constraint_path: Path | None, data_dir: Path | None = None) -> Path:
    """Pick the constraint table to load.

    An explicitly configured table wins, then a table refreshed into
    ``data_dir``, then the packaged table. The packaged table only covers a
    small curated gene set, so falling back to it is logged as a warning.
    """
    if constraint_path is not None:
        return Path(constraint_path)
    if data_dir is not None:
        refreshed = Path(data_dir) / REFRESHED_TABLE
        if refreshed.exists():
            return refreshed
    logger.warning(
        "packaged_constraint_table_in_use",
        path=str(packaged_constraint_path()),
        hint="run refresh-constraint for genome-wide gnomAD metrics",
    )
    return packaged_constraint_path()


def read_constraint_table(tsv_path: Path) -> pl.DataFrame:
    """Read a constraint TSV, dropping rows that cannot be parsed.

    A row is malformed when it has no gene symbol, when a numeric column
    holds text that is not a number, or when pLI lies outside 0-1. Malformed
    rows are counted and logged, never raised.

    Args:
        tsv_path: Path to a TSV in the packaged column layout

    Returns:
        DataFrame with string gene_symbol/transcript and Float64 metrics

    Raises:
        ConstraintResourceError: If the file does not exist
    """
    tsv_path = Path(tsv_path)
    if not tsv_path.exists():
        raise ConstraintResourceError(f"Gene constraint table not found: {tsv_path}")

    raw = pl.read_csv(
        tsv_path,
        separator="\t",
        null_values=["NA", "", "."],
        has_header=True,
        infer_schema_length=0,
        truncate_ragged_lines=True,
        comment_prefix="#",
    )
    missing = [name for name in CONSTRAINT_COLUMNS if name not in raw.columns]
    if missing:
        raw = raw.with_columns([pl.lit(None, dtype=pl.Utf8).alias(name) for name in missing])

    parsed = raw.with_columns(
        [pl.col(name).cast(pl.Float64, strict=False).alias(f"{name}_parsed") for name in NUMERIC_COLUMNS]
    )

    malformed = pl.col("gene_symbol").is_null()
    for name in NUMERIC_COLUMNS:
        malformed = malformed | (pl.col(name).is_not_null() & pl.col(f"{name}_parsed").is_null())
    malformed = malformed | (pl.col("pli_parsed") < 0.0) | (pl.col("pli_parsed") > 1.0)

    flagged = parsed.with_columns(malformed.fill_null(False).alias("_malformed"))
    skipped = flagged.filter(pl.col("_malformed"))
    if skipped.height:
        logger.warning(
            "constraint_rows_skipped",
            path=str(tsv_path),
            skipped=skipped.height,
            genes=skipped["gene_symbol"].drop_nulls().head(10).to_list(),
        )

    return (
        flagged.filter(~pl.col("_malformed"))
        .select(
            pl.col("gene_symbol").str.strip_chars(),
            pl.col("transcript"),
            *[pl.col(f"{name}_parsed").alias(name) for name in NUMERIC_COLUMNS],
        )
    )


class GeneConstraints:
    """Read-only gene symbol to constraint metrics lookup.

    Built once and shared by all scoring workers.
    """

    def __init__(
        self,
        constraints: dict[str, GeneConstraint],
        pli_threshold: float = PLI_INTOLERANT,
        loeuf_threshold: float = LOEUF_INTOLERANT,
    ):
        self._constraints = dict(constraints)
        self.pli_threshold = pli_threshold
        self.loeuf_threshold = loeuf_threshold

    @classmethod
    def from_tsv(cls, tsv_path: Path, **thresholds) -> "GeneConstraints":
        df = read_constraint_table(tsv_path)
        constraints = {}
        for row in df.iter_rows(named=True):
            # First row wins for genes listed more than once
            constraints.setdefault(row["gene_symbol"], GeneConstraint(**row))
        logger.info("constraint_table_loaded", path=str(tsv_path), gene_count=len(constraints))
        return cls(constraints, **thresholds)

    def __len__(self) -> int:
        return len(self._constraints)

    def __contains__(self, gene_symbol: str) -> bool:
        return gene_symbol in self._constraints

    def get(self, gene_symbol: str) -> GeneConstraint | None:
        return self._constraints.get(gene_symbol)

    def is_lof_intolerant(self, gene_symbol: str) -> bool:
        """Whether loss of function is poorly tolerated by the gene.

        Genes missing from the table are treated as intolerant.
        """
        constraint = self._constraints.get(gene_symbol)
        if constraint is None:
            return True
        return constraint.is_lof_intolerant(self.pli_threshold, self.loeuf_threshold)


@lru_cache(maxsize=None)
def load_gene_constraints(
    tsv_path: Path | None = None,
    pli_threshold: float = PLI_INTOLERANT,
    loeuf_threshold: float = LOEUF_INTOLERANT,
) -> GeneConstraints:
    """Load and cache the constraint table (packaged resource by default)."""
    path = Path(tsv_path) if tsv_path is not None else packaged_constraint_path()
    return GeneConstraints.from_tsv(
        path, pli_threshold=pli_threshold, loeuf_threshold=loeuf_threshold
    )
