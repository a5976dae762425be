"""Data models for gene loss-of-function constraint metrics."""

from pydantic import BaseModel, ConfigDict

# gnomAD v4.1 constraint metrics download URL
GNOMAD_CONSTRAINT_URL = (
    "https://storage.googleapis.com/gcp-public-data--gnomad/release/4.1/constraint/"
    "gnomad.v4.1.constraint_metrics.tsv"
)

# Column name mapping for different gnomAD versions
# v2.1.1 uses: gene, transcript, pLI, oe_lof_upper (LOEUF), oe_lof_lower, oe_lof_upper_ci
# v4.x uses: gene, transcript, lof.pLI, lof.oe_ci.upper, lof.oe_ci.lower, lof.oe
COLUMN_VARIANTS = {
    "gene_symbol": ["gene_symbol", "gene"],
    "transcript": ["transcript", "canonical_transcript", "mane_select"],
    "pli": ["pLI", "lof.pLI", "pli"],
    "loeuf": ["oe_lof_upper", "lof.oe_ci.upper", "loeuf"],
    "loeuf_lower": ["oe_lof_lower", "lof.oe_ci.lower", "loeuf_lower"],
    "loeuf_upper": ["oe_lof_upper_ci", "lof.oe_ci.upper_ci", "loeuf_upper"],
}

# Packaged table layout
CONSTRAINT_COLUMNS = ["gene_symbol", "transcript", "pli", "loeuf", "loeuf_lower", "loeuf_upper"]
NUMERIC_COLUMNS = ["pli", "loeuf", "loeuf_lower", "loeuf_upper"]

# LOF intolerance cut-offs
PLI_INTOLERANT = 0.9
LOEUF_INTOLERANT = 0.35


class GeneConstraint(BaseModel):
    """Loss-of-function constraint metrics for a single gene.

    Attributes:
        gene_symbol: HGNC gene symbol
        transcript: Transcript the metrics were computed on
        pli: Probability of being loss-of-function intolerant (None if no estimate)
        loeuf: Loss-of-function observed/expected upper bound fraction (None if no estimate)
        loeuf_lower: Lower bound of the LOEUF confidence interval
        loeuf_upper: Upper bound of the LOEUF confidence interval

    None values represent missing estimates, never zero constraint.
    """

    model_config = ConfigDict(frozen=True)

    gene_symbol: str
    transcript: str | None = None
    pli: float | None = None
    loeuf: float | None = None
    loeuf_lower: float | None = None
    loeuf_upper: float | None = None

    def is_lof_intolerant(
        self,
        pli_threshold: float = PLI_INTOLERANT,
        loeuf_threshold: float = LOEUF_INTOLERANT,
    ) -> bool:
        """High pLI or low LOEUF marks a gene as intolerant to loss of function."""
        if self.pli is not None and self.pli >= pli_threshold:
            return True
        return self.loeuf is not None and self.loeuf < loeuf_threshold
