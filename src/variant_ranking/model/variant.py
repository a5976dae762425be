"""Candidate variants and the per-variant annotations scoring relies on.

Population frequencies are percentages (0-100) throughout the package.
"""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from variant_ranking.model.genotype import GenotypeCall
from variant_ranking.model.inheritance import ModeOfInheritance


class VariantEffect(str, Enum):
    """Sequence Ontology terms for the most severe functional consequence."""

    START_LOST = "start_lost"
    INITIATOR_CODON_VARIANT = "initiator_codon_variant"
    STOP_GAINED = "stop_gained"
    STOP_LOST = "stop_lost"
    FRAMESHIFT_VARIANT = "frameshift_variant"
    FRAMESHIFT_ELONGATION = "frameshift_elongation"
    FRAMESHIFT_TRUNCATION = "frameshift_truncation"
    SPLICE_ACCEPTOR_VARIANT = "splice_acceptor_variant"
    SPLICE_DONOR_VARIANT = "splice_donor_variant"
    EXON_LOSS_VARIANT = "exon_loss_variant"
    INFRAME_INSERTION = "inframe_insertion"
    INFRAME_DELETION = "inframe_deletion"
    MISSENSE_VARIANT = "missense_variant"
    SPLICE_REGION_VARIANT = "splice_region_variant"
    SYNONYMOUS_VARIANT = "synonymous_variant"
    FIVE_PRIME_UTR_VARIANT = "5_prime_UTR_variant"
    THREE_PRIME_UTR_VARIANT = "3_prime_UTR_variant"
    INTRON_VARIANT = "intron_variant"
    UPSTREAM_GENE_VARIANT = "upstream_gene_variant"
    DOWNSTREAM_GENE_VARIANT = "downstream_gene_variant"
    REGULATORY_REGION_VARIANT = "regulatory_region_variant"
    INTERGENIC_VARIANT = "intergenic_variant"
    SEQUENCE_VARIANT = "sequence_variant"
    CUSTOM = "custom"


# Assumed pathogenicity for effects that are not scored by predictors
EFFECT_PATHOGENICITY = {
    VariantEffect.START_LOST: 0.95,
    VariantEffect.INITIATOR_CODON_VARIANT: 0.95,
    VariantEffect.STOP_GAINED: 0.95,
    VariantEffect.FRAMESHIFT_VARIANT: 0.95,
    VariantEffect.FRAMESHIFT_ELONGATION: 0.95,
    VariantEffect.FRAMESHIFT_TRUNCATION: 0.95,
    VariantEffect.EXON_LOSS_VARIANT: 0.95,
    VariantEffect.SPLICE_ACCEPTOR_VARIANT: 0.90,
    VariantEffect.SPLICE_DONOR_VARIANT: 0.90,
    VariantEffect.INFRAME_INSERTION: 0.85,
    VariantEffect.INFRAME_DELETION: 0.85,
    VariantEffect.STOP_LOST: 0.70,
    VariantEffect.SYNONYMOUS_VARIANT: 0.10,
}

DEFAULT_MISSENSE_SCORE = 0.6


class PathogenicitySource(str, Enum):
    SIFT = "SIFT"
    POLYPHEN = "POLYPHEN"
    MUTATION_TASTER = "MUTATION_TASTER"
    REVEL = "REVEL"
    MVP = "MVP"
    CADD = "CADD"
    SPLICE_AI = "SPLICE_AI"
    OTHER = "OTHER"


# Prediction cut-offs above which (below, for SIFT) a tool calls a variant damaging
SIFT_THRESHOLD = 0.06
POLYPHEN_THRESHOLD = 0.956
MUTATION_TASTER_THRESHOLD = 0.94
DEFAULT_PREDICTION_THRESHOLD = 0.5


class ClinVarSignificance(str, Enum):
    PATHOGENIC = "pathogenic"
    PATHOGENIC_OR_LIKELY_PATHOGENIC = "pathogenic_or_likely_pathogenic"
    LIKELY_PATHOGENIC = "likely_pathogenic"
    UNCERTAIN_SIGNIFICANCE = "uncertain_significance"
    LIKELY_BENIGN = "likely_benign"
    BENIGN_OR_LIKELY_BENIGN = "benign_or_likely_benign"
    BENIGN = "benign"
    CONFLICTING = "conflicting"
    NOT_PROVIDED = "not_provided"

    @property
    def is_pathogenic(self) -> bool:
        return self in (
            ClinVarSignificance.PATHOGENIC,
            ClinVarSignificance.PATHOGENIC_OR_LIKELY_PATHOGENIC,
            ClinVarSignificance.LIKELY_PATHOGENIC,
        )

    @property
    def is_benign(self) -> bool:
        return self in (
            ClinVarSignificance.BENIGN,
            ClinVarSignificance.BENIGN_OR_LIKELY_BENIGN,
            ClinVarSignificance.LIKELY_BENIGN,
        )


class ClinVarData(BaseModel):
    """Curated clinical interpretation of a variant.

    Attributes:
        significance: Interpretation of the variant
        stars: Review confidence, 0 (no assertion criteria) to 4 (practice guideline)
    """

    model_config = ConfigDict(frozen=True)

    significance: ClinVarSignificance = ClinVarSignificance.NOT_PROVIDED
    stars: int = Field(default=0, ge=0, le=4)


class FrequencyData(BaseModel):
    """Population allele frequencies, as percentages, keyed by source catalog."""

    model_config = ConfigDict(frozen=True)

    frequencies: dict[str, float] = Field(default_factory=dict)

    @field_validator("frequencies")
    @classmethod
    def check_percentages(cls, v: dict[str, float]) -> dict[str, float]:
        for source, value in v.items():
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"Frequency for {source} must be a percentage in 0-100, got {value}")
        return v

    @property
    def has_data(self) -> bool:
        return bool(self.frequencies)

    @property
    def max_frequency(self) -> float:
        return max(self.frequencies.values(), default=0.0)

    @property
    def score(self) -> float:
        """Rarity score: 1 for unseen alleles falling to 0 above 2%."""
        max_freq = self.max_frequency
        if max_freq <= 0:
            return 1.0
        if max_freq > 2:
            return 0.0
        return 1.13533 - (0.13533 * math.exp(max_freq))


class PathogenicityData(BaseModel):
    """Scores from in-silico pathogenicity predictors."""

    model_config = ConfigDict(frozen=True)

    scores: dict[PathogenicitySource, float] = Field(default_factory=dict)

    @property
    def has_predictions(self) -> bool:
        return bool(self.scores)

    @property
    def predictive_score(self) -> float:
        """Most damaging prediction, with SIFT inverted onto the same scale."""
        values = [
            1.0 - score if source == PathogenicitySource.SIFT else score
            for source, score in self.scores.items()
        ]
        return max(values, default=0.0)

    def is_pathogenic_prediction(self, source: PathogenicitySource) -> bool:
        score = self.scores[source]
        if source == PathogenicitySource.SIFT:
            return score < SIFT_THRESHOLD
        if source == PathogenicitySource.POLYPHEN:
            return score > POLYPHEN_THRESHOLD
        if source == PathogenicitySource.MUTATION_TASTER:
            return score > MUTATION_TASTER_THRESHOLD
        return score > DEFAULT_PREDICTION_THRESHOLD

    def prediction_counts(self) -> tuple[int, int]:
        """Return (pathogenic, benign) prediction counts."""
        pathogenic = sum(1 for source in self.scores if self.is_pathogenic_prediction(source))
        return pathogenic, len(self.scores) - pathogenic


class TranscriptAnnotation(BaseModel):
    model_config = ConfigDict(frozen=True)

    gene_symbol: str
    accession: str = ""
    effect: VariantEffect = VariantEffect.SEQUENCE_VARIANT
    hgvs_c: str = ""
    hgvs_p: str = ""


def contig_to_chromosome(contig: str) -> int:
    """Map a contig name to its chromosome number (X=23, Y=24, MT=25, 0 unknown)."""
    name = contig.strip()
    if name.lower().startswith("chr"):
        name = name[3:]
    name = name.upper()
    if name == "X":
        return 23
    if name == "Y":
        return 24
    if name in ("M", "MT"):
        return 25
    try:
        return int(name)
    except ValueError:
        return 0


class CandidateVariant(BaseModel):
    """A variant evaluated for one gene.

    Created at load time and annotated in place. ``compatible_modes`` is the
    only field mutated during analysis; which variants contribute to a gene
    score is recorded on the score itself.

    Attributes:
        contig: Chromosome name as given (e.g. "1", "chrX")
        start: 1-based start position
        end: 1-based end position (defaults to the last reference base)
        ref: Reference allele
        alt: Alternate allele
        gene_symbol: Assigned gene symbol
        gene_id: Assigned gene identifier
        effect: Most severe functional consequence
        annotations: Transcript-level annotations
        genotypes: Genotype call per sample name
        frequency: Population frequency annotations
        pathogenicity: Predictor scores
        clinvar: Curated clinical interpretation, when known
        whitelisted: Known pathogenic, exempt from frequency ceilings
        passed_filters: Whether upstream quality/frequency/effect filters passed
        score: Explicit variant score overriding the computed one
        compatible_modes: Modes of inheritance this variant segregates with
    """

    contig: str
    start: int = Field(..., ge=1)
    end: int | None = None
    ref: str
    alt: str
    gene_symbol: str = "."
    gene_id: str = ""
    effect: VariantEffect = VariantEffect.SEQUENCE_VARIANT
    annotations: list[TranscriptAnnotation] = Field(default_factory=list)
    genotypes: dict[str, GenotypeCall] = Field(default_factory=dict)
    frequency: FrequencyData = Field(default_factory=FrequencyData)
    pathogenicity: PathogenicityData = Field(default_factory=PathogenicityData)
    clinvar: ClinVarData | None = None
    whitelisted: bool = False
    passed_filters: bool = True
    score: float | None = Field(default=None, ge=0.0, le=1.0)
    compatible_modes: set[ModeOfInheritance] = Field(default_factory=set)

    @field_validator("genotypes", mode="before")
    @classmethod
    def parse_genotype_strings(cls, v: Any) -> Any:
        """Accept VCF-style genotype strings as well as structured calls."""
        if isinstance(v, dict):
            return {
                sample: GenotypeCall.parse(call) if isinstance(call, str) else call
                for sample, call in v.items()
            }
        return v

    @property
    def key(self) -> str:
        return f"{self.contig}-{self.start}-{self.ref}-{self.alt}"

    @property
    def stop(self) -> int:
        if self.end is not None:
            return self.end
        return self.start + max(len(self.ref), 1) - 1

    @property
    def chromosome(self) -> int:
        return contig_to_chromosome(self.contig)

    @property
    def pathogenicity_score(self) -> float:
        if self.effect == VariantEffect.MISSENSE_VARIANT:
            if self.pathogenicity.has_predictions:
                return self.pathogenicity.predictive_score
            return DEFAULT_MISSENSE_SCORE
        if self.effect in EFFECT_PATHOGENICITY:
            return max(EFFECT_PATHOGENICITY[self.effect], self.pathogenicity.predictive_score)
        return self.pathogenicity.predictive_score

    @property
    def variant_score(self) -> float:
        """Explicit score if supplied, else rarity x predicted pathogenicity."""
        if self.score is not None:
            return self.score
        return self.frequency.score * self.pathogenicity_score

    def genotype(self, sample: str) -> GenotypeCall:
        """Genotype of ``sample``; an empty call when the sample is not genotyped."""
        return self.genotypes.get(sample, GenotypeCall())

    def is_compatible_with(self, mode: ModeOfInheritance) -> bool:
        return mode in self.compatible_modes

    def __repr__(self) -> str:
        return f"CandidateVariant({self.key} {self.gene_symbol} {self.effect.value})"
