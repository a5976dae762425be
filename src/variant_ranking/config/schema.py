"""Pydantic models for analysis configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from variant_ranking.inheritance.options import InheritanceModeOptions
from variant_ranking.model.inheritance import SubModeOfInheritance
from variant_ranking.model.priority import PriorityType


class DataSourceVersions(BaseModel):
    """Version information for reference data."""

    constraint_version: str = Field(
        default="gnomAD v4.1",
        description="Release of the gene constraint table",
    )


def _percent(default: float, description: str):
    return Field(default=default, ge=0.0, le=100.0, description=description)


class InheritanceConfig(BaseModel):
    """Maximum population frequency (percent) per inheritance sub-mode.

    A sub-mode set to None is not analysed.
    """

    autosomal_dominant: float | None = _percent(0.1, "Autosomal dominant ceiling")
    autosomal_recessive_comp_het: float | None = _percent(2.0, "Autosomal recessive compound het ceiling")
    autosomal_recessive_hom_alt: float | None = _percent(1.0, "Autosomal recessive hom-alt ceiling")
    x_dominant: float | None = _percent(0.1, "X-linked dominant ceiling")
    x_recessive_comp_het: float | None = _percent(2.0, "X-linked recessive compound het ceiling")
    x_recessive_hom_alt: float | None = _percent(1.0, "X-linked recessive hom-alt ceiling")
    mitochondrial: float | None = _percent(0.2, "Mitochondrial ceiling")

    def to_options(self) -> InheritanceModeOptions:
        values = {
            SubModeOfInheritance.AUTOSOMAL_DOMINANT: self.autosomal_dominant,
            SubModeOfInheritance.AUTOSOMAL_RECESSIVE_COMP_HET: self.autosomal_recessive_comp_het,
            SubModeOfInheritance.AUTOSOMAL_RECESSIVE_HOM_ALT: self.autosomal_recessive_hom_alt,
            SubModeOfInheritance.X_DOMINANT: self.x_dominant,
            SubModeOfInheritance.X_RECESSIVE_COMP_HET: self.x_recessive_comp_het,
            SubModeOfInheritance.X_RECESSIVE_HOM_ALT: self.x_recessive_hom_alt,
            SubModeOfInheritance.MITOCHONDRIAL: self.mitochondrial,
        }
        return InheritanceModeOptions(
            {sub_mode: value for sub_mode, value in values.items() if value is not None}
        )


class ScoringConfig(BaseModel):
    """Gene scoring and null distribution settings."""

    null_sample_size: int = Field(
        default=500_000,
        ge=0,
        description="Number of combined scores in the bootstrap null population",
    )
    seed: int | None = Field(
        default=None,
        ge=0,
        description="Seed for the null population (None for non-reproducible draws)",
    )
    workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads for scoring (None uses the executor default)",
    )
    prioritiser: PriorityType | None = Field(
        default=None,
        description="Prioritizer model used for the null population (None uses those run)",
    )


class AcmgConfig(BaseModel):
    """Thresholds used when assigning ACMG criteria."""

    phenotype_specificity_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Minimum phenotype similarity for PP4",
    )
    common_frequency_threshold: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="Population frequency percent at which BA1 applies",
    )
    pli_intolerant: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="pLI at or above which a gene is LOF intolerant",
    )
    loeuf_intolerant: float = Field(
        default=0.35,
        ge=0.0,
        description="LOEUF below which a gene is LOF intolerant",
    )


class PipelineConfig(BaseModel):
    """Main analysis configuration."""

    data_dir: Path = Field(
        ...,
        description="Directory for downloaded reference data and outputs",
    )
    duckdb_path: Path = Field(
        ...,
        description="Path to DuckDB database file",
    )
    constraint_path: Path | None = Field(
        default=None,
        description="Replacement gene constraint TSV (None uses the packaged table)",
    )
    versions: DataSourceVersions = Field(
        default_factory=DataSourceVersions,
        description="Reference data version information",
    )
    inheritance: InheritanceConfig = Field(
        default_factory=InheritanceConfig,
        description="Per-mode frequency ceilings",
    )
    scoring: ScoringConfig = Field(
        default_factory=ScoringConfig,
        description="Scoring settings",
    )
    acmg: AcmgConfig = Field(
        default_factory=AcmgConfig,
        description="ACMG assignment thresholds",
    )

    @field_validator("data_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values, recorded
        with every output for provenance.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
