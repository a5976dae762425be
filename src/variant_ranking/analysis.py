"""Analysis input files and the end-to-end ranking run."""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, model_validator

from variant_ranking.acmg.assigner import AcmgAssignmentCalculator, AcmgEvidenceAssigner
from variant_ranking.config.schema import PipelineConfig
from variant_ranking.constraint.table import load_gene_constraints, resolve_constraint_path
from variant_ranking.inheritance.annotator import InheritanceModeAnnotator
from variant_ranking.inheritance.pedigree_io import pedigree_from_records, read_ped_file
from variant_ranking.inheritance.validator import validate_pedigree
from variant_ranking.model.gene import GeneCandidate, GeneScore
from variant_ranking.model.pedigree import Pedigree, Sex
from variant_ranking.model.priority import PriorityType
from variant_ranking.region.index import RegionIndex
from variant_ranking.region.reassign import GeneReassigner, TopologicalDomain
from variant_ranking.scoring.gene_scorer import (
    PvalueGeneScorer,
    build_null_distribution,
    ranked_gene_scores,
)

logger = structlog.get_logger(__name__)


class AnalysisInput(BaseModel):
    """Everything needed to rank the genes of one proband.

    Attributes:
        proband: Proband sample identifier
        proband_sex: Sex used when no pedigree is given
        samples: Sample names present in the genotype data
        pedigree: Family members as records (see ``pedigree_from_records``)
        ped_file: PED file, used instead of ``pedigree`` when set; relative
            paths resolve against the analysis file
        genes: Gene candidates with their filtered variants and priority results
        topological_domains: Domains used to reassign regulatory variants
        reassignment_prioritiser: Prioritizer ranking genes during reassignment
    """

    proband: str
    proband_sex: Sex = Sex.UNKNOWN
    samples: list[str] = Field(default_factory=list)
    pedigree: list[dict[str, Any]] = Field(default_factory=list)
    ped_file: Path | None = None
    genes: list[GeneCandidate] = Field(default_factory=list)
    topological_domains: list[TopologicalDomain] = Field(default_factory=list)
    reassignment_prioritiser: PriorityType = PriorityType.HIPHIVE

    @model_validator(mode="after")
    def check_pedigree_source(self) -> "AnalysisInput":
        if self.pedigree and self.ped_file is not None:
            raise ValueError("Give either pedigree records or a ped_file, not both")
        return self

    def load_pedigree(self, base_dir: Path | None = None) -> Pedigree:
        if self.ped_file is not None:
            ped_path = self.ped_file
            if base_dir is not None and not ped_path.is_absolute():
                ped_path = base_dir / ped_path
            return read_ped_file(ped_path)
        return pedigree_from_records(self.pedigree)


def load_analysis(path: Path | str) -> AnalysisInput:
    """
    Load an analysis file in YAML or JSON (chosen by the ``.json`` suffix).

    Raises:
        FileNotFoundError: If the file doesn't exist
        pydantic.ValidationError: If the content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Analysis file not found: {path}")
    text = path.read_text()
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    return AnalysisInput.model_validate(data or {})


class AnalysisResult(BaseModel):
    """Ranked genes and their gene scores."""

    genes: list[GeneCandidate]
    gene_scores: list[GeneScore]
    pedigree: Pedigree
    null_distribution_size: int
    reassigned_variants: int = 0


def run_analysis(
    analysis: AnalysisInput,
    config: PipelineConfig,
    base_dir: Path | None = None,
) -> AnalysisResult:
    """
    Rank the genes of an analysis.

    Validates the pedigree, optionally reassigns regulatory variants,
    annotates inheritance modes, builds the null distribution and scores
    every gene under every configured mode.

    Args:
        analysis: Parsed analysis input
        config: Analysis configuration
        base_dir: Directory relative PED paths resolve against

    Returns:
        AnalysisResult with genes best first and all gene scores in rank order

    Raises:
        PedigreeValidationError: If the pedigree does not fit the samples
        ConstraintResourceError: If the constraint table is missing
    """
    samples = analysis.samples or [analysis.proband]
    pedigree = validate_pedigree(
        analysis.load_pedigree(base_dir),
        analysis.proband,
        samples,
        proband_sex=analysis.proband_sex,
    )
    proband = pedigree.get(analysis.proband)
    genes = analysis.genes

    reassigned = 0
    if analysis.topological_domains:
        reassigner = GeneReassigner(
            analysis.reassignment_prioritiser,
            genes,
            RegionIndex(analysis.topological_domains),
        )
        reassigned = reassigner.reassign()

    annotator = InheritanceModeAnnotator(pedigree, config.inheritance.to_options())
    for gene in genes:
        annotator.annotate(gene)

    constraints = load_gene_constraints(
        resolve_constraint_path(config.constraint_path, config.data_dir),
        pli_threshold=config.acmg.pli_intolerant,
        loeuf_threshold=config.acmg.loeuf_intolerant,
    )
    assigner = AcmgEvidenceAssigner(
        analysis.proband,
        pedigree,
        constraints,
        phenotype_specificity_threshold=config.acmg.phenotype_specificity_threshold,
        common_frequency_threshold=config.acmg.common_frequency_threshold,
    )

    null_distribution = build_null_distribution(
        genes,
        size=config.scoring.null_sample_size,
        seed=config.scoring.seed,
        workers=config.scoring.workers,
        prioritiser=config.scoring.prioritiser,
    )
    scorer = PvalueGeneScorer(
        analysis.proband,
        proband.sex,
        annotator,
        null_distribution,
        AcmgAssignmentCalculator(assigner),
        workers=config.scoring.workers,
    )
    ranked_genes = scorer.score_genes(genes)
    gene_scores = ranked_gene_scores(ranked_genes)

    logger.info(
        "analysis_complete",
        proband=analysis.proband,
        genes=len(ranked_genes),
        gene_scores=len(gene_scores),
        reassigned=reassigned,
    )
    return AnalysisResult(
        genes=ranked_genes,
        gene_scores=gene_scores,
        pedigree=pedigree,
        null_distribution_size=null_distribution.size,
        reassigned_variants=reassigned,
    )
