"""Unit tests for flattening gene scores and writing ranking outputs."""

from pathlib import Path

import polars as pl
import pytest
import yaml
from polars.testing import assert_frame_equal

from variant_ranking.acmg import AcmgAssignment, AcmgClassification, AcmgCriterion, AcmgEvidence
from variant_ranking.model import (
    CandidateVariant,
    Disease,
    DiseaseMatch,
    ModeOfInheritance,
    VariantEffect,
)
from variant_ranking.model.gene import GeneScore
from variant_ranking.output import (
    ACMG_SCHEMA,
    GENE_SCORE_SCHEMA,
    acmg_assignments_frame,
    gene_scores_frame,
    write_ranking_output,
)

AD = ModeOfInheritance.AUTOSOMAL_DOMINANT
AR = ModeOfInheritance.AUTOSOMAL_RECESSIVE


@pytest.fixture
def gene_scores() -> list[GeneScore]:
    """Three ranked gene scores, the first with an ACMG assignment."""
    variant = CandidateVariant(
        contig="15", start=48_700_000, ref="G", alt="A",
        gene_symbol="FBN1", effect=VariantEffect.STOP_GAINED,
    )
    marfan = Disease(disease_id="OMIM:154700", name="Marfan syndrome")
    assignment = AcmgAssignment(
        variant=variant,
        gene_symbol="FBN1",
        mode=AD,
        disease=marfan,
        evidence=AcmgEvidence.of(AcmgCriterion.PVS1, AcmgCriterion.PM2),
        classification=AcmgClassification.LIKELY_PATHOGENIC,
    )
    return [
        GeneScore(
            gene_symbol="FBN1", gene_id="HGNC:3603", mode=AD,
            variant_score=0.95, phenotype_score=0.9, combined_score=0.99, p_value=0.001,
            contributing_variants=[variant],
            compatible_disease_matches=[DiseaseMatch(disease=marfan, score=0.9)],
            acmg_assignments=[assignment],
        ),
        GeneScore(gene_symbol="FBN1", mode=AR, phenotype_score=0.45, combined_score=0.1),
        GeneScore(gene_symbol="GENE2", mode=AD, combined_score=0.05),
    ]


def test_gene_scores_frame(gene_scores):
    """Test one row per gene score with joined list fields."""
    df = gene_scores_frame(gene_scores)

    assert dict(df.schema) == GENE_SCORE_SCHEMA
    assert df["rank"].to_list() == [1, 2, 3]
    assert df["mode"].to_list() == ["AD", "AR", "AD"]
    first = df.row(0, named=True)
    assert first["contributing_variants"] == "15-48700000-G-A"
    assert first["disease_matches"] == "OMIM:154700"
    assert first["acmg_classifications"] == "likely_pathogenic"
    assert df.row(1, named=True)["contributing_variants"] == ""


def test_acmg_assignments_frame(gene_scores):
    """Test ACMG rows carry criteria, points and classification."""
    df = acmg_assignments_frame(gene_scores)

    expected = pl.DataFrame(
        {
            "gene_symbol": ["FBN1"],
            "mode": ["AD"],
            "variant": ["15-48700000-G-A"],
            "effect": ["stop_gained"],
            "disease_id": ["OMIM:154700"],
            "disease_name": ["Marfan syndrome"],
            "criteria": ["[PM2, PVS1]"],
            "points": [10],
            "posterior_probability": [gene_scores[0].acmg_assignments[0].evidence.posterior_probability()],
            "classification": ["likely_pathogenic"],
        },
        schema=ACMG_SCHEMA,
    )
    assert_frame_equal(df, expected)


def test_empty_frames_keep_schema():
    """Test empty inputs give empty frames with the full schema."""
    assert gene_scores_frame([]).columns == list(GENE_SCORE_SCHEMA)
    assert acmg_assignments_frame([]).height == 0


def test_write_ranking_output(gene_scores, tmp_path: Path):
    """Test TSV, Parquet and sidecar files are written and agree."""
    paths = write_ranking_output(
        gene_scores,
        tmp_path / "results",
        filename_base="proband_gene_scores",
        provenance={"run_id": "abc123"},
    )

    assert set(paths) == {"tsv", "parquet", "acmg_tsv", "acmg_parquet", "provenance"}
    assert all(path.exists() for path in paths.values())

    from_parquet = pl.read_parquet(paths["parquet"])
    assert_frame_equal(from_parquet, gene_scores_frame(gene_scores))
    from_tsv = pl.read_csv(paths["tsv"], separator="\t")
    assert from_tsv["gene_symbol"].to_list() == ["FBN1", "FBN1", "GENE2"]

    with open(paths["provenance"]) as f:
        sidecar = yaml.safe_load(f)
    assert sidecar["statistics"]["gene_scores"] == 3
    assert sidecar["statistics"]["genes"] == 2
    assert sidecar["statistics"]["classifications"] == {"likely_pathogenic": 1}
    assert sidecar["provenance"]["run_id"] == "abc123"
    assert "proband_gene_scores.acmg.parquet" in sidecar["output_files"]


def test_write_empty_output(tmp_path: Path):
    """Test writing with no gene scores still produces every file."""
    paths = write_ranking_output([], tmp_path)

    with open(paths["provenance"]) as f:
        sidecar = yaml.safe_load(f)
    assert sidecar["statistics"]["gene_scores"] == 0
    assert sidecar["statistics"]["classifications"] == {}
    assert "provenance" not in sidecar
