"""Flatten ranking results to polars frames and write TSV + Parquet outputs."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import polars as pl
import yaml

from variant_ranking.model.gene import GeneScore

GENE_SCORE_SCHEMA = {
    "rank": pl.Int64,
    "gene_symbol": pl.Utf8,
    "gene_id": pl.Utf8,
    "mode": pl.Utf8,
    "combined_score": pl.Float64,
    "p_value": pl.Float64,
    "phenotype_score": pl.Float64,
    "variant_score": pl.Float64,
    "contributing_variants": pl.Utf8,
    "disease_matches": pl.Utf8,
    "acmg_classifications": pl.Utf8,
}

ACMG_SCHEMA = {
    "gene_symbol": pl.Utf8,
    "mode": pl.Utf8,
    "variant": pl.Utf8,
    "effect": pl.Utf8,
    "disease_id": pl.Utf8,
    "disease_name": pl.Utf8,
    "criteria": pl.Utf8,
    "points": pl.Int64,
    "posterior_probability": pl.Float64,
    "classification": pl.Utf8,
}


def gene_scores_frame(gene_scores: Sequence[GeneScore]) -> pl.DataFrame:
    """
    One row per gene score, ranked in input order.

    List-valued fields are joined with commas.
    """
    rows = []
    for rank, gene_score in enumerate(gene_scores, start=1):
        rows.append({
            "rank": rank,
            "gene_symbol": gene_score.gene_symbol,
            "gene_id": gene_score.gene_id,
            "mode": gene_score.mode.value,
            "combined_score": gene_score.combined_score,
            "p_value": gene_score.p_value,
            "phenotype_score": gene_score.phenotype_score,
            "variant_score": gene_score.variant_score,
            "contributing_variants": ",".join(v.key for v in gene_score.contributing_variants),
            "disease_matches": ",".join(
                match.disease.disease_id for match in gene_score.compatible_disease_matches
            ),
            "acmg_classifications": ",".join(
                a.classification.value for a in gene_score.acmg_assignments
            ),
        })
    return pl.DataFrame(rows, schema=GENE_SCORE_SCHEMA)


def acmg_assignments_frame(gene_scores: Sequence[GeneScore]) -> pl.DataFrame:
    """One row per ACMG assignment of every gene score."""
    rows = []
    for gene_score in gene_scores:
        for assignment in gene_score.acmg_assignments:
            disease = assignment.disease
            rows.append({
                "gene_symbol": assignment.gene_symbol,
                "mode": assignment.mode.value,
                "variant": assignment.variant.key,
                "effect": assignment.variant.effect.value,
                "disease_id": disease.disease_id if disease is not None else None,
                "disease_name": disease.name if disease is not None else None,
                "criteria": str(assignment.evidence),
                "points": assignment.evidence.points(),
                "posterior_probability": assignment.evidence.posterior_probability(),
                "classification": assignment.classification.value,
            })
    return pl.DataFrame(rows, schema=ACMG_SCHEMA)


def write_ranking_output(
    gene_scores: Sequence[GeneScore],
    output_dir: Path,
    filename_base: str = "gene_scores",
    provenance: dict | None = None,
) -> dict:
    """
    Write gene scores and ACMG assignments to TSV and Parquet with a YAML sidecar.

    Args:
        gene_scores: Gene scores in rank order
        output_dir: Directory to write output files (created if doesn't exist)
        filename_base: Base filename without extension
        provenance: Run provenance metadata merged into the sidecar

    Returns:
        Dictionary of output paths with keys "tsv", "parquet", "acmg_tsv",
        "acmg_parquet" and "provenance"
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    scores_df = gene_scores_frame(gene_scores)
    acmg_df = acmg_assignments_frame(gene_scores)

    paths = {
        "tsv": output_dir / f"{filename_base}.tsv",
        "parquet": output_dir / f"{filename_base}.parquet",
        "acmg_tsv": output_dir / f"{filename_base}.acmg.tsv",
        "acmg_parquet": output_dir / f"{filename_base}.acmg.parquet",
        "provenance": output_dir / f"{filename_base}.provenance.yaml",
    }

    scores_df.write_csv(paths["tsv"], separator="\t", include_header=True)
    scores_df.write_parquet(paths["parquet"], compression="snappy")
    acmg_df.write_csv(paths["acmg_tsv"], separator="\t", include_header=True)
    acmg_df.write_parquet(paths["acmg_parquet"], compression="snappy")

    classification_counts = {}
    if acmg_df.height:
        counts = acmg_df.group_by("classification").agg(pl.len()).sort("classification")
        classification_counts = {row["classification"]: row["len"] for row in counts.to_dicts()}

    sidecar = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "output_files": [path.name for key, path in paths.items() if key != "provenance"],
        "statistics": {
            "gene_scores": scores_df.height,
            "genes": scores_df["gene_symbol"].n_unique() if scores_df.height else 0,
            "acmg_assignments": acmg_df.height,
            "classifications": classification_counts,
        },
    }
    if provenance:
        sidecar["provenance"] = provenance

    with open(paths["provenance"], "w") as f:
        yaml.safe_dump(sidecar, f, default_flow_style=False, sort_keys=False)

    return paths
