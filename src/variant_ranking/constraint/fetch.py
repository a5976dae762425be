"""Refresh the constraint table from a gnomAD release."""

from pathlib import Path

import httpx
import polars as pl
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from variant_ranking.constraint.models import (
    CONSTRAINT_COLUMNS,
    COLUMN_VARIANTS,
    GNOMAD_CONSTRAINT_URL,
)

logger = structlog.get_logger(__name__)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=60),
    retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.TransportError)),
    reraise=True,
)
def download_constraint_metrics(
    output_path: Path,
    url: str = GNOMAD_CONSTRAINT_URL,
    force: bool = False,
) -> Path:
    """Stream a gnomAD constraint TSV to ``output_path``.

    An existing file is reused unless ``force`` is set. The body is written
    to a ``.part`` file first so an interrupted transfer never leaves a
    truncated table behind.

    Raises:
        httpx.HTTPStatusError: On HTTP errors, after retries
        httpx.TransportError: On connection or timeout errors, after retries
    """
    output_path = Path(output_path)
    if output_path.exists() and not force:
        logger.info("constraint_download_skipped", path=str(output_path))
        return output_path

    output_path.parent.mkdir(parents=True, exist_ok=True)
    part_path = output_path.with_name(output_path.name + ".part")

    logger.info("constraint_download_start", url=url)
    with httpx.stream("GET", url, timeout=120.0, follow_redirects=True) as response:
        response.raise_for_status()
        with open(part_path, "wb") as f:
            for chunk in response.iter_bytes():
                f.write(chunk)
    part_path.replace(output_path)

    logger.info("constraint_download_complete", path=str(output_path), bytes=output_path.stat().st_size)
    return output_path


def _match_columns(header: list[str]) -> dict[str, str]:
    # gnomAD column name -> packaged column name, first known spelling wins
    mapping = {}
    for name, spellings in COLUMN_VARIANTS.items():
        found = next((s for s in spellings if s in header), None)
        if found is not None:
            mapping[found] = name
    return mapping


def parse_constraint_tsv(tsv_path: Path) -> pl.LazyFrame:
    """Map a gnomAD v2.1.1 or v4.x constraint TSV onto the packaged columns.

    Values stay strings; the table loader counts and skips the ones that do
    not parse.

    Raises:
        ValueError: If no gene symbol column is present
    """
    tsv_path = Path(tsv_path)
    header = pl.read_csv(tsv_path, separator="\t", n_rows=0).columns
    mapping = _match_columns(header)
    if "gene_symbol" not in mapping.values():
        raise ValueError(f"No gene symbol column in {tsv_path}: {header[:10]}")
    logger.debug("constraint_columns_matched", path=str(tsv_path), mapping=mapping)

    lf = pl.scan_csv(
        tsv_path,
        separator="\t",
        null_values=["NA", "", "."],
        infer_schema_length=0,
    ).select([pl.col(source).alias(name) for source, name in mapping.items()])

    absent = [name for name in CONSTRAINT_COLUMNS if name not in mapping.values()]
    return lf.with_columns(
        [pl.lit(None, dtype=pl.Utf8).alias(name) for name in absent]
    ).select(CONSTRAINT_COLUMNS)


def convert_constraint_tsv(tsv_path: Path, output_path: Path) -> int:
    """Write a gnomAD table in the packaged layout, one row per gene symbol.

    The first transcript listed for a gene is kept.

    Returns:
        Number of genes written
    """
    df = (
        parse_constraint_tsv(tsv_path)
        .collect()
        .unique(subset=["gene_symbol"], keep="first", maintain_order=True)
    )
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.write_csv(output_path, separator="\t", null_value="NA")
    logger.info("constraint_convert_complete", path=str(output_path), gene_count=df.height)
    return df.height
