"""Pedigree readers for PED files and plain records."""

from pathlib import Path
from typing import Any, Iterable, Mapping

import polars as pl
import structlog

from variant_ranking.model.pedigree import AffectedStatus, FamilyMember, Pedigree, Sex

logger = structlog.get_logger(__name__)

PED_COLUMNS = ["family_id", "id", "father_id", "mother_id", "sex", "status"]

_PED_SEX = {"1": Sex.MALE, "2": Sex.FEMALE}
_PED_STATUS = {"1": AffectedStatus.UNAFFECTED, "2": AffectedStatus.AFFECTED}


def _parent(value: str | None) -> str | None:
    if value is None or value in ("0", "", "."):
        return None
    return value


def read_ped_file(ped_path: Path) -> Pedigree:
    """Read a six-column PED file.

    Sex is coded 1=male, 2=female, anything else unknown. Status is coded
    2=affected, 1=unaffected, anything else (0, -9) unknown. A parent of
    ``0`` means the parent is not in the pedigree. Extra columns are ignored
    and lines starting with ``#`` are comments.

    Args:
        ped_path: Path to a whitespace or tab separated PED file

    Returns:
        Pedigree with one member per line

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a line has fewer than six columns
    """
    ped_path = Path(ped_path)
    if not ped_path.exists():
        raise FileNotFoundError(f"PED file not found: {ped_path}")

    lines = pl.Series("line", ped_path.read_text().splitlines(), dtype=pl.Utf8).str.strip_chars()
    fields = (
        lines.filter((lines != "") & ~lines.str.starts_with("#"))
        .str.replace_all(r"\s+", " ")
        .str.split(" ")
    )
    short = [i for i, n in enumerate(fields.list.len().to_list(), start=1) if n < len(PED_COLUMNS)]
    if short:
        raise ValueError(f"PED file {ped_path} has lines with fewer than 6 columns: {short[:10]}")

    df = fields.to_frame("fields").select(
        [pl.col("fields").list.get(i).alias(name) for i, name in enumerate(PED_COLUMNS)]
    )
    pedigree = pedigree_from_frame(df)
    logger.info("ped_file_loaded", path=str(ped_path), members=pedigree.size)
    return pedigree


def pedigree_from_frame(df: pl.DataFrame) -> Pedigree:
    """Build a pedigree from a DataFrame with PED-coded string columns."""
    coded = df.select(
        pl.col("family_id"),
        pl.col("id"),
        pl.col("father_id"),
        pl.col("mother_id"),
        pl.col("sex").cast(pl.Utf8),
        pl.col("status").cast(pl.Utf8),
    )
    members = [
        FamilyMember(
            id=row["id"],
            family_id=row["family_id"],
            father_id=_parent(row["father_id"]),
            mother_id=_parent(row["mother_id"]),
            sex=_PED_SEX.get(row["sex"], Sex.UNKNOWN),
            status=_PED_STATUS.get(row["status"], AffectedStatus.UNKNOWN),
        )
        for row in coded.iter_rows(named=True)
    ]
    return Pedigree(members=tuple(members))


def pedigree_from_records(records: Iterable[Mapping[str, Any]]) -> Pedigree:
    """Build a pedigree from dict records, e.g. parsed from YAML or JSON.

    Records use ``FamilyMember`` field names; ``sex`` and ``status`` take the
    enum values (``male``, ``affected``...) and missing parents may be
    omitted or given as ``"0"``.
    """
    members = []
    for record in records:
        data = dict(record)
        for parent_field in ("father_id", "mother_id"):
            data[parent_field] = _parent(data.get(parent_field))
        members.append(FamilyMember.model_validate(data))
    return Pedigree(members=tuple(members))
