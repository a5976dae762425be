"""Validation of a pedigree against the proband and the sequenced samples."""

from typing import Sequence

import structlog

from variant_ranking.model.pedigree import FamilyMember, Pedigree, Sex

logger = structlog.get_logger(__name__)


class PedigreeValidationError(ValueError):
    """The pedigree does not describe the analysed samples."""


def validate_pedigree(
    pedigree: Pedigree,
    proband_id: str,
    sample_names: Sequence[str],
    proband_sex: Sex = Sex.UNKNOWN,
) -> Pedigree:
    """Check that a pedigree is usable for analysing ``proband_id``.

    An empty pedigree is accepted for single-sample analyses and replaced by
    a pedigree holding only the affected proband.

    Args:
        pedigree: Pedigree supplied with the analysis (may be empty)
        proband_id: Identifier of the proband
        sample_names: Sample names present in the genotype data
        proband_sex: Sex used when a single-sample pedigree is created

    Returns:
        The validated pedigree

    Raises:
        PedigreeValidationError: If the pedigree is missing for a multi-sample
            analysis, covers more than one family, lacks an affected proband,
            or does not contain every sample
    """
    sample_names = list(sample_names)

    if pedigree.is_empty:
        if len(sample_names) > 1:
            raise PedigreeValidationError(
                f"A pedigree is required for a multi-sample analysis of {len(sample_names)} samples"
            )
        if sample_names and sample_names[0] != proband_id:
            raise PedigreeValidationError(
                f"Proband '{proband_id}' not found in samples {sample_names}"
            )
        logger.debug("pedigree_created_for_proband", proband=proband_id)
        return Pedigree.just_proband(proband_id, proband_sex)

    family_ids = pedigree.family_ids
    if len(family_ids) > 1:
        raise PedigreeValidationError(
            f"Pedigree must contain a single family, found {len(family_ids)}: {family_ids}"
        )

    proband: FamilyMember | None = pedigree.get(proband_id)
    if proband is None:
        raise PedigreeValidationError(
            f"Proband '{proband_id}' not found in pedigree {pedigree.ids}"
        )
    if not proband.is_affected:
        raise PedigreeValidationError(f"Proband '{proband_id}' must be affected")

    unmatched = [name for name in sample_names if not pedigree.contains(name)]
    if sample_names and len(unmatched) == len(sample_names):
        raise PedigreeValidationError(
            f"No samples match the pedigree: samples {sample_names}, pedigree {pedigree.ids}"
        )
    if unmatched:
        raise PedigreeValidationError(
            f"Samples not found in pedigree: {unmatched}"
        )

    logger.debug(
        "pedigree_validated",
        proband=proband_id,
        family=family_ids[0],
        members=pedigree.size,
        samples=len(sample_names),
    )
    return pedigree
