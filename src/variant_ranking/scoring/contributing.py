"""Select the variants that explain a gene's phenotype under a mode."""

from typing import Sequence

import structlog

from variant_ranking.inheritance.annotator import InheritanceModeAnnotator
from variant_ranking.model.inheritance import ModeOfInheritance, SubModeOfInheritance
from variant_ranking.model.pedigree import Sex
from variant_ranking.model.variant import CandidateVariant

logger = structlog.get_logger(__name__)

_HOM_ALT_SUB_MODES = {
    ModeOfInheritance.AUTOSOMAL_RECESSIVE: SubModeOfInheritance.AUTOSOMAL_RECESSIVE_HOM_ALT,
    ModeOfInheritance.X_RECESSIVE: SubModeOfInheritance.X_RECESSIVE_HOM_ALT,
}


class CompHetPair:
    """Two alleles in trans, scored as the mean of their variant scores."""

    def __init__(self, first: CandidateVariant, second: CandidateVariant):
        self.first = first
        self.second = second
        self.score = (first.variant_score + second.variant_score) / 2.0

    @property
    def alleles(self) -> list[CandidateVariant]:
        return [self.first, self.second]

    def __repr__(self) -> str:
        return f"CompHetPair({self.first.key}, {self.second.key}, score={self.score:.3f})"


def _best_variant(variants: Sequence[CandidateVariant]) -> list[CandidateVariant]:
    # First of equal scores wins, keeping the choice stable under input order
    best = None
    for variant in variants:
        if best is None or variant.variant_score > best.variant_score:
            best = variant
    return [best] if best is not None else []


class ContributingAlleleCalculator:
    """Choose the contributing alleles for one gene and mode.

    Args:
        proband_id: Proband sample identifier
        proband_sex: Sex of the proband, deciding how X-recessive is scored
        annotator: Annotator supplying compound heterozygous pairs and the pedigree
    """

    def __init__(self, proband_id: str, proband_sex: Sex, annotator: InheritanceModeAnnotator):
        self.proband_id = proband_id
        self.proband_sex = proband_sex
        self.annotator = annotator

    def find_contributing_variants(
        self, mode: ModeOfInheritance, variants: Sequence[CandidateVariant]
    ) -> list[CandidateVariant]:
        """Return the contributing variants, or an empty list when none are compatible.

        Only passed variants compatible with ``mode`` are considered. The
        variants are not modified; callers keep the returned list.
        """
        compatible = [
            variant for variant in variants
            if variant.passed_filters and variant.is_compatible_with(mode)
        ]
        if not compatible:
            return []
        if mode == ModeOfInheritance.AUTOSOMAL_RECESSIVE:
            return self._recessive(mode, compatible)
        if mode == ModeOfInheritance.X_RECESSIVE:
            if self.proband_sex == Sex.FEMALE:
                return self._recessive(mode, compatible)
            # Hemizygous males and unknown sex are scored as dominant
            return _best_variant(compatible)
        if mode == ModeOfInheritance.ANY:
            return _best_variant(self._carried_by_all_affected(compatible))
        return _best_variant(compatible)

    def _carried_by_all_affected(
        self, variants: Sequence[CandidateVariant]
    ) -> list[CandidateVariant]:
        affected = self.annotator.pedigree.affected()
        return [
            variant for variant in variants
            if all(variant.genotype(member.id).carries_alt for member in affected)
        ]

    def _recessive(
        self, mode: ModeOfInheritance, variants: Sequence[CandidateVariant]
    ) -> list[CandidateVariant]:
        best_pair = None
        for first, second in self.annotator.find_compound_het_pairs(variants, mode):
            if not self._in_trans(first, second):
                continue
            pair = CompHetPair(first, second)
            if best_pair is None or pair.score > best_pair.score:
                best_pair = pair

        # Compatible variants passed the comp-het ceiling; hom-alts have their own
        hom_alt_sub_mode = _HOM_ALT_SUB_MODES[mode]
        hom_alts = [
            v for v in variants
            if v.genotype(self.proband_id).is_hom_alt
            and self.annotator.passes_sub_mode_ceiling(v, hom_alt_sub_mode)
        ]
        best_hom_alt = _best_variant(hom_alts)

        pair_score = best_pair.score if best_pair is not None else 0.0
        hom_alt_score = best_hom_alt[0].variant_score if best_hom_alt else 0.0
        logger.debug("recessive_candidates", mode=mode.value, pair=repr(best_pair), hom_alt_score=hom_alt_score)

        if best_pair is not None and pair_score >= hom_alt_score:
            return best_pair.alleles
        return best_hom_alt

    def _in_trans(self, first: CandidateVariant, second: CandidateVariant) -> bool:
        if first is second or first.key == second.key:
            return False
        first_call = first.genotype(self.proband_id)
        second_call = second.genotype(self.proband_id)
        if not (first_call.is_het and second_call.is_het):
            return False
        if first_call.is_phased_het and second_call.is_phased_het:
            return first_call.alt_phase != second_call.alt_phase
        # Unphased calls cannot be placed in cis, the pedigree check stands
        return True
