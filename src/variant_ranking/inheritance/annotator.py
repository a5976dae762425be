"""Annotate variants and genes with the inheritance modes they segregate with."""

from typing import Sequence

import structlog

from variant_ranking.inheritance.checker import (
    CallRecord,
    MendelianChecker,
    PedigreeMendelianChecker,
    SampleCalls,
)
from variant_ranking.inheritance.options import InheritanceModeOptions
from variant_ranking.model.gene import GeneCandidate
from variant_ranking.model.inheritance import ModeOfInheritance, SubModeOfInheritance
from variant_ranking.model.pedigree import Pedigree
from variant_ranking.model.variant import CandidateVariant

logger = structlog.get_logger(__name__)


def _group_by_key(variants: Sequence[CandidateVariant]) -> dict[str, list[CandidateVariant]]:
    grouped: dict[str, list[CandidateVariant]] = {}
    for variant in variants:
        grouped.setdefault(variant.key, []).append(variant)
    return grouped


class InheritanceModeAnnotator:
    """Find the modes of inheritance each variant is compatible with.

    Variants are expected to be filtered already; no quality or effect
    filtering happens here. Concrete modes are delegated to a Mendelian
    checker and then limited by the per-mode frequency ceiling, which
    whitelisted variants bypass. ``ANY`` is decided here: every affected
    member must carry the allele.

    Args:
        pedigree: Validated, non-empty pedigree
        options: Frequency ceilings; only modes defined here are checked
        checker: Mendelian checker (defaults to ``PedigreeMendelianChecker``)

    Raises:
        ValueError: If the pedigree is empty
    """

    def __init__(
        self,
        pedigree: Pedigree,
        options: InheritanceModeOptions,
        checker: MendelianChecker | None = None,
    ):
        if pedigree.is_empty:
            raise ValueError("Cannot annotate inheritance modes with an empty pedigree")
        self.pedigree = pedigree
        self.options = options
        self.checker = checker if checker is not None else PedigreeMendelianChecker()

    def to_records(self, variants: Sequence[CandidateVariant]) -> list[CallRecord]:
        """One call record per distinct variant key, in first-seen order."""
        records = []
        for key, same_key in _group_by_key(variants).items():
            variant = same_key[0]
            samples = {
                member.id: SampleCalls.from_genotype(variant.genotype(member.id))
                for member in self.pedigree.members
            }
            records.append(CallRecord(key=key, chromosome=variant.chromosome, samples=samples))
        return records

    def passes_frequency_ceiling(self, variant: CandidateVariant, mode: ModeOfInheritance) -> bool:
        if variant.whitelisted:
            return True
        return variant.frequency.max_frequency <= self.options.max_freq_for(mode)

    def passes_sub_mode_ceiling(
        self, variant: CandidateVariant, sub_mode: SubModeOfInheritance
    ) -> bool:
        if variant.whitelisted:
            return True
        return variant.frequency.max_frequency <= self.options.max_freq_for_sub_mode(sub_mode)

    def compatible_with_any(self, variant: CandidateVariant) -> bool:
        return all(
            variant.genotype(member.id).carries_alt for member in self.pedigree.affected()
        )

    def compute_compatible_modes(
        self, variants: Sequence[CandidateVariant]
    ) -> dict[ModeOfInheritance, list[CandidateVariant]]:
        """Map each mode to the variants compatible with it.

        Modes with no compatible variant are left out.
        """
        compatible: dict[ModeOfInheritance, list[CandidateVariant]] = {}
        for mode in self.options.defined_modes:
            below_ceiling = [v for v in variants if self.passes_frequency_ceiling(v, mode)]
            if not below_ceiling:
                continue
            by_key = _group_by_key(below_ceiling)
            groups = self.checker.compatible_groups(
                self.to_records(below_ceiling), self.pedigree, mode
            )
            keys = {record.key for group in groups for record in group}
            mode_variants = [v for key, same_key in by_key.items() if key in keys for v in same_key]
            if mode_variants:
                compatible[mode] = mode_variants

        any_variants = [v for v in variants if self.compatible_with_any(v)]
        if any_variants:
            compatible[ModeOfInheritance.ANY] = any_variants
        return compatible

    def annotate(self, gene: GeneCandidate) -> set[ModeOfInheritance]:
        """Add compatible modes to the gene's passed variants and to the gene.

        Only adds to the mode sets, so repeated calls leave them unchanged.

        Returns:
            The gene's compatible modes after annotation
        """
        compatible = self.compute_compatible_modes(gene.passed_variants)
        for mode, mode_variants in compatible.items():
            for variant in mode_variants:
                variant.compatible_modes.add(mode)
            gene.compatible_modes.add(mode)
        logger.debug(
            "inheritance_modes_annotated",
            gene=gene.gene_symbol,
            modes=sorted(mode.value for mode in gene.compatible_modes),
        )
        return set(gene.compatible_modes)

    def find_compound_het_pairs(
        self,
        variants: Sequence[CandidateVariant],
        mode: ModeOfInheritance = ModeOfInheritance.AUTOSOMAL_RECESSIVE,
    ) -> list[tuple[CandidateVariant, CandidateVariant]]:
        """Pairs of distinct variants segregating as compound heterozygotes.

        Each unordered pair appears once, in input order.
        """
        if len(variants) < 2:
            return []
        by_key = {}
        for variant in variants:
            by_key.setdefault(variant.key, variant)
        groups = self.checker.compatible_groups(self.to_records(variants), self.pedigree, mode)
        return [
            (by_key[group[0].key], by_key[group[1].key])
            for group in groups
            if len(group) == 2
        ]
