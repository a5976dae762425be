"""Mendelian segregation checks over a family's genotype calls.

The annotator translates variants into ``CallRecord`` objects, one per
distinct variant key, with integer allele codes: 0 ref, 1 alt, 2 another
alternate allele at the same site and -1 no call. Any checker implementing
``MendelianChecker`` can be plugged in; ``PedigreeMendelianChecker`` is the
default.
"""

from dataclasses import dataclass, field
from itertools import combinations
from typing import Protocol, Sequence

from variant_ranking.model.genotype import AlleleCall, GenotypeCall
from variant_ranking.model.inheritance import ModeOfInheritance
from variant_ranking.model.pedigree import FamilyMember, Pedigree

REF = 0
ALT = 1
OTHER_ALT = 2
NO_CALL = -1

CALL_CODES = {
    AlleleCall.REF: REF,
    AlleleCall.ALT: ALT,
    AlleleCall.OTHER_ALT: OTHER_ALT,
    AlleleCall.NO_CALL: NO_CALL,
}

X_CHROMOSOME = 23
Y_CHROMOSOME = 24
MT_CHROMOSOME = 25


@dataclass
class SampleCalls:
    codes: tuple[int, ...] = ()
    phased: bool = False

    @classmethod
    def from_genotype(cls, genotype: GenotypeCall) -> "SampleCalls":
        return cls(tuple(CALL_CODES[call] for call in genotype.calls), genotype.phased)

    @property
    def is_no_call(self) -> bool:
        return all(code == NO_CALL for code in self.codes)

    @property
    def alt_count(self) -> int:
        # Other alternate alleles count as alternate
        return sum(1 for code in self.codes if code in (ALT, OTHER_ALT))

    @property
    def is_hom_ref(self) -> bool:
        return bool(self.codes) and all(code == REF for code in self.codes)

    @property
    def is_hom_alt(self) -> bool:
        return bool(self.codes) and self.alt_count == len(self.codes)

    @property
    def is_het(self) -> bool:
        return self.alt_count > 0 and REF in self.codes

    @property
    def carries(self) -> bool:
        return self.alt_count > 0

    @property
    def alt_phase(self) -> int | None:
        if not self.phased or ALT not in self.codes:
            return None
        return self.codes.index(ALT)


@dataclass
class CallRecord:
    """Calls of every sample for one variant key."""

    key: str
    chromosome: int
    samples: dict[str, SampleCalls] = field(default_factory=dict)

    def calls_for(self, member: FamilyMember) -> SampleCalls:
        return self.samples.get(member.id, SampleCalls())


class MendelianChecker(Protocol):
    def compatible_groups(
        self,
        records: Sequence[CallRecord],
        pedigree: Pedigree,
        mode: ModeOfInheritance,
    ) -> list[list[CallRecord]]:
        """Return groups of records segregating with ``mode`` in the family.

        Single-record groups are compatible on their own; two-record groups
        are compound heterozygous pairs.
        """
        ...


def _on_autosome(record: CallRecord) -> bool:
    # Unknown contigs (0) are treated as autosomal
    return record.chromosome not in (X_CHROMOSOME, Y_CHROMOSOME, MT_CHROMOSOME)


class PedigreeMendelianChecker:
    """Default checker applying standard segregation rules.

    No-calls never exclude a variant, but at least one affected individual
    must show the expected genotype. Individuals of unknown affection status
    are not constrained.
    """

    def compatible_groups(
        self,
        records: Sequence[CallRecord],
        pedigree: Pedigree,
        mode: ModeOfInheritance,
    ) -> list[list[CallRecord]]:
        if mode == ModeOfInheritance.AUTOSOMAL_DOMINANT:
            return [[r] for r in records if _on_autosome(r) and self._dominant(r, pedigree)]
        if mode == ModeOfInheritance.AUTOSOMAL_RECESSIVE:
            autosomal = [r for r in records if _on_autosome(r)]
            groups = [[r] for r in autosomal if self._recessive_hom_alt(r, pedigree)]
            groups.extend(self._compound_het_pairs(autosomal, pedigree))
            return groups
        if mode == ModeOfInheritance.X_DOMINANT:
            return [
                [r] for r in records
                if r.chromosome == X_CHROMOSOME and self._x_dominant(r, pedigree)
            ]
        if mode == ModeOfInheritance.X_RECESSIVE:
            x_linked = [r for r in records if r.chromosome == X_CHROMOSOME]
            groups = [[r] for r in x_linked if self._x_recessive(r, pedigree)]
            affected = pedigree.affected()
            if affected and all(member.is_female for member in affected):
                groups.extend(self._compound_het_pairs(x_linked, pedigree))
            return groups
        if mode == ModeOfInheritance.MITOCHONDRIAL:
            return [
                [r] for r in records
                if r.chromosome == MT_CHROMOSOME and self._mitochondrial(r, pedigree)
            ]
        raise ValueError(f"No segregation rule for mode {mode.value}")

    def _dominant(self, record: CallRecord, pedigree: Pedigree) -> bool:
        seen_het = False
        for member in pedigree.affected():
            calls = record.calls_for(member)
            if calls.is_no_call:
                continue
            if not calls.is_het:
                return False
            seen_het = True
        for member in pedigree.unaffected():
            calls = record.calls_for(member)
            if calls.carries:
                return False
        return seen_het

    def _recessive_hom_alt(self, record: CallRecord, pedigree: Pedigree) -> bool:
        seen_hom_alt = False
        affected = pedigree.affected()
        for member in affected:
            calls = record.calls_for(member)
            if calls.is_no_call:
                continue
            if not calls.is_hom_alt:
                return False
            seen_hom_alt = True
        for member in pedigree.unaffected():
            if record.calls_for(member).is_hom_alt:
                return False
        # Unaffected parents of an affected child must be carriers
        parent_ids = {
            parent_id
            for member in affected
            for parent_id in (member.father_id, member.mother_id)
            if parent_id is not None
        }
        for parent_id in parent_ids:
            parent = pedigree.get(parent_id)
            if parent is None or parent.is_affected:
                continue
            if record.calls_for(parent).is_hom_ref:
                return False
        return seen_hom_alt

    def _compound_het_pairs(
        self, records: Sequence[CallRecord], pedigree: Pedigree
    ) -> list[list[CallRecord]]:
        affected = pedigree.affected()
        unaffected = pedigree.unaffected()
        pairs = []
        for first, second in combinations(records, 2):
            seen_het = False
            compatible = True
            for member in affected:
                calls_a = first.calls_for(member)
                calls_b = second.calls_for(member)
                if calls_a.is_no_call or calls_b.is_no_call:
                    continue
                if not (calls_a.is_het and calls_b.is_het):
                    compatible = False
                    break
                if calls_a.phased and calls_b.phased and calls_a.alt_phase == calls_b.alt_phase:
                    # In cis
                    compatible = False
                    break
                seen_het = True
            if not compatible or not seen_het:
                continue
            if any(
                first.calls_for(member).carries and second.calls_for(member).carries
                for member in unaffected
            ):
                continue
            pairs.append([first, second])
        return pairs

    def _x_dominant(self, record: CallRecord, pedigree: Pedigree) -> bool:
        seen_carrier = False
        for member in pedigree.affected():
            calls = record.calls_for(member)
            if calls.is_no_call:
                continue
            if not calls.carries:
                return False
            seen_carrier = True
        for member in pedigree.unaffected():
            if record.calls_for(member).carries:
                return False
        return seen_carrier

    def _x_recessive(self, record: CallRecord, pedigree: Pedigree) -> bool:
        seen = False
        for member in pedigree.affected():
            calls = record.calls_for(member)
            if calls.is_no_call:
                continue
            # Unknown sex is treated as hemizygous
            if member.is_female and not calls.is_hom_alt:
                return False
            if not member.is_female and not calls.carries:
                return False
            seen = True
        for member in pedigree.unaffected():
            calls = record.calls_for(member)
            if member.is_male and calls.carries:
                return False
            if not member.is_male and calls.is_hom_alt:
                return False
        return seen

    def _mitochondrial(self, record: CallRecord, pedigree: Pedigree) -> bool:
        seen_carrier = False
        for member in pedigree.affected():
            calls = record.calls_for(member)
            if calls.is_no_call:
                continue
            if not calls.carries:
                return False
            seen_carrier = True
        for member in pedigree.unaffected():
            if record.calls_for(member).is_hom_alt:
                return False
        return seen_carrier
