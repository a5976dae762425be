"""Assign ACMG criteria to contributing variants from variant, gene and family facts.

Every criterion is an independent predicate. The order in which they are
evaluated does not affect the resulting evidence.
"""

from typing import Sequence

import structlog

from variant_ranking.acmg.assignment import AcmgAssignment
from variant_ranking.acmg.classifier import classify
from variant_ranking.acmg.criteria import AcmgCriterion
from variant_ranking.acmg.evidence import AcmgEvidence
from variant_ranking.constraint.table import GeneConstraints
from variant_ranking.model.inheritance import ModeOfInheritance
from variant_ranking.model.pedigree import FamilyMember, Pedigree, Sex
from variant_ranking.model.priority import DiseaseMatch
from variant_ranking.model.variant import (
    CandidateVariant,
    ClinVarSignificance,
    VariantEffect,
)

logger = structlog.get_logger(__name__)

LOSS_OF_FUNCTION_EFFECTS = frozenset({
    VariantEffect.START_LOST,
    VariantEffect.INITIATOR_CODON_VARIANT,
    VariantEffect.STOP_GAINED,
    VariantEffect.FRAMESHIFT_VARIANT,
    VariantEffect.FRAMESHIFT_ELONGATION,
    VariantEffect.FRAMESHIFT_TRUNCATION,
    VariantEffect.SPLICE_ACCEPTOR_VARIANT,
    VariantEffect.SPLICE_DONOR_VARIANT,
    VariantEffect.EXON_LOSS_VARIANT,
})

DOMINANT_MODES = frozenset({ModeOfInheritance.AUTOSOMAL_DOMINANT, ModeOfInheritance.X_DOMINANT})

DEFAULT_PHENOTYPE_SPECIFICITY = 0.6
DEFAULT_COMMON_FREQUENCY = 5.0


def _contains(variants: Sequence[CandidateVariant], variant: CandidateVariant) -> bool:
    return any(other is variant for other in variants)


class AcmgEvidenceAssigner:
    """Evaluates ACMG criteria for variants of one proband's analysis.

    Args:
        proband_id: Identifier of the proband in the pedigree
        pedigree: Validated family structure
        constraints: Gene constraint lookup used by the null-variant criterion
        phenotype_specificity_threshold: Minimum human phenotype similarity for PP4
        common_frequency_threshold: Population frequency percent at which BA1 applies
    """

    def __init__(
        self,
        proband_id: str,
        pedigree: Pedigree,
        constraints: GeneConstraints,
        phenotype_specificity_threshold: float = DEFAULT_PHENOTYPE_SPECIFICITY,
        common_frequency_threshold: float = DEFAULT_COMMON_FREQUENCY,
    ):
        self.proband_id = proband_id
        self.pedigree = pedigree
        self.constraints = constraints
        self.phenotype_specificity_threshold = phenotype_specificity_threshold
        self.common_frequency_threshold = common_frequency_threshold
        self.proband: FamilyMember | None = pedigree.get(proband_id)
        self.proband_sex = self.proband.sex if self.proband is not None else Sex.UNKNOWN

    def assign(
        self,
        variant: CandidateVariant,
        mode: ModeOfInheritance,
        contributing_variants: Sequence[CandidateVariant],
        phenotype_similarity: float = 0.0,
    ) -> AcmgEvidence:
        """Collect the criteria met by ``variant`` for a gene score.

        Args:
            variant: Variant being classified
            mode: Mode of inheritance of the gene score
            contributing_variants: Variants contributing to the gene score
            phenotype_similarity: Best phenotype match among diseases compatible with ``mode``

        Returns:
            Evidence made of every met criterion at its default weight
        """
        met: list[AcmgCriterion] = []

        if self._null_variant(variant, mode):
            met.append(AcmgCriterion.PVS1)
        if self.proband is not None:
            if self._de_novo(variant, mode, contributing_variants):
                met.append(AcmgCriterion.PS2)
            if self._lacks_segregation(variant):
                met.append(AcmgCriterion.BS4)
        if not variant.frequency.has_data:
            met.append(AcmgCriterion.PM2)
        if variant.frequency.max_frequency >= self.common_frequency_threshold:
            met.append(AcmgCriterion.BA1)
        if self._in_trans_with_pathogenic(variant, mode, contributing_variants):
            met.append(AcmgCriterion.PM3)
        if variant.effect == VariantEffect.STOP_LOST:
            met.append(AcmgCriterion.PM4)
        if phenotype_similarity >= self.phenotype_specificity_threshold:
            met.append(AcmgCriterion.PP4)
        met.extend(self._clinvar_criteria(variant))
        met.extend(self._computational_criteria(variant))

        return AcmgEvidence.of(*met)

    def compatible_with_recessive(self, mode: ModeOfInheritance) -> bool:
        if mode == ModeOfInheritance.AUTOSOMAL_RECESSIVE:
            return True
        return self.proband_sex == Sex.FEMALE and mode == ModeOfInheritance.X_RECESSIVE

    def compatible_with_dominant(self, mode: ModeOfInheritance) -> bool:
        if mode == ModeOfInheritance.AUTOSOMAL_DOMINANT:
            return True
        if self.proband_sex == Sex.MALE and mode in (
            ModeOfInheritance.X_RECESSIVE,
            ModeOfInheritance.X_DOMINANT,
        ):
            return True
        return self.proband_sex in (Sex.FEMALE, Sex.UNKNOWN) and mode == ModeOfInheritance.X_DOMINANT

    def _null_variant(self, variant: CandidateVariant, mode: ModeOfInheritance) -> bool:
        # PVS1
        if variant.effect not in LOSS_OF_FUNCTION_EFFECTS:
            return False
        if self.compatible_with_recessive(mode):
            return True
        return self.compatible_with_dominant(mode) and self.constraints.is_lof_intolerant(
            variant.gene_symbol
        )

    def _de_novo(
        self,
        variant: CandidateVariant,
        mode: ModeOfInheritance,
        contributing_variants: Sequence[CandidateVariant],
    ) -> bool:
        # PS2
        if mode not in DOMINANT_MODES or not _contains(contributing_variants, variant):
            return False
        ancestors = self.pedigree.ancestors_of(self.proband)
        if len(ancestors) < 2:
            return False
        proband_carries = variant.genotype(self.proband_id).carries_alt
        for ancestor in ancestors:
            # Unsequenced relatives still count towards family history of disease
            if ancestor.is_affected:
                return False
            if proband_carries and variant.genotype(ancestor.id).carries_alt:
                return False
        return True

    def _lacks_segregation(self, variant: CandidateVariant) -> bool:
        # BS4
        if self.pedigree.size < 2:
            return False
        if not variant.genotype(self.proband_id).carries_alt:
            return False
        for member in self.pedigree.affected():
            if member.id == self.proband_id or member.family_id != self.proband.family_id:
                continue
            genotype = variant.genotype(member.id)
            if genotype.is_hom_ref or genotype.is_no_call:
                return True
        return False

    def _in_trans_with_pathogenic(
        self,
        variant: CandidateVariant,
        mode: ModeOfInheritance,
        contributing_variants: Sequence[CandidateVariant],
    ) -> bool:
        # PM3
        if not self.compatible_with_recessive(mode):
            return False
        if len(contributing_variants) < 2 or not _contains(contributing_variants, variant):
            return False
        genotype = variant.genotype(self.proband_id)
        if not genotype.is_phased_het:
            return False
        for other in contributing_variants:
            if other is variant or other.clinvar is None:
                continue
            other_genotype = other.genotype(self.proband_id)
            if (
                other.clinvar.significance == ClinVarSignificance.PATHOGENIC
                and other_genotype.is_phased_het
                and other_genotype.alt_phase != genotype.alt_phase
            ):
                return True
        return False

    def _clinvar_criteria(self, variant: CandidateVariant) -> list[AcmgCriterion]:
        # PS1 / PP5 and BP6
        clinvar = variant.clinvar
        if clinvar is None:
            return []
        if clinvar.significance.is_pathogenic:
            if clinvar.stars >= 2:
                return [AcmgCriterion.PS1]
            if clinvar.stars >= 1:
                return [AcmgCriterion.PP5]
        if clinvar.significance.is_benign and clinvar.stars >= 1:
            return [AcmgCriterion.BP6]
        return []

    def _computational_criteria(self, variant: CandidateVariant) -> list[AcmgCriterion]:
        # PP3 / BP4
        pathogenic, benign = variant.pathogenicity.prediction_counts()
        if pathogenic + benign < 2:
            return []
        if pathogenic > benign:
            return [AcmgCriterion.PP3]
        if benign > pathogenic:
            return [AcmgCriterion.BP4]
        return []


class AcmgAssignmentCalculator:
    """Classifies every contributing variant of a gene score."""

    def __init__(self, assigner: AcmgEvidenceAssigner):
        self.assigner = assigner

    def calculate(
        self,
        gene_symbol: str,
        mode: ModeOfInheritance,
        contributing_variants: Sequence[CandidateVariant],
        compatible_disease_matches: Sequence[DiseaseMatch] = (),
        phenotype_similarity: float = 0.0,
    ) -> list[AcmgAssignment]:
        """Build one assignment per contributing variant.

        The matched disease is the best scoring disease compatible with the
        mode, when there is one.
        """
        best_match = max(compatible_disease_matches, key=lambda match: match.score, default=None)
        disease = best_match.disease if best_match is not None else None

        assignments = []
        for variant in contributing_variants:
            evidence = self.assigner.assign(variant, mode, contributing_variants, phenotype_similarity)
            classification = classify(evidence)
            logger.debug(
                "acmg_assignment",
                gene=gene_symbol,
                mode=mode.value,
                variant=variant.key,
                evidence=str(evidence),
                classification=classification.value,
            )
            assignments.append(
                AcmgAssignment(
                    variant=variant,
                    gene_symbol=gene_symbol,
                    mode=mode,
                    disease=disease,
                    evidence=evidence,
                    classification=classification,
                )
            )
        return assignments
