"""Tests for inheritance options, the Mendelian checker and the mode annotator."""

import math

import pytest

from variant_ranking.inheritance import (
    InheritanceModeAnnotator,
    InheritanceModeOptions,
    PedigreeMendelianChecker,
)
from variant_ranking.model import (
    AffectedStatus,
    CandidateVariant,
    FamilyMember,
    FrequencyData,
    ModeOfInheritance,
    Pedigree,
    Sex,
    SubModeOfInheritance,
    VariantEffect,
)
from variant_ranking.model.gene import GeneCandidate

AD = ModeOfInheritance.AUTOSOMAL_DOMINANT
AR = ModeOfInheritance.AUTOSOMAL_RECESSIVE
XD = ModeOfInheritance.X_DOMINANT
XR = ModeOfInheritance.X_RECESSIVE
MT = ModeOfInheritance.MITOCHONDRIAL
ANY = ModeOfInheritance.ANY


@pytest.fixture
def trio():
    """Affected daughter with unaffected parents."""
    return Pedigree(members=(
        FamilyMember(id="child", family_id="F1", father_id="dad", mother_id="mum",
                     sex=Sex.FEMALE, status=AffectedStatus.AFFECTED),
        FamilyMember(id="dad", family_id="F1", sex=Sex.MALE, status=AffectedStatus.UNAFFECTED),
        FamilyMember(id="mum", family_id="F1", sex=Sex.FEMALE, status=AffectedStatus.UNAFFECTED),
    ))


def _variant(start, genotypes, contig="1", freq=None, whitelisted=False):
    return CandidateVariant(
        contig=contig,
        start=start,
        ref="A",
        alt="T",
        gene_symbol="GENE1",
        effect=VariantEffect.MISSENSE_VARIANT,
        genotypes=genotypes,
        frequency=FrequencyData(frequencies={"gnomAD": freq} if freq is not None else {}),
        whitelisted=whitelisted,
    )


# ============================================================================
# Options
# ============================================================================

def test_default_options():
    """Test default ceilings and recessive modes using the comp-het value."""
    options = InheritanceModeOptions.defaults()
    assert options.max_freq_for(AD) == 0.1
    assert options.max_freq_for(AR) == 2.0
    assert options.max_freq_for(MT) == 0.2
    assert options.max_freq_for_sub_mode(SubModeOfInheritance.AUTOSOMAL_RECESSIVE_HOM_ALT) == 1.0
    assert options.defined_modes == [AD, AR, XD, XR, MT]


def test_undefined_mode_has_no_ceiling():
    """Test modes missing from the options are unbounded."""
    options = InheritanceModeOptions({SubModeOfInheritance.AUTOSOMAL_DOMINANT: 0.5})
    assert options.max_freq_for(AR) == math.inf
    assert options.defined_modes == [AD]
    assert InheritanceModeOptions.empty().is_empty


def test_options_reject_any_and_out_of_range():
    """Test ANY keys and values outside 0-100 are rejected."""
    with pytest.raises(ValueError):
        InheritanceModeOptions({SubModeOfInheritance.ANY: 1.0})
    with pytest.raises(ValueError):
        InheritanceModeOptions({SubModeOfInheritance.AUTOSOMAL_DOMINANT: 101.0})


# ============================================================================
# Annotator
# ============================================================================

def test_annotator_rejects_empty_pedigree():
    """Test annotation needs a pedigree."""
    with pytest.raises(ValueError):
        InheritanceModeAnnotator(Pedigree.empty(), InheritanceModeOptions.defaults())


def test_de_novo_het_is_dominant(trio):
    """Test a het absent from both parents is compatible with AD only among concrete modes."""
    variant = _variant(100, {"child": "0/1", "dad": "0/0", "mum": "0/0"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    compatible = annotator.compute_compatible_modes([variant])

    assert set(compatible) == {AD, ANY}


def test_hom_alt_with_carrier_parents_is_recessive(trio):
    """Test hom-alt in the child with het parents is AR compatible."""
    variant = _variant(100, {"child": "1/1", "dad": "0/1", "mum": "0/1"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    assert AR in annotator.compute_compatible_modes([variant])


def test_hom_ref_parent_excludes_hom_alt_recessive(trio):
    """Test a hom-ref unaffected parent rules out hom-alt recessive inheritance."""
    variant = _variant(100, {"child": "1/1", "dad": "0/0", "mum": "0/1"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    assert AR not in annotator.compute_compatible_modes([variant])


def test_compound_het_pair(trio):
    """Test one het from each parent forms a compound heterozygous pair."""
    paternal = _variant(100, {"child": "0/1", "dad": "0/1", "mum": "0/0"})
    maternal = _variant(200, {"child": "0/1", "dad": "0/0", "mum": "0/1"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    compatible = annotator.compute_compatible_modes([paternal, maternal])
    pairs = annotator.find_compound_het_pairs([paternal, maternal])

    assert compatible[AR] == [paternal, maternal]
    assert len(pairs) == 1
    assert pairs[0][0] is paternal and pairs[0][1] is maternal


def test_both_alleles_from_one_parent_is_not_compound_het(trio):
    """Test hets inherited together from one parent are not a pair."""
    first = _variant(100, {"child": "0/1", "dad": "0/1", "mum": "0/0"})
    second = _variant(200, {"child": "0/1", "dad": "0/1", "mum": "0/0"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    assert annotator.find_compound_het_pairs([first, second]) == []


def test_x_linked_modes_need_x_chromosome(trio):
    """Test X-linked modes only apply to variants on chromosome X."""
    autosomal = _variant(100, {"child": "1/1", "dad": "0/0", "mum": "0/1"}, contig="1")
    x_linked = _variant(100, {"child": "1/1", "dad": "0", "mum": "0/1"}, contig="X")
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    compatible = annotator.compute_compatible_modes([autosomal, x_linked])

    assert compatible[XR] == [x_linked]
    assert XD not in compatible


def test_frequency_ceiling_and_whitelist(trio):
    """Test common variants fail the AD ceiling unless whitelisted."""
    common = _variant(100, {"child": "0/1", "dad": "0/0", "mum": "0/0"}, freq=0.5)
    known = _variant(200, {"child": "0/1", "dad": "0/0", "mum": "0/0"}, freq=0.5, whitelisted=True)
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    compatible = annotator.compute_compatible_modes([common, known])

    assert compatible[AD] == [known]
    assert compatible[ANY] == [common, known]


def test_any_requires_all_affected_carriers():
    """Test ANY mode needs every affected member to carry the allele."""
    pedigree = Pedigree(members=(
        FamilyMember(id="p1", family_id="F", status=AffectedStatus.AFFECTED),
        FamilyMember(id="sib", family_id="F", status=AffectedStatus.AFFECTED),
        FamilyMember(id="mum", family_id="F", status=AffectedStatus.UNAFFECTED),
    ))
    shared = _variant(100, {"p1": "0/1", "sib": "1/1", "mum": "0/1"})
    private = _variant(200, {"p1": "0/1", "sib": "0/0", "mum": "0/0"})
    annotator = InheritanceModeAnnotator(pedigree, InheritanceModeOptions.empty())

    assert annotator.compute_compatible_modes([shared, private]) == {ANY: [shared]}


def test_multi_allelic_variants_grouped_by_key(trio):
    """Test variants sharing a key are checked once and annotated together."""
    first = _variant(100, {"child": "0/1", "dad": "0/0", "mum": "0/0"})
    duplicate = _variant(100, {"child": "0/1", "dad": "0/0", "mum": "0/0"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    assert len(annotator.to_records([first, duplicate])) == 1
    assert annotator.compute_compatible_modes([first, duplicate])[AD] == [first, duplicate]


def test_annotate_gene_is_idempotent(trio):
    """Test annotating twice leaves variant and gene modes unchanged."""
    variant = _variant(100, {"child": "0/1", "dad": "0/0", "mum": "0/0"})
    filtered = _variant(300, {"child": "1/1", "dad": "0/1", "mum": "0/1"})
    filtered.passed_filters = False
    gene = GeneCandidate(gene_symbol="GENE1", variants=[variant, filtered])
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults())

    first = annotator.annotate(gene)
    second = annotator.annotate(gene)

    assert first == second == {AD, ANY}
    assert variant.compatible_modes == {AD, ANY}
    assert filtered.compatible_modes == set()


def test_custom_checker_is_used(trio):
    """Test any object with compatible_groups can replace the default checker."""

    class RecessiveOnly:
        def compatible_groups(self, records, pedigree, mode):
            return [[r] for r in records] if mode == AR else []

    variant = _variant(100, {"child": "0/1", "dad": "0/0", "mum": "0/0"})
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults(), checker=RecessiveOnly())

    assert set(annotator.compute_compatible_modes([variant])) == {AR, ANY}


def test_checker_ignores_no_calls_but_needs_a_genotyped_affected(trio):
    """Test no-calls never exclude but an all-no-call record is not compatible."""
    checker = PedigreeMendelianChecker()
    annotator = InheritanceModeAnnotator(trio, InheritanceModeOptions.defaults(), checker)
    partly_called = _variant(100, {"child": "0/1", "dad": "./.", "mum": "0/0"})
    uncalled = _variant(200, {"child": "./.", "dad": "0/0", "mum": "0/0"})

    groups = checker.compatible_groups(annotator.to_records([partly_called, uncalled]), trio, AD)

    assert [[r.key for r in group] for group in groups] == [[partly_called.key]]
