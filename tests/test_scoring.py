"""Tests for phenotype scores, combined scores, p-values and gene scoring."""

import numpy as np
import pytest

from variant_ranking.acmg import AcmgAssignmentCalculator, AcmgCriterion, AcmgEvidenceAssigner
from variant_ranking.constraint import GeneConstraints
from variant_ranking.inheritance import InheritanceModeAnnotator, InheritanceModeOptions
from variant_ranking.model import (
    CandidateVariant,
    Disease,
    DiseaseInheritance,
    DiseaseMatch,
    ExomeWalkerPriorityResult,
    HiPhivePriorityResult,
    ModeOfInheritance,
    OmimPriorityResult,
    Pedigree,
    PhenixPriorityResult,
    PriorityType,
    Sex,
    VariantEffect,
)
from variant_ranking.model.gene import GeneCandidate
from variant_ranking.scoring import (
    LOGISTIC_MODELS,
    NullDistribution,
    PvalueGeneScorer,
    build_null_distribution,
    calculate_phenotype_score,
    combined_score,
    known_disease_inheritance_modifier,
    prioritiser_score,
    ranked_gene_scores,
    select_model,
)

AD = ModeOfInheritance.AUTOSOMAL_DOMINANT
AR = ModeOfInheritance.AUTOSOMAL_RECESSIVE
ANY = ModeOfInheritance.ANY


def _gene(symbol, results=(), modes=(), variants=()):
    return GeneCandidate(
        gene_symbol=symbol,
        priority_results=list(results),
        compatible_modes=set(modes),
        variants=list(variants),
    )


# ============================================================================
# Combined score
# ============================================================================

@pytest.mark.parametrize(
    "priority_types",
    [{PriorityType.HIPHIVE}, {PriorityType.EXOMEWALKER}, {PriorityType.PHENIX}, set()],
)
def test_combined_score_is_monotonic(priority_types):
    """Test combined score never decreases when either input increases."""
    grid = np.linspace(0.0, 1.0, 11)
    for fixed in grid:
        by_variant = [combined_score(v, fixed, priority_types) for v in grid]
        by_phenotype = [combined_score(fixed, p, priority_types) for p in grid]
        assert all(a <= b for a, b in zip(by_variant, by_variant[1:]))
        assert all(a <= b for a, b in zip(by_phenotype, by_phenotype[1:]))
        assert all(0.0 <= s <= 1.0 for s in by_variant + by_phenotype)


def test_combined_score_falls_back_to_mean():
    """Test the mean is used when no prioritizer has a model."""
    assert combined_score(0.2, 0.6, [PriorityType.OMIM]) == pytest.approx(0.4)


def test_model_priority_order():
    """Test HiPhive outranks ExomeWalker which outranks Phenix."""
    assert select_model([PriorityType.PHENIX, PriorityType.HIPHIVE]) == LOGISTIC_MODELS[PriorityType.HIPHIVE]
    assert select_model([PriorityType.PHENIX, PriorityType.EXOMEWALKER]) == LOGISTIC_MODELS[PriorityType.EXOMEWALKER]
    assert select_model([PriorityType.OMIM]) is None


# ============================================================================
# Phenotype score
# ============================================================================

def test_modifier_without_compatible_modes_or_for_any():
    """Test genes with no compatible mode and the ANY mode are never down-ranked."""
    assert known_disease_inheritance_modifier(_gene("A"), AD) == 1.0
    assert known_disease_inheritance_modifier(_gene("A", modes={AR}), ANY) == 1.0


def test_modifier_for_incompatible_mode():
    """Test a gene not compatible with the scored mode gets half weight."""
    assert known_disease_inheritance_modifier(_gene("A", modes={AR}), AD) == 0.5


def test_modifier_uses_known_disease_inheritance():
    """Test known disease inheritance agreeing or disagreeing with the gene's modes."""
    recessive = OmimPriorityResult(diseases=[
        Disease(disease_id="OMIM:1", inheritance=DiseaseInheritance.AUTOSOMAL_RECESSIVE),
    ])
    dominant = OmimPriorityResult(diseases=[
        Disease(disease_id="OMIM:2", inheritance=DiseaseInheritance.AUTOSOMAL_DOMINANT),
        Disease(disease_id="OMIM:3", inheritance=DiseaseInheritance.SOMATIC),
    ])
    unknown = OmimPriorityResult(diseases=[Disease(disease_id="OMIM:4")])

    assert known_disease_inheritance_modifier(_gene("A", [recessive], {AD}), AD) == 0.5
    assert known_disease_inheritance_modifier(_gene("B", [dominant], {AD}), AD) == 1.0
    assert known_disease_inheritance_modifier(_gene("C", [unknown], {AD}), AD) == 1.0


def test_prioritiser_score_skips_disease_database():
    """Test the first non-OMIM result provides the prioritizer score."""
    gene = _gene("A", [OmimPriorityResult(score=1.0), PhenixPriorityResult(score=0.42)])
    assert prioritiser_score(gene) == 0.42
    assert prioritiser_score(_gene("B")) == 0.0


def test_phenotype_score_from_compatible_disease_matches():
    """Test known disease matches for the mode override the prioritizer score."""
    match = DiseaseMatch(disease=Disease(disease_id="OMIM:154700", name="Marfan syndrome"), score=0.8)
    weaker = DiseaseMatch(disease=Disease(disease_id="OMIM:1"), score=0.3)
    hiphive = HiPhivePriorityResult(score=0.6, mouse_score=0.5, disease_matches={AD: [weaker, match]})
    gene = _gene("FBN1", [hiphive], {AD, AR})

    score, matches = calculate_phenotype_score(gene, AD)
    recessive_score, recessive_matches = calculate_phenotype_score(gene, AR)

    assert score == 0.8
    assert matches == [match, weaker]
    assert recessive_score == 0.6
    assert recessive_matches == []


def test_phenotype_score_prefers_model_organism_score():
    """Test a stronger model organism match beats the disease match."""
    match = DiseaseMatch(disease=Disease(disease_id="OMIM:1"), score=0.5)
    hiphive = HiPhivePriorityResult(score=0.9, fish_score=0.9, disease_matches={AD: [match]})

    assert calculate_phenotype_score(_gene("A", [hiphive], {AD}), AD)[0] == 0.9


# ============================================================================
# Null distribution and p-values
# ============================================================================

def test_p_value_counts_scores_at_least_as_high():
    """Test the (1 + count) / N estimate and its cap at 1."""
    null = NullDistribution([0.1, 0.2, 0.3, 0.4])

    assert null.p_value(0.25) == pytest.approx(0.75)
    assert null.p_value(0.5) == pytest.approx(0.25)
    assert null.p_value(0.1) == 1.0


def test_p_value_is_one_for_zero_score_or_empty_population():
    """Test zero scores and empty populations give p = 1."""
    assert NullDistribution([0.1, 0.2]).p_value(0.0) == 1.0
    assert NullDistribution.empty().p_value(0.9) == 1.0


def test_p_value_is_non_increasing():
    """Test higher combined scores never get larger p-values."""
    null = NullDistribution.build([0.1, 0.5, 0.9], {PriorityType.HIPHIVE}, size=2000, seed=3)
    p_values = [null.p_value(x) for x in np.linspace(0.01, 1.0, 50)]

    assert all(a >= b for a, b in zip(p_values, p_values[1:]))
    assert all(0.0 < p <= 1.0 for p in p_values)


def test_seeded_build_is_reproducible_across_workers():
    """Test the same seed gives the same population whatever the thread count."""
    phenotypes = [0.2, 0.4, 0.7]
    single = NullDistribution.build(phenotypes, {PriorityType.PHENIX}, size=1050, seed=11, workers=1, chunk_size=100)
    pooled = NullDistribution.build(phenotypes, {PriorityType.PHENIX}, size=1050, seed=11, workers=4, chunk_size=100)

    assert len(single) == 1050
    assert np.array_equal(single.scores, pooled.scores)


def test_build_edge_cases():
    """Test empty inputs give an empty population and bad sizes raise."""
    assert NullDistribution.build([0.5], set(), size=0).size == 0
    assert NullDistribution.build([], set(), size=100).size == 0
    with pytest.raises(ValueError):
        NullDistribution.build([0.5], set(), size=-1)
    with pytest.raises(ValueError):
        NullDistribution.build([0.5], set(), size=10, chunk_size=0)


def test_scores_view_is_read_only():
    """Test the null scores cannot be modified through the view."""
    null = NullDistribution([0.3, 0.1])
    assert list(null.scores) == [0.1, 0.3]
    with pytest.raises(ValueError):
        null.scores[0] = 1.0


def test_build_null_distribution_from_genes():
    """Test the null population is resampled from gene prioritizer scores."""
    genes = [
        _gene("A", [HiPhivePriorityResult(score=0.3)]),
        _gene("B", [HiPhivePriorityResult(score=0.6)]),
    ]
    null = build_null_distribution(genes, size=500, seed=5)
    assert null.size == 500


# ============================================================================
# Gene scorer
# ============================================================================

@pytest.fixture
def scored_genes():
    """Two genes scored against a single-proband pedigree."""
    pedigree = Pedigree.just_proband("proband", Sex.FEMALE)
    annotator = InheritanceModeAnnotator(pedigree, InheritanceModeOptions.defaults())
    strong = CandidateVariant(
        contig="15", start=48_700_000, ref="G", alt="A", gene_symbol="FBN1",
        effect=VariantEffect.STOP_GAINED, genotypes={"proband": "0/1"}, score=0.95,
    )
    weak = CandidateVariant(
        contig="2", start=1_000, ref="C", alt="T", gene_symbol="GENE2",
        effect=VariantEffect.MISSENSE_VARIANT, genotypes={"proband": "0/1"}, score=0.2,
    )
    genes = [
        _gene("GENE2", [ExomeWalkerPriorityResult(score=0.1), HiPhivePriorityResult(score=0.2)], variants=[weak]),
        _gene("FBN1", [HiPhivePriorityResult(score=0.9, human_score=0.9)], variants=[strong]),
    ]
    for gene in genes:
        annotator.annotate(gene)

    null = build_null_distribution(genes, size=2000, seed=1)
    acmg = AcmgAssignmentCalculator(AcmgEvidenceAssigner("proband", pedigree, GeneConstraints({})))
    scorer = PvalueGeneScorer("proband", Sex.FEMALE, annotator, null, acmg, workers=2)
    return scorer, scorer.score_genes(genes), strong


def test_genes_ranked_by_combined_score(scored_genes):
    """Test the stronger gene ranks first and every mode is scored."""
    scorer, ranked, _ = scored_genes

    assert [gene.gene_symbol for gene in ranked] == ["FBN1", "GENE2"]
    for gene in ranked:
        assert [s.mode for s in gene.gene_scores] == scorer.modes_to_score()


def test_dominant_score_uses_contributing_variant(scored_genes):
    """Test the AD score of FBN1 carries its variant, p-value and ACMG result."""
    _, ranked, strong = scored_genes
    score = ranked[0].gene_score_for_mode(AD)

    assert score.contributing_variants[0] is strong
    assert score.variant_score == 0.95
    assert score.phenotype_score == 0.9
    assert 0.0 < score.p_value <= 1.0
    assert len(score.acmg_assignments) == 1
    assert score.acmg_assignments[0].variant is strong


def test_mode_without_contributing_variants(scored_genes):
    """Test modes lacking compatible variants score with a variant score of 0."""
    _, ranked, _ = scored_genes
    score = ranked[0].gene_score_for_mode(AR)

    assert score.contributing_variants == []
    assert score.variant_score == 0.0
    assert score.acmg_assignments == []


def test_ranked_gene_scores_are_sorted(scored_genes):
    """Test flattened gene scores come out in sort-key order."""
    _, ranked, _ = scored_genes
    scores = ranked_gene_scores(ranked)

    assert len(scores) == sum(len(gene.gene_scores) for gene in ranked)
    assert [s.sort_key() for s in scores] == sorted(s.sort_key() for s in scores)
    assert scores[0].gene_symbol == "FBN1"


def test_empty_options_score_any_mode():
    """Test only the ANY mode is scored when no modes are configured."""
    pedigree = Pedigree.just_proband("proband")
    annotator = InheritanceModeAnnotator(pedigree, InheritanceModeOptions.empty())
    acmg = AcmgAssignmentCalculator(AcmgEvidenceAssigner("proband", pedigree, GeneConstraints({})))
    scorer = PvalueGeneScorer("proband", Sex.UNKNOWN, annotator, NullDistribution.empty(), acmg)

    assert scorer.modes_to_score() == [ANY]


def test_pp4_requires_disease_compatible_with_mode():
    """Test a strong human match for a recessive disease gives no PP4 under AD."""
    pedigree = Pedigree.just_proband("proband", Sex.FEMALE)
    annotator = InheritanceModeAnnotator(pedigree, InheritanceModeOptions.defaults())
    variant = CandidateVariant(
        contig="1", start=5_000, ref="C", alt="T", gene_symbol="GENE1",
        effect=VariantEffect.MISSENSE_VARIANT, genotypes={"proband": "0/1"},
    )
    recessive = Disease(
        disease_id="OMIM:200000", name="Recessive disorder",
        inheritance=DiseaseInheritance.AUTOSOMAL_RECESSIVE,
    )
    hiphive = HiPhivePriorityResult(
        score=0.9, human_score=0.9, disease_matches={AR: [DiseaseMatch(disease=recessive, score=0.9)]}
    )
    gene = _gene("GENE1", [hiphive], variants=[variant])
    annotator.annotate(gene)

    acmg = AcmgAssignmentCalculator(AcmgEvidenceAssigner("proband", pedigree, GeneConstraints({})))
    scorer = PvalueGeneScorer("proband", Sex.FEMALE, annotator, NullDistribution.empty(), acmg)
    score = scorer.calculate_gene_score(gene, AD)

    assert score.compatible_disease_matches == []
    [assignment] = score.acmg_assignments
    assert assignment.evidence.has(AcmgCriterion.PM2)
    assert not assignment.evidence.has(AcmgCriterion.PP4)
