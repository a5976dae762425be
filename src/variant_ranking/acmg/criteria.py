"""ACMG/AMP 2015 variant interpretation criteria."""

from enum import Enum


class Evidence(str, Enum):
    """Weight of a single piece of evidence."""

    STAND_ALONE = "stand_alone"
    VERY_STRONG = "very_strong"
    STRONG = "strong"
    MODERATE = "moderate"
    SUPPORTING = "supporting"


class Impact(str, Enum):
    PATHOGENIC = "pathogenic"
    BENIGN = "benign"


class AcmgCriterion(str, Enum):
    """Criterion codes. Direction, default weight and description are in CRITERIA_INFO."""

    PVS1 = "PVS1"
    PS1 = "PS1"
    PS2 = "PS2"
    PS3 = "PS3"
    PS4 = "PS4"
    PM1 = "PM1"
    PM2 = "PM2"
    PM3 = "PM3"
    PM4 = "PM4"
    PM5 = "PM5"
    PM6 = "PM6"
    PP1 = "PP1"
    PP2 = "PP2"
    PP3 = "PP3"
    PP4 = "PP4"
    PP5 = "PP5"
    BA1 = "BA1"
    BS1 = "BS1"
    BS2 = "BS2"
    BS3 = "BS3"
    BS4 = "BS4"
    BP1 = "BP1"
    BP2 = "BP2"
    BP3 = "BP3"
    BP4 = "BP4"
    BP5 = "BP5"
    BP6 = "BP6"
    BP7 = "BP7"

    @property
    def impact(self) -> Impact:
        return CRITERIA_INFO[self][0]

    @property
    def evidence(self) -> Evidence:
        """Default weight of the criterion."""
        return CRITERIA_INFO[self][1]

    @property
    def description(self) -> str:
        return CRITERIA_INFO[self][2]

    @property
    def is_pathogenic(self) -> bool:
        return self.impact == Impact.PATHOGENIC

    @property
    def is_benign(self) -> bool:
        return self.impact == Impact.BENIGN


_P = Impact.PATHOGENIC
_B = Impact.BENIGN

CRITERIA_INFO = {
    AcmgCriterion.PVS1: (_P, Evidence.VERY_STRONG,
                         "Null variant in a gene where LOF is a known mechanism of disease"),
    AcmgCriterion.PS1: (_P, Evidence.STRONG,
                        "Same amino acid change as a previously established pathogenic variant"),
    AcmgCriterion.PS2: (_P, Evidence.STRONG,
                        "De novo in a patient with the disease and no family history"),
    AcmgCriterion.PS3: (_P, Evidence.STRONG,
                        "Well-established functional studies supportive of a damaging effect"),
    AcmgCriterion.PS4: (_P, Evidence.STRONG,
                        "Prevalence in affecteds significantly increased compared with controls"),
    AcmgCriterion.PM1: (_P, Evidence.MODERATE,
                        "Located in a mutational hot spot or well-established functional domain"),
    AcmgCriterion.PM2: (_P, Evidence.MODERATE,
                        "Absent from controls in population databases"),
    AcmgCriterion.PM3: (_P, Evidence.MODERATE,
                        "For recessive disorders, detected in trans with a pathogenic variant"),
    AcmgCriterion.PM4: (_P, Evidence.MODERATE,
                        "Protein length change from an in-frame indel in a non-repeat region or stop-loss"),
    AcmgCriterion.PM5: (_P, Evidence.MODERATE,
                        "Novel missense change at a residue where a different pathogenic missense was seen"),
    AcmgCriterion.PM6: (_P, Evidence.MODERATE,
                        "Assumed de novo, without confirmation of paternity and maternity"),
    AcmgCriterion.PP1: (_P, Evidence.SUPPORTING,
                        "Co-segregation with disease in multiple affected family members"),
    AcmgCriterion.PP2: (_P, Evidence.SUPPORTING,
                        "Missense variant in a gene with a low rate of benign missense variation"),
    AcmgCriterion.PP3: (_P, Evidence.SUPPORTING,
                        "Multiple lines of computational evidence support a deleterious effect"),
    AcmgCriterion.PP4: (_P, Evidence.SUPPORTING,
                        "Phenotype highly specific for a disease with a single genetic etiology"),
    AcmgCriterion.PP5: (_P, Evidence.SUPPORTING,
                        "Reputable source reports variant as pathogenic"),
    AcmgCriterion.BA1: (_B, Evidence.STAND_ALONE,
                        "Allele frequency is above 5% in population databases"),
    AcmgCriterion.BS1: (_B, Evidence.STRONG,
                        "Allele frequency is greater than expected for disorder"),
    AcmgCriterion.BS2: (_B, Evidence.STRONG,
                        "Observed in a healthy adult with full penetrance expected at an early age"),
    AcmgCriterion.BS3: (_B, Evidence.STRONG,
                        "Well-established functional studies show no damaging effect"),
    AcmgCriterion.BS4: (_B, Evidence.STRONG,
                        "Lack of segregation in affected members of a family"),
    AcmgCriterion.BP1: (_B, Evidence.SUPPORTING,
                        "Missense variant in a gene where primarily truncating variants cause disease"),
    AcmgCriterion.BP2: (_B, Evidence.SUPPORTING,
                        "Observed in trans with a pathogenic variant for a fully penetrant dominant disorder"),
    AcmgCriterion.BP3: (_B, Evidence.SUPPORTING,
                        "In-frame indel in a repetitive region without a known function"),
    AcmgCriterion.BP4: (_B, Evidence.SUPPORTING,
                        "Multiple lines of computational evidence suggest no impact"),
    AcmgCriterion.BP5: (_B, Evidence.SUPPORTING,
                        "Variant found in a case with an alternate molecular basis for disease"),
    AcmgCriterion.BP6: (_B, Evidence.SUPPORTING,
                        "Reputable source reports variant as benign"),
    AcmgCriterion.BP7: (_B, Evidence.SUPPORTING,
                        "Synonymous variant with no predicted splice impact"),
}
