"""ACMG/AMP 2015 combining rules.

The rules are data: each classification lists the minimum weight counts
that satisfy it, and a tally satisfies a rule when it meets every count.
"""

from enum import Enum

import structlog

from variant_ranking.acmg.criteria import Evidence, Impact
from variant_ranking.acmg.evidence import AcmgEvidence

logger = structlog.get_logger(__name__)


class AcmgClassification(str, Enum):
    PATHOGENIC = "pathogenic"
    LIKELY_PATHOGENIC = "likely_pathogenic"
    UNCERTAIN_SIGNIFICANCE = "uncertain_significance"
    LIKELY_BENIGN = "likely_benign"
    BENIGN = "benign"


_VS = Evidence.VERY_STRONG
_S = Evidence.STRONG
_M = Evidence.MODERATE
_P = Evidence.SUPPORTING
_SA = Evidence.STAND_ALONE

# Table 5, Richards et al. 2015
PATHOGENIC_RULES = {
    AcmgClassification.PATHOGENIC: (
        {_VS: 1, _S: 1},
        {_VS: 1, _M: 2},
        {_VS: 1, _M: 1, _P: 1},
        {_VS: 1, _P: 2},
        {_S: 2},
        {_S: 1, _M: 3},
        {_S: 1, _M: 2, _P: 2},
        {_S: 1, _M: 1, _P: 4},
    ),
    AcmgClassification.LIKELY_PATHOGENIC: (
        {_VS: 1, _M: 1},
        {_S: 1, _M: 1},
        {_S: 1, _P: 2},
        {_M: 3},
        {_M: 2, _P: 2},
        {_M: 1, _P: 4},
    ),
}

BENIGN_RULES = {
    AcmgClassification.BENIGN: (
        {_SA: 1},
        {_S: 2},
    ),
    AcmgClassification.LIKELY_BENIGN: (
        {_S: 1, _P: 1},
        {_P: 2},
    ),
}


def _meets(counts, rule: dict) -> bool:
    return all(counts[weight] >= minimum for weight, minimum in rule.items())


def _strongest_met(counts, rules: dict) -> AcmgClassification | None:
    for classification, alternatives in rules.items():
        if any(_meets(counts, rule) for rule in alternatives):
            return classification
    return None


def classify(evidence: AcmgEvidence) -> AcmgClassification:
    """Reduce met criteria to a single classification.

    Pathogenic and benign tallies are checked independently; the strongest
    classification met on each side is taken. If both sides, or neither,
    reach a classification the result is uncertain significance.

    Args:
        evidence: Met criteria with their applied weights

    Returns:
        One of the five ACMG classifications
    """
    pathogenic = _strongest_met(evidence.counts(Impact.PATHOGENIC), PATHOGENIC_RULES)
    benign = _strongest_met(evidence.counts(Impact.BENIGN), BENIGN_RULES)

    if pathogenic is not None and benign is not None:
        logger.debug(
            "acmg_conflicting_evidence",
            evidence=str(evidence),
            pathogenic=pathogenic.value,
            benign=benign.value,
        )
        return AcmgClassification.UNCERTAIN_SIGNIFICANCE
    if pathogenic is not None:
        return pathogenic
    if benign is not None:
        return benign
    return AcmgClassification.UNCERTAIN_SIGNIFICANCE
