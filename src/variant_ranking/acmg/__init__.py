"""ACMG/AMP variant classification: criteria, evidence and combining rules."""

from variant_ranking.acmg.criteria import AcmgCriterion, Evidence, Impact
from variant_ranking.acmg.evidence import AcmgEvidence
from variant_ranking.acmg.classifier import AcmgClassification, classify
from variant_ranking.acmg.assignment import AcmgAssignment
from variant_ranking.acmg.assigner import AcmgAssignmentCalculator, AcmgEvidenceAssigner

__all__ = [
    "AcmgCriterion",
    "Evidence",
    "Impact",
    "AcmgEvidence",
    "AcmgClassification",
    "classify",
    "AcmgAssignment",
    "AcmgAssignmentCalculator",
    "AcmgEvidenceAssigner",
]
