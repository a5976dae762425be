"""Sets of met ACMG criteria and their Bayesian point totals."""

from collections import Counter
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from variant_ranking.acmg.criteria import AcmgCriterion, Evidence, Impact

# Tavtigian et al. 2018 Bayesian adaptation of the ACMG/AMP framework
PRIOR_PROBABILITY = 0.1
ODDS_PATH_VERY_STRONG = 350.0
ODDS_PATH_SUPPORTING = ODDS_PATH_VERY_STRONG ** (1 / 8)

EVIDENCE_POINTS = {
    Evidence.SUPPORTING: 1,
    Evidence.MODERATE: 2,
    Evidence.STRONG: 4,
    Evidence.VERY_STRONG: 8,
    Evidence.STAND_ALONE: 8,
}


class AcmgEvidence(BaseModel):
    """Met criteria, each with the weight it was applied at.

    A criterion may be applied at a weight other than its default, for
    example PVS1 downgraded to strong. Ordering carries no meaning.
    """

    model_config = ConfigDict(frozen=True)

    evidence: dict[AcmgCriterion, Evidence] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> "AcmgEvidence":
        return cls()

    @classmethod
    def of(cls, *criteria: AcmgCriterion) -> "AcmgEvidence":
        """Evidence made of ``criteria`` at their default weights."""
        return cls(evidence={criterion: criterion.evidence for criterion in criteria})

    @classmethod
    def from_items(cls, items: Iterable[tuple[AcmgCriterion, Evidence]]) -> "AcmgEvidence":
        return cls(evidence=dict(items))

    @property
    def is_empty(self) -> bool:
        return not self.evidence

    @property
    def criteria(self) -> set[AcmgCriterion]:
        return set(self.evidence)

    def has(self, criterion: AcmgCriterion) -> bool:
        return criterion in self.evidence

    def evidence_for(self, criterion: AcmgCriterion) -> Evidence | None:
        return self.evidence.get(criterion)

    def counts(self, impact: Impact) -> Counter:
        """Number of met criteria of the given direction, per weight."""
        return Counter(
            weight for criterion, weight in self.evidence.items() if criterion.impact == impact
        )

    # Convenience tallies matching the usual ACMG shorthand

    @property
    def pvs(self) -> int:
        return self.counts(Impact.PATHOGENIC)[Evidence.VERY_STRONG]

    @property
    def ps(self) -> int:
        return self.counts(Impact.PATHOGENIC)[Evidence.STRONG]

    @property
    def pm(self) -> int:
        return self.counts(Impact.PATHOGENIC)[Evidence.MODERATE]

    @property
    def pp(self) -> int:
        return self.counts(Impact.PATHOGENIC)[Evidence.SUPPORTING]

    @property
    def ba(self) -> int:
        return self.counts(Impact.BENIGN)[Evidence.STAND_ALONE]

    @property
    def bs(self) -> int:
        return self.counts(Impact.BENIGN)[Evidence.STRONG]

    @property
    def bp(self) -> int:
        return self.counts(Impact.BENIGN)[Evidence.SUPPORTING]

    def points(self) -> int:
        """Pathogenic minus benign points (1 supporting, 2 moderate, 4 strong, 8 very strong)."""
        total = 0
        for criterion, weight in self.evidence.items():
            value = EVIDENCE_POINTS[weight]
            total += value if criterion.is_pathogenic else -value
        return total

    def posterior_probability(self) -> float:
        """Posterior probability of pathogenicity for the point total."""
        odds = ODDS_PATH_SUPPORTING ** self.points()
        return (odds * PRIOR_PROBABILITY) / ((odds - 1) * PRIOR_PROBABILITY + 1)

    def __str__(self) -> str:
        parts = []
        for criterion in sorted(self.evidence, key=lambda c: c.value):
            weight = self.evidence[criterion]
            if weight == criterion.evidence:
                parts.append(criterion.value)
            else:
                parts.append(f"{criterion.value}_{weight.name.title().replace('_', '')}")
        return "[" + ", ".join(parts) + "]"
