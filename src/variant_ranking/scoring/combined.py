"""Combine variant and phenotype scores into a single gene score."""

import math
from typing import Iterable, NamedTuple

import numpy as np

from variant_ranking.model.priority import PriorityType


class LogisticModel(NamedTuple):
    intercept: float
    phenotype_coefficient: float
    variant_coefficient: float

    def score(self, variant_score: float, phenotype_score: float) -> float:
        logit = (
            self.intercept
            + self.phenotype_coefficient * phenotype_score
            + self.variant_coefficient * variant_score
        )
        return 1.0 / (1.0 + math.exp(-logit))


# Fitted on simulated exomes with known causative variants
LOGISTIC_MODELS = {
    PriorityType.HIPHIVE: LogisticModel(-13.28813, 10.39451, 9.18381),
    PriorityType.EXOMEWALKER: LogisticModel(-8.67972, 219.40082, 8.54374),
    PriorityType.PHENIX: LogisticModel(-11.15659, 13.21835, 4.08667),
}

# First active prioritizer in this order selects the model
MODEL_PRIORITY = (PriorityType.HIPHIVE, PriorityType.EXOMEWALKER, PriorityType.PHENIX)


def select_model(priority_types: Iterable[PriorityType]) -> LogisticModel | None:
    active = set(priority_types)
    for priority_type in MODEL_PRIORITY:
        if priority_type in active:
            return LOGISTIC_MODELS[priority_type]
    return None


def combined_score(
    variant_score: float,
    phenotype_score: float,
    priority_types: Iterable[PriorityType],
) -> float:
    """Combined score in [0, 1], non-decreasing in both input scores.

    Args:
        variant_score: Mean score of the contributing variants
        phenotype_score: Phenotype score of the gene under the mode
        priority_types: Prioritizers run in the analysis

    Returns:
        Logistic model score for the highest-ranked prioritizer, or the mean
        of the two scores when no prioritizer has a model
    """
    model = select_model(priority_types)
    if model is None:
        return (variant_score + phenotype_score) / 2.0
    return model.score(variant_score, phenotype_score)


def combined_scores(
    variant_scores: np.ndarray,
    phenotype_scores: np.ndarray,
    priority_types: Iterable[PriorityType],
) -> np.ndarray:
    """Vectorised ``combined_score`` over paired score arrays."""
    model = select_model(priority_types)
    if model is None:
        return (variant_scores + phenotype_scores) / 2.0
    logit = (
        model.intercept
        + model.phenotype_coefficient * phenotype_scores
        + model.variant_coefficient * variant_scores
    )
    return 1.0 / (1.0 + np.exp(-logit))
