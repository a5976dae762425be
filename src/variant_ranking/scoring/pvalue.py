"""Bootstrap null population of combined scores and p-value lookup."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Sequence

import numpy as np
import structlog

from variant_ranking.model.priority import PriorityType
from variant_ranking.scoring.combined import combined_scores

logger = structlog.get_logger(__name__)

DEFAULT_NULL_SIZE = 500_000
DEFAULT_CHUNK_SIZE = 50_000


def _draw_chunk(
    seed_sequence: np.random.SeedSequence,
    size: int,
    phenotype_scores: np.ndarray,
    priority_types: frozenset[PriorityType],
) -> np.ndarray:
    rng = np.random.default_rng(seed_sequence)
    phenotypes = rng.choice(phenotype_scores, size=size, replace=True)
    variants = rng.random(size)
    return combined_scores(variants, phenotypes, priority_types)


class NullDistribution:
    """Sorted combined scores expected by chance.

    Built once per run before genes are scored and read-only afterwards, so
    it can be shared by all scoring workers.
    """

    def __init__(self, scores: Iterable[float] | np.ndarray = ()):
        self._scores = np.sort(np.asarray(scores, dtype=np.float64))

    @classmethod
    def empty(cls) -> "NullDistribution":
        return cls()

    @classmethod
    def build(
        cls,
        phenotype_scores: Sequence[float],
        priority_types: Iterable[PriorityType],
        size: int = DEFAULT_NULL_SIZE,
        seed: int | None = None,
        workers: int | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> "NullDistribution":
        """Draw ``size`` combined scores from resampled phenotype scores.

        Each draw pairs a phenotype score sampled with replacement from
        ``phenotype_scores`` with a uniform variant score in [0, 1), combined
        with the same model used for the genes. Chunks are drawn in parallel
        from independent child seeds, so a fixed ``seed`` gives the same
        population whatever the number of workers.

        Args:
            phenotype_scores: Phenotype scores of the analysed genes
            priority_types: Prioritizers run in the analysis
            size: Number of null scores
            seed: Seed for reproducible populations (random when None)
            workers: Worker threads (executor default when None)
            chunk_size: Draws per task

        Returns:
            The null distribution, empty when there are no phenotype scores
        """
        if size < 0:
            raise ValueError(f"Null population size must be non-negative, got {size}")
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        phenotypes = np.asarray(list(phenotype_scores), dtype=np.float64)
        if size == 0 or phenotypes.size == 0:
            logger.warning("null_distribution_empty", size=size, phenotype_scores=int(phenotypes.size))
            return cls.empty()

        priority_types = frozenset(priority_types)
        chunk_sizes = [chunk_size] * (size // chunk_size)
        if size % chunk_size:
            chunk_sizes.append(size % chunk_size)
        child_seeds = np.random.SeedSequence(seed).spawn(len(chunk_sizes))

        chunks: list[np.ndarray | None] = [None] * len(chunk_sizes)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(_draw_chunk, child, n, phenotypes, priority_types): i
                for i, (child, n) in enumerate(zip(child_seeds, chunk_sizes))
            }
            for future in as_completed(future_to_index):
                chunks[future_to_index[future]] = future.result()

        distribution = cls(np.concatenate(chunks))
        logger.info(
            "null_distribution_built",
            size=distribution.size,
            chunks=len(chunk_sizes),
            seeded=seed is not None,
            prioritisers=sorted(p.value for p in priority_types),
        )
        return distribution

    @property
    def size(self) -> int:
        return int(self._scores.size)

    def __len__(self) -> int:
        return self.size

    @property
    def scores(self) -> np.ndarray:
        view = self._scores.view()
        view.flags.writeable = False
        return view

    def p_value(self, combined_score: float) -> float:
        """Proportion of null scores at least as high as ``combined_score``.

        Computed as (1 + count(null >= x)) / N, capped at 1. Returns exactly
        1.0 for a score of 0 or an empty population.
        """
        if combined_score == 0 or self.size == 0:
            return 1.0
        at_least = self.size - int(np.searchsorted(self._scores, combined_score, side="left"))
        return min(1.0, (1 + at_least) / self.size)
