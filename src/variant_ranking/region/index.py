"""Per-chromosome interval index for point-in-region queries.

Regions are 1-based and fully closed on input. They are stored in the trees
as half-open 0-based intervals: begin = start - 1, end = end.
"""

from typing import Generic, Iterable, Protocol, TypeVar

from intervaltree import IntervalTree
from pydantic import BaseModel, ConfigDict, Field, model_validator

from variant_ranking.model.variant import contig_to_chromosome


class ChromosomalRegion(Protocol):
    contig: str
    start: int
    end: int


R = TypeVar("R", bound=ChromosomalRegion)


class GenomicRegion(BaseModel):
    """A 1-based, fully closed region of a chromosome."""

    model_config = ConfigDict(frozen=True)

    contig: str
    start: int = Field(..., ge=1)
    end: int

    @model_validator(mode="after")
    def check_bounds(self) -> "GenomicRegion":
        if self.end < self.start:
            raise ValueError(f"Region end {self.end} is before start {self.start}")
        return self


def _chromosome_key(contig: str) -> int | str:
    chromosome = contig_to_chromosome(contig)
    return chromosome if chromosome else contig


class RegionIndex(Generic[R]):
    """Immutable index of regions answering which regions cover a position.

    Contig names are normalised, so ``chr1`` and ``1`` address the same tree.
    The order of returned regions is not significant.
    """

    def __init__(self, regions: Iterable[R] = ()):
        trees: dict[int | str, IntervalTree] = {}
        size = 0
        for region in regions:
            if region.end < region.start:
                raise ValueError(
                    f"Region {region.contig}:{region.start}-{region.end} ends before it starts"
                )
            key = _chromosome_key(region.contig)
            trees.setdefault(key, IntervalTree()).addi(region.start - 1, region.end, region)
            size += 1
        self._trees = trees
        self._size = size

    @classmethod
    def empty(cls) -> "RegionIndex":
        return cls()

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def regions_containing_position(self, contig: str, position: int) -> list[R]:
        """Regions covering a 1-based position; empty if the contig is not indexed."""
        tree = self._trees.get(_chromosome_key(contig))
        if tree is None:
            return []
        return [interval.data for interval in tree.at(position - 1)]

    def regions_overlapping(self, contig: str, start: int, end: int) -> list[R]:
        """Regions overlapping the 1-based closed range ``start``-``end``."""
        tree = self._trees.get(_chromosome_key(contig))
        if tree is None:
            return []
        return [interval.data for interval in tree.overlap(start - 1, end)]

    def regions_containing_variant(self, variant) -> list[R]:
        return self.regions_containing_position(variant.contig, variant.start)
