"""Chromosomal region index and domain-based gene reassignment."""

from variant_ranking.region.index import ChromosomalRegion, GenomicRegion, RegionIndex
from variant_ranking.region.reassign import GeneReassigner, TopologicalDomain

__all__ = [
    "ChromosomalRegion",
    "GenomicRegion",
    "RegionIndex",
    "GeneReassigner",
    "TopologicalDomain",
]
