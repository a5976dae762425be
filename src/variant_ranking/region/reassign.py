"""Reassign regulatory variants to the most phenotypically relevant gene of their domain."""

import structlog
from pydantic import Field

from variant_ranking.model.gene import GeneCandidate
from variant_ranking.model.priority import PriorityType
from variant_ranking.model.variant import CandidateVariant, VariantEffect
from variant_ranking.region.index import GenomicRegion, RegionIndex

logger = structlog.get_logger(__name__)


class TopologicalDomain(GenomicRegion):
    """A topologically associating domain and the genes inside it.

    Attributes:
        genes: Gene symbol to gene identifier for genes in the domain
    """

    genes: dict[str, str] = Field(default_factory=dict)


class GeneReassigner:
    """Moves regulatory-region variants to the best scoring gene in their domain.

    Args:
        priority_type: Prioritizer whose score ranks the candidate genes
        genes: Gene candidates of the analysis
        domain_index: Index of topological domains
    """

    def __init__(
        self,
        priority_type: PriorityType,
        genes: list[GeneCandidate],
        domain_index: RegionIndex[TopologicalDomain],
    ):
        self.priority_type = priority_type
        self.genes = {gene.gene_symbol: gene for gene in genes}
        self.domain_index = domain_index

    def _priority_score(self, gene: GeneCandidate | None) -> float:
        if gene is None:
            return 0.0
        result = gene.priority_result(self.priority_type)
        return result.score if result is not None else 0.0

    def best_gene_for(self, variant: CandidateVariant) -> GeneCandidate | None:
        """Gene in the variant's domains scoring strictly higher than its current gene.

        Returns None when the variant is not regulatory or nowhere scores better.
        """
        if variant.effect != VariantEffect.REGULATORY_REGION_VARIANT:
            return None
        best_score = self._priority_score(self.genes.get(variant.gene_symbol))
        best_gene = None
        for domain in self.domain_index.regions_containing_variant(variant):
            for symbol in domain.genes:
                gene = self.genes.get(symbol)
                score = self._priority_score(gene)
                if score > best_score:
                    best_score = score
                    best_gene = gene
        return best_gene

    def reassign(self) -> int:
        """Reassign regulatory variants across all genes.

        Moved variants take the new gene's symbol and identifier, keep only
        transcript annotations of the new gene and move to its variant list.

        Returns:
            Number of variants reassigned
        """
        moves = []
        for gene in self.genes.values():
            for variant in gene.variants:
                target = self.best_gene_for(variant)
                if target is not None and target is not gene:
                    moves.append((variant, gene, target))

        for variant, source, target in moves:
            logger.debug(
                "variant_reassigned",
                variant=variant.key,
                from_gene=source.gene_symbol,
                to_gene=target.gene_symbol,
            )
            variant.gene_symbol = target.gene_symbol
            variant.gene_id = target.gene_id
            variant.annotations = [
                annotation
                for annotation in variant.annotations
                if annotation.gene_symbol == target.gene_symbol
            ]
            source.variants = [v for v in source.variants if v is not variant]
            target.variants.append(variant)

        if moves:
            logger.info("regulatory_variants_reassigned", count=len(moves))
        return len(moves)
