"""Classification record for one contributing variant."""

from pydantic import BaseModel, ConfigDict

from variant_ranking.acmg.classifier import AcmgClassification
from variant_ranking.acmg.evidence import AcmgEvidence
from variant_ranking.model.inheritance import ModeOfInheritance
from variant_ranking.model.priority import Disease
from variant_ranking.model.variant import CandidateVariant


class AcmgAssignment(BaseModel):
    """ACMG evidence and classification of a variant for a gene and mode.

    Attributes:
        variant: The classified variant
        gene_symbol: Gene the variant was evaluated against
        mode: Mode of inheritance of the gene score
        disease: Best matching known disease compatible with the mode, if any
        evidence: Met criteria
        classification: Resulting ACMG classification
    """

    model_config = ConfigDict(frozen=True)

    variant: CandidateVariant
    gene_symbol: str
    mode: ModeOfInheritance
    disease: Disease | None = None
    evidence: AcmgEvidence
    classification: AcmgClassification
