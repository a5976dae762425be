"""Shared fixtures for analysis and CLI tests."""

import pytest
import yaml


@pytest.fixture
def trio_analysis() -> dict:
    """De novo stop-gain in FBN1 plus an inherited missense in GENE2."""
    return {
        "proband": "child",
        "samples": ["child", "dad", "mum"],
        "pedigree": [
            {"id": "child", "family_id": "F1", "father_id": "dad", "mother_id": "mum",
             "sex": "female", "status": "affected"},
            {"id": "dad", "family_id": "F1", "sex": "male", "status": "unaffected"},
            {"id": "mum", "family_id": "F1", "sex": "female", "status": "unaffected"},
        ],
        "genes": [
            {
                "gene_symbol": "FBN1",
                "gene_id": "HGNC:3603",
                "priority_results": [{
                    "priority_type": "HIPHIVE",
                    "score": 0.9,
                    "human_score": 0.85,
                    "disease_matches": {"AD": [{
                        "disease": {"disease_id": "OMIM:154700", "name": "Marfan syndrome",
                                    "inheritance": "AUTOSOMAL_DOMINANT"},
                        "score": 0.85,
                    }]},
                }],
                "variants": [{
                    "contig": "15", "start": 48700000, "ref": "G", "alt": "A",
                    "gene_symbol": "FBN1", "effect": "stop_gained",
                    "genotypes": {"child": "0/1", "dad": "0/0", "mum": "0/0"},
                }],
            },
            {
                "gene_symbol": "GENE2",
                "priority_results": [{"priority_type": "HIPHIVE", "score": 0.2}],
                "variants": [{
                    "contig": "2", "start": 1000, "ref": "C", "alt": "T",
                    "gene_symbol": "GENE2", "effect": "missense_variant",
                    "frequency": {"frequencies": {"gnomAD": 0.05}},
                    "genotypes": {"child": "0/1", "dad": "0/1", "mum": "0/0"},
                }],
            },
        ],
    }


@pytest.fixture
def analysis_file(tmp_path, trio_analysis):
    """Trio analysis written as YAML."""
    path = tmp_path / "analysis.yaml"
    path.write_text(yaml.safe_dump(trio_analysis))
    return path
