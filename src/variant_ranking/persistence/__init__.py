"""Persistence of ranking results and run provenance."""

from variant_ranking.persistence.duckdb_store import ResultStore
from variant_ranking.persistence.provenance import RunProvenance

__all__ = ["ResultStore", "RunProvenance"]
