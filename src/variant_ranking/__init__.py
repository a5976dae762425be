"""Variant and gene ranking: inheritance-aware scoring and ACMG classification."""

__version__ = "0.1.0"
