"""Inheritance-mode compatibility: options, pedigree input and validation, annotation."""

from variant_ranking.inheritance.annotator import InheritanceModeAnnotator
from variant_ranking.inheritance.checker import (
    CallRecord,
    MendelianChecker,
    PedigreeMendelianChecker,
    SampleCalls,
)
from variant_ranking.inheritance.options import InheritanceModeOptions
from variant_ranking.inheritance.pedigree_io import pedigree_from_records, read_ped_file
from variant_ranking.inheritance.validator import PedigreeValidationError, validate_pedigree

__all__ = [
    "InheritanceModeAnnotator",
    "CallRecord",
    "MendelianChecker",
    "PedigreeMendelianChecker",
    "SampleCalls",
    "InheritanceModeOptions",
    "pedigree_from_records",
    "read_ped_file",
    "PedigreeValidationError",
    "validate_pedigree",
]
