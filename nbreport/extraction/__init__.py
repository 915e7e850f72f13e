"""Pipeline stages that enrich variable records from notebook source.

Stages run in this order, each mutating and returning the record mapping:
extract_expressions -> detect_matrices -> substitute_values ->
find_table_commands.
"""

from nbreport.extraction.expressions import extract_expressions, find_assignments
from nbreport.extraction.matrices import classify_matrix, detect_matrices
from nbreport.extraction.substitution import substitute, substitute_values
from nbreport.extraction.tables import find_table_commands, parse_directive

__all__ = [
    "extract_expressions",
    "find_assignments",
    "classify_matrix",
    "detect_matrices",
    "substitute",
    "substitute_values",
    "find_table_commands",
    "parse_directive",
]
