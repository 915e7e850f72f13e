"""Detect matrix-shaped values and precompute their LaTeX form."""

import logging
import numbers

import numpy as np

from nbreport.notebook.types import VariableRecord
from nbreport.reporting.listparse import parse_json_list, parse_literal_list

log = logging.getLogger(__name__)


def _is_number(leaf: object) -> bool:
    return isinstance(leaf, numbers.Real) and not isinstance(leaf, bool)


def parse_matrix(value: str) -> list[list[numbers.Real]] | None:
    """Parse a serialized value as a rectangular numeric nested list.

    Returns None for anything that is not a non-empty sequence of
    non-empty, equal-width sequences of real numbers.
    """
    rows = parse_json_list(value)
    if rows is None:
        rows = parse_literal_list(value)
    if not rows:
        return None
    if not all(isinstance(row, (list, tuple)) and len(row) > 0 for row in rows):
        return None
    if not all(_is_number(leaf) for row in rows for leaf in row):
        return None
    try:
        array = np.asarray(rows, dtype=float)
    except ValueError:
        # ragged rows
        return None
    if array.ndim != 2:
        return None
    return [list(row) for row in rows]


def matrix_to_latex(rows: list[list[numbers.Real]]) -> str:
    """Render rows as a bmatrix block, ``&`` between entries."""
    body = r" \\ ".join(" & ".join(str(leaf) for leaf in row) for row in rows)
    return rf"\begin{{bmatrix}} {body} \end{{bmatrix}}"


def classify_matrix(value: str) -> str | None:
    """LaTeX matrix form of value, or None if value is not a matrix."""
    rows = parse_matrix(value)
    if rows is None:
        return None
    return matrix_to_latex(rows)


def detect_matrices(records: dict[str, VariableRecord]) -> dict[str, VariableRecord]:
    """Set ``latex_value`` on every record whose value is a numeric matrix.

    Args:
        records: Record collection, mutated in place.

    Returns:
        The same record collection.
    """
    n_matrices = 0
    for record in records.values():
        latex = classify_matrix(record.value)
        if latex is None:
            continue
        record.latex_value = latex
        n_matrices += 1
        log.debug("Classified %s as matrix", record.name)
    log.info("Matrices: %d of %d variables", n_matrices, len(records))
    return records
