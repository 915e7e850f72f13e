"""Scan source for table directives naming the rows of a variable.

A table directive is a comment holding the configured keyword, a colon
and a bracketed label list::

    # table: ["Dead load", "Live load", "Total"]
    loads = [g * area, q * area, (g + q) * area]

It annotates the next top-level statement in the same cell, which must be
an assignment; a directive at the end of the assignment line itself works
too. Malformed directives are skipped.
"""

import logging
import re
from functools import lru_cache

from nbreport.config.defaults import DEFAULT_CONFIG
from nbreport.extraction.expressions import parse_assignment
from nbreport.extraction.lexer import split_statements
from nbreport.notebook.types import Cell, VariableRecord
from nbreport.reporting.listparse import (
    parse_json_list,
    parse_literal_list,
    parse_loose_list,
)

log = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def directive_pattern(keyword: str) -> re.Pattern:
    """Regex matching ``# <keyword>: <labels>`` comments."""
    return re.compile(rf"^#\s*{re.escape(keyword)}\s*:\s*(.*?)\s*$", re.IGNORECASE)


def parse_directive(comment: str, keyword: str = DEFAULT_CONFIG.table_directive) -> list[str] | None:
    """Ordered row labels of a directive comment, or None if not one.

    The label list must be bracketed. Strict JSON and Python literal
    lists are tried before the loose split.
    """
    match = directive_pattern(keyword).match(comment.strip())
    if match is None:
        return None
    body = match.group(1)
    if not body.startswith("["):
        log.debug("Ignoring table directive without a bracketed list: %r", comment)
        return None
    for parser in (parse_json_list, parse_literal_list, parse_loose_list):
        labels = parser(body)
        if labels is not None:
            break
    if not labels:
        log.debug("Ignoring table directive with no labels: %r", comment)
        return None
    return [str(label).strip() for label in labels]


def find_table_commands(
    records: dict[str, VariableRecord],
    cells: list[Cell],
    keyword: str = DEFAULT_CONFIG.table_directive,
) -> dict[str, VariableRecord]:
    """Attach ``table_items`` to records annotated by a table directive.

    The last directive in document order wins for a given name.

    Args:
        records: Record collection, mutated in place.
        cells: Ordered notebook cells.
        keyword: Directive keyword (``ReportConfig.table_directive``).

    Returns:
        The same record collection.
    """
    found: dict[str, list[str]] = {}
    for cell in cells:
        if cell.kind != "code":
            continue
        for statement in split_statements(cell.source):
            comments = statement.leading_comments + statement.trailing_comments
            labels = None
            for comment in comments:
                parsed = parse_directive(comment, keyword)
                if parsed is not None:
                    labels = parsed
            if labels is None:
                continue
            assignment = parse_assignment(statement)
            if assignment is None:
                log.debug("Table directive on line %d is not followed by an assignment",
                          statement.line)
                continue
            name = assignment[0]
            if name in records:
                found[name] = labels

    for name, labels in found.items():
        records[name].table_items = labels
    log.info("Tables: %d directives matched", len(found))
    return records
