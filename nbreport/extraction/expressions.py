"""Recover the source expression behind each captured variable."""

import keyword
import logging
import tokenize
from dataclasses import dataclass

from nbreport.extraction.lexer import Statement, split_statements
from nbreport.notebook.types import Cell, VariableRecord

log = logging.getLogger(__name__)

_BRACKETS_OPEN = "([{"
_BRACKETS_CLOSE = ")]}"


@dataclass(frozen=True, slots=True)
class Assignment:
    """A top-level ``name = rhs`` statement found in a code cell."""

    name: str
    rhs: str
    cell_index: int
    line: int
    statement: Statement


def _top_level_ops(tokens: list[tokenize.TokenInfo], start: int = 0) -> list[int]:
    """Indexes of OP tokens outside any bracket, from start onward."""
    indexes = []
    depth = 0
    for i in range(start, len(tokens)):
        tok = tokens[i]
        if tok.type != tokenize.OP:
            continue
        if tok.string in _BRACKETS_OPEN:
            depth += 1
        elif tok.string in _BRACKETS_CLOSE:
            depth = max(depth - 1, 0)
        elif depth == 0:
            indexes.append(i)
    return indexes


def parse_assignment(statement: Statement) -> tuple[str, str] | None:
    """Return (name, rhs text) if statement is a plain top-level assignment.

    Accepts ``name = rhs`` and ``name: annotation = rhs``, including a
    lambda with default arguments on the right. Chained, tuple,
    attribute, subscript and augmented targets return None.
    """
    tokens = statement.tokens
    if statement.depth != 0 or len(tokens) < 3:
        return None
    target = tokens[0]
    if target.type != tokenize.NAME or keyword.iskeyword(target.string):
        return None

    second = tokens[1]
    if second.type != tokenize.OP or second.string not in ("=", ":"):
        return None

    # "=" after a lambda keyword is a parameter default
    end = next(
        (i for i, tok in enumerate(tokens)
         if tok.type == tokenize.NAME and tok.string == "lambda"),
        len(tokens),
    )
    equals = [i for i in _top_level_ops(tokens[:end], 1) if tokens[i].string == "="]
    if len(equals) != 1:
        return None
    eq = equals[0]
    if second.string == "=" and eq != 1:
        return None
    if eq + 1 >= len(tokens):
        return None

    rhs = statement.segment(tokens[eq + 1].start, tokens[-1].end).strip()
    if not rhs:
        return None
    return target.string, rhs


def find_assignments(cells: list[Cell]) -> list[Assignment]:
    """All top-level assignments across code cells, in document order."""
    found: list[Assignment] = []
    for cell_index, cell in enumerate(cells):
        if cell.kind != "code":
            continue
        for statement in split_statements(cell.source):
            parsed = parse_assignment(statement)
            if parsed is None:
                continue
            name, rhs = parsed
            found.append(Assignment(
                name=name,
                rhs=rhs,
                cell_index=cell_index,
                line=statement.line,
                statement=statement,
            ))
    return found


def extract_expressions(
    records: dict[str, VariableRecord], cells: list[Cell]
) -> dict[str, VariableRecord]:
    """Attach the last assignment's right-hand side to each record.

    Records with no matching assignment keep ``expression`` unset.

    Args:
        records: Record collection, mutated in place.
        cells: Ordered notebook cells.

    Returns:
        The same record collection.
    """
    latest: dict[str, Assignment] = {}
    for assignment in find_assignments(cells):
        if assignment.name in records:
            latest[assignment.name] = assignment

    for name, assignment in latest.items():
        record = records[name]
        record.expression = assignment.rhs
        record.cell_index = assignment.cell_index
        record.line = assignment.line

    log.info(
        "Expressions: %d of %d variables matched an assignment",
        len(latest), len(records),
    )
    return records
