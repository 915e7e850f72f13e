"""Substitute known variable values into extracted expressions.

Each identifier token naming another captured variable is replaced with
that variable's value text. Values are used, never replaced forms, so
substitution is a single level deep. A reference that leads back to the
record being substituted (itself, or any cycle through other records'
expressions) is left as written.
"""

import logging
import tokenize

from nbreport.extraction.lexer import tokenize_text
from nbreport.notebook.types import VariableRecord

log = logging.getLogger(__name__)

Span = tuple[int, int]


def _line_starts(text: str) -> list[int]:
    starts = [0]
    for line in text.splitlines(keepends=True):
        starts.append(starts[-1] + len(line))
    return starts


def identifier_spans(expression: str) -> list[tuple[str, Span]] | None:
    """Variable-reference identifiers in expression with character spans.

    Attribute names (after ``.``) and keyword-argument names
    (``f(x=...)``) are not references. Returns None if expression cannot
    be tokenized.
    """
    tokens = tokenize_text(expression)
    if tokens is None:
        return None
    starts = _line_starts(expression)
    code = [t for t in tokens if t.type not in (
        tokenize.NL, tokenize.NEWLINE, tokenize.COMMENT,
        tokenize.INDENT, tokenize.DEDENT, tokenize.ENDMARKER,
    )]

    spans: list[tuple[str, Span]] = []
    for i, tok in enumerate(code):
        if tok.type != tokenize.NAME:
            continue
        prev = code[i - 1] if i > 0 else None
        nxt = code[i + 1] if i + 1 < len(code) else None
        if prev is not None and prev.type == tokenize.OP and prev.string == ".":
            continue
        if (nxt is not None and nxt.type == tokenize.OP and nxt.string == "="
                and prev is not None and prev.string in ("(", ",")):
            continue
        start = starts[tok.start[0] - 1] + tok.start[1]
        end = starts[tok.end[0] - 1] + tok.end[1]
        spans.append((tok.string, (start, end)))
    return spans


def reference_graph(records: dict[str, VariableRecord]) -> dict[str, set[str]]:
    """Map each record name to the record names its expression references."""
    graph: dict[str, set[str]] = {}
    for name, record in records.items():
        refs: set[str] = set()
        if record.expression is not None:
            for ident, _ in identifier_spans(record.expression) or []:
                if ident in records:
                    refs.add(ident)
        graph[name] = refs
    return graph


def reaches(graph: dict[str, set[str]], start: str, target: str) -> bool:
    """True if target is reachable from start (start itself counts)."""
    seen: set[str] = set()
    stack = [start]
    while stack:
        node = stack.pop()
        if node == target:
            return True
        if node in seen:
            continue
        seen.add(node)
        stack.extend(graph.get(node, ()))
    return False


def substitute(
    record: VariableRecord,
    records: dict[str, VariableRecord],
    graph: dict[str, set[str]] | None = None,
) -> str | None:
    """Build the replaced form of one record's expression.

    Args:
        record: Record whose expression is substituted.
        records: All records, keyed by name.
        graph: Precomputed reference_graph(records); built if omitted.

    Returns:
        The replaced text, the expression itself when nothing applies or
        it cannot be tokenized, or None when there is no expression.
    """
    expression = record.expression
    if expression is None:
        return None
    spans = identifier_spans(expression)
    if spans is None:
        return expression
    if graph is None:
        graph = reference_graph(records)

    pieces: list[str] = []
    cursor = 0
    for ident, (start, end) in spans:
        other = records.get(ident)
        if other is None:
            continue
        if reaches(graph, ident, record.name):
            log.debug("Leaving %s unexpanded in %s (self reference)", ident, record.name)
            continue
        pieces.append(expression[cursor:start])
        pieces.append(other.value)
        cursor = end
    pieces.append(expression[cursor:])
    return "".join(pieces)


def substitute_values(records: dict[str, VariableRecord]) -> dict[str, VariableRecord]:
    """Set ``replaced`` on every record that has an expression.

    Args:
        records: Record collection, mutated in place.

    Returns:
        The same record collection.
    """
    graph = reference_graph(records)
    n_changed = 0
    for record in records.values():
        replaced = substitute(record, records, graph)
        if replaced is None:
            continue
        record.replaced = replaced
        if replaced != record.expression:
            n_changed += 1
    log.info("Substitution: %d expressions changed", n_changed)
    return records
