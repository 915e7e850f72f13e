"""Per-variable Markdown renderers: scalar expressions, tables, matrices."""

import logging
import re

from nbreport.config.defaults import DEFAULT_CONFIG
from nbreport.config.report import ReportConfig
from nbreport.formatting.latex import format_to_latex
from nbreport.notebook.types import Cell, VariableRecord
from nbreport.reporting.environment import create_markdown_env
from nbreport.reporting.listparse import parse_list

log = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str | None) -> str:
    """Text with all whitespace removed, for equality checks."""
    return _WHITESPACE_RE.sub("", text or "")


def _inline_math(*terms: str) -> str:
    return "$ " + " = ".join(t for t in terms if t) + " $\n\n"


def _clean_term(text: str, config: ReportConfig) -> str:
    """Drop the auto-scale marker and empty unit brackets from a term."""
    return (
        text.replace(config.auto_scale_marker, "")
        .replace("[]", "")
        .replace("**", "^")
        .strip()
    )


def render_expression(record: VariableRecord, config: ReportConfig = DEFAULT_CONFIG) -> str:
    """Render a scalar variable as one inline equation.

    The full chain is ``name = expression = replaced = value``. The
    replaced term is dropped when it formats the same as the expression,
    and the expression is dropped too when it is absent, a unit
    constructor call, or the same as the value.
    """
    symbols = config.symbols
    name = format_to_latex(record.name, symbols)
    value = format_to_latex(record.value, symbols).replace("[]", "").strip()

    raw_expr = (record.expression or "").replace(config.true_value_marker, "")
    raw_repl = (record.replaced or "").replace(config.true_value_marker, "")

    if any(ctor in raw_expr for ctor in config.unit_constructors):
        return _inline_math(name, value)

    expr = format_to_latex(raw_expr, symbols)
    repl = format_to_latex(raw_repl, symbols)

    if collapse_whitespace(expr) == collapse_whitespace(repl):
        expr = _clean_term(expr, config)
        if collapse_whitespace(expr) == collapse_whitespace(value):
            return _inline_math(name, value)
        return _inline_math(name, expr, value)

    return _inline_math(
        name, _clean_term(expr, config), _clean_term(repl, config), value
    )


def _table_cell(entries: list, index: int, config: ReportConfig) -> str:
    if index >= len(entries):
        return ""
    entry = entries[index]
    if entry is None or entry == "":
        return ""
    return format_to_latex(str(entry), config.symbols)


def render_table(record: VariableRecord, config: ReportConfig = DEFAULT_CONFIG) -> str:
    """Render a table variable: one row per table item.

    Value, expression and replaced are each parsed into ordered entries
    and indexed by row position. Rows past the end of a parsed list get
    an empty cell.
    """
    values = parse_list(record.value)
    expressions = parse_list(record.expression)
    replaced = parse_list(record.replaced)

    rows = []
    for i, item in enumerate(record.table_items or []):
        rows.append({
            "item": format_to_latex(item, config.symbols),
            "expression": _table_cell(expressions, i, config),
            "replaced": _table_cell(replaced, i, config),
            "value": _table_cell(values, i, config),
        })

    template = create_markdown_env().get_template("table.md.j2")
    return template.render(name=format_to_latex(record.name, config.symbols), rows=rows)


def render_matrix(record: VariableRecord, config: ReportConfig = DEFAULT_CONFIG) -> str:
    """Render a matrix variable as one display equation.

    Replaced and latex_value are only shown when their
    whitespace-collapsed text differs from every other shown term.
    """
    output = f"$$ {format_to_latex(record.name, config.symbols)}"

    clean_expr = collapse_whitespace(record.expression)
    clean_repl = collapse_whitespace(record.replaced)
    clean_latex = collapse_whitespace(record.latex_value)

    if record.expression:
        output += f" = {record.expression}"
    if record.replaced and clean_repl != clean_expr and clean_repl != clean_latex:
        output += f" = {record.replaced}"
    if record.latex_value and clean_latex != clean_expr and clean_latex != clean_repl:
        output += f" = {record.latex_value}"

    return output + " $$\n\n"


def render_markdown(cell: Cell) -> str:
    """Prose cell copied through verbatim, followed by a blank line."""
    if not cell.source.strip():
        return ""
    return cell.source + "\n\n"


def render_record(record: VariableRecord, config: ReportConfig = DEFAULT_CONFIG) -> str:
    """Pick the renderer for a record and run it.

    Tables win over matrices, matrices over scalars. A renderer failure
    degrades to a plain ``name = value`` line instead of aborting the
    report.
    """
    try:
        if record.table_items is not None:
            return render_table(record, config)
        if record.latex_value is not None:
            return render_matrix(record, config)
        return render_expression(record, config)
    except Exception as e:
        log.warning("Failed to render %s, falling back to its value: %s", record.name, e)
        return _inline_math(
            format_to_latex(record.name, config.symbols),
            format_to_latex(record.value, config.symbols),
        )
