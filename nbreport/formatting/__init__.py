"""LaTeX formatting of expressions, values and unit annotations."""

from nbreport.formatting.latex import (
    brace_subscripts,
    escape_symbols,
    format_to_latex,
    normalize_exponents,
    simplify_unit_block,
    simplify_units,
)

__all__ = [
    "format_to_latex",
    "simplify_units",
    "simplify_unit_block",
    "normalize_exponents",
    "escape_symbols",
    "brace_subscripts",
]
