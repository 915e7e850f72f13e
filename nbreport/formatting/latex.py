"""Unit simplification and LaTeX escaping for report math.

format_to_latex runs four pure text transforms in a fixed order:

1. simplify_units      ``[cm*cm/s]`` -> ``[cm^{2} / s]``
2. normalize_exponents ``x**-1``     -> ``x^{-1}``
3. escape_symbols      ``alpha``     -> ``\\alpha``
4. brace_subscripts    ``v_max``     -> ``v_{max}``

Units go first so that their factors are collapsed before the exponent and
subscript passes see them. Symbol escaping follows exponent handling so an
exponent is never mistaken for a symbol name. Every step leaves its own
output unchanged when applied again.
"""

import re
from functools import lru_cache

from nbreport.config.report import SYMBOLS

UNIT_SEPARATOR = r" \cdot "

_UNIT_SPAN_RE = re.compile(r"\[(.*?)\]")
_SUBSCRIPT_RE = re.compile(r"_(\\?[a-zA-Z0-9]+)")
_EXPONENT_RE = re.compile(r"\^([a-zA-Z0-9.\-]+)")


def simplify_unit_block(text: str) -> str:
    """Collapse repeated ``*``-separated factors into powers.

    Factors keep their first-occurrence order, e.g. ``m*s*m`` becomes
    ``m^{2} \\cdot s``. Empty factors are dropped.
    """
    parts = [p.strip() for p in text.split("*")]
    counts: dict[str, int] = {}
    for part in parts:
        if part:
            counts[part] = counts.get(part, 0) + 1

    factors = []
    for unit, count in counts.items():
        unit = _SUBSCRIPT_RE.sub(r"_{\1}", unit)
        factors.append(f"{unit}^{{{count}}}" if count > 1 else unit)
    return UNIT_SEPARATOR.join(factors)


def _simplify_unit_span(match: re.Match) -> str:
    content = match.group(1)
    if "/" in content:
        top, bottom = content.split("/", 1)
        top = simplify_unit_block(top) or "1"
        return f"[{top} / {simplify_unit_block(bottom)}]"
    return f"[{simplify_unit_block(content)}]"


def simplify_units(text: str) -> str:
    """Simplify every bracketed unit span in text."""
    if not text:
        return ""
    return _UNIT_SPAN_RE.sub(_simplify_unit_span, text)


def normalize_exponents(text: str) -> str:
    """Turn ``**`` into ``^`` and brace the exponent run that follows."""
    return _EXPONENT_RE.sub(r"^{\1}", text.replace("**", "^"))


@lru_cache(maxsize=None)
def symbol_pattern(symbols: tuple[str, ...]) -> re.Pattern:
    """Compiled whole-word matcher for symbols, longest names first.

    Computed once per symbol tuple. Alternation order makes the longest
    name win at any position. A name right after a subscript underscore
    is still matched, a name right after a backslash is not.
    """
    ordered = sorted(set(symbols), key=lambda s: (-len(s), s))
    alternation = "|".join(re.escape(s) for s in ordered)
    return re.compile(rf"(?:(?<=_)|(?<![\\\w]))(?:{alternation})(?!\w)")


def escape_symbols(text: str, symbols: tuple[str, ...] = SYMBOLS) -> str:
    """Prefix every whole-word symbol name with a backslash."""
    if not symbols:
        return text
    return symbol_pattern(tuple(symbols)).sub(lambda m: "\\" + m.group(0), text)


def brace_subscripts(text: str) -> str:
    """Wrap every subscript token in braces, escaped symbols included."""
    return _SUBSCRIPT_RE.sub(r"_{\1}", text)


def format_to_latex(text: str | None, symbols: tuple[str, ...] = SYMBOLS) -> str:
    """Format arbitrary expression or value text as LaTeX math.

    Total: never raises on string input, and returns "" for empty or
    None input.
    """
    if not text:
        return ""
    processed = simplify_units(text)
    processed = normalize_exponents(processed)
    processed = escape_symbols(processed, symbols)
    return brace_subscripts(processed)
