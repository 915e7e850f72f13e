"""Token-level view of notebook source, built on the stdlib tokenize module.

Cells are split into top-level logical statements so that the extractor,
substitution engine and table scanner match identifiers as tokens, never
inside string literals or comments.
"""

import io
import logging
import tokenize
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

# Cell magics whose body is still Python source.
_PYTHON_CELL_MAGICS = ("%%time", "%%timeit", "%%capture", "%%prun")

_SKIP_TYPES = (tokenize.NL, tokenize.NEWLINE, tokenize.INDENT,
               tokenize.DEDENT, tokenize.ENDMARKER)


@dataclass(slots=True)
class Statement:
    """One logical line of source with its comments.

    ``tokens`` holds the code tokens only. Comments on their own lines
    directly above the statement are in ``leading_comments``; a comment
    at the end of the statement is in ``trailing_comments``.
    """

    source: str
    tokens: list[tokenize.TokenInfo]
    depth: int
    line_offset: int = 0
    leading_comments: list[str] = field(default_factory=list)
    trailing_comments: list[str] = field(default_factory=list)

    @property
    def line(self) -> int:
        """1-based line of the first token in the original cell."""
        return self.tokens[0].start[0] + self.line_offset

    def segment(self, start: tuple[int, int], end: tuple[int, int]) -> str:
        """Verbatim source text between two tokenize positions."""
        return self.source[_offset(self.source, start):_offset(self.source, end)]


def _offset(text: str, pos: tuple[int, int]) -> int:
    """Character offset of a (row, col) tokenize position in text."""
    row, col = pos
    lines = text.splitlines(keepends=True)
    return sum(len(line) for line in lines[: row - 1]) + col


def tokenize_text(text: str) -> list[tokenize.TokenInfo] | None:
    """Tokenize text, or return None if it is not tokenizable Python."""
    try:
        return list(tokenize.generate_tokens(io.StringIO(text).readline))
    except (tokenize.TokenError, SyntaxError) as e:
        log.debug("Tokenize failed: %s", e)
        return None


def mask_magics(source: str) -> str | None:
    """Blank out IPython line magics and shell escapes, keeping line numbers.

    Returns None for cells run by a non-Python cell magic (``%%bash`` etc.).
    """
    lines = source.splitlines(keepends=True)
    first = next((line.strip() for line in lines if line.strip()), "")
    if first.startswith("%%") and not first.startswith(_PYTHON_CELL_MAGICS):
        return None
    masked = []
    for line in lines:
        stripped = line.lstrip()
        if stripped.startswith(("%", "!")):
            masked.append("\n" if line.endswith("\n") else "")
        else:
            masked.append(line)
    return "".join(masked)


def _split_statements(text: str, tokens: list[tokenize.TokenInfo],
                      line_offset: int = 0) -> list[Statement]:
    statements: list[Statement] = []
    depth = 0
    current: list[tokenize.TokenInfo] = []
    current_depth = 0
    pending: list[str] = []
    trailing: list[str] = []
    # After "a = 1;" a comment on the same line still belongs to "a = 1".
    after_semicolon = False

    for tok in tokens:
        if tok.type == tokenize.INDENT:
            depth += 1
        elif tok.type == tokenize.DEDENT:
            depth -= 1
        elif tok.type == tokenize.COMMENT:
            if current or after_semicolon:
                trailing.append(tok.string)
            else:
                pending.append(tok.string)
        elif (tok.type in (tokenize.NEWLINE, tokenize.ENDMARKER)
              or (tok.type == tokenize.OP and tok.string == ";")):
            if current:
                statements.append(Statement(
                    source=text,
                    tokens=current,
                    depth=current_depth,
                    line_offset=line_offset,
                    leading_comments=pending,
                    trailing_comments=trailing,
                ))
                pending = []
            current = []
            if tok.type == tokenize.OP:
                after_semicolon = True
            else:
                trailing, after_semicolon = [], False
        elif tok.type in _SKIP_TYPES:
            continue
        else:
            if not current:
                current_depth = depth
                if after_semicolon:
                    trailing, after_semicolon = [], False
            current.append(tok)
    return statements


def split_statements(source: str) -> list[Statement]:
    """Split one code cell into logical statements.

    Magics are masked first. If the cell as a whole cannot be tokenized,
    each physical line is tried on its own and untokenizable lines are
    skipped, so one broken line never hides the rest of the cell.
    """
    masked = mask_magics(source)
    if masked is None:
        return []
    tokens = tokenize_text(masked)
    if tokens is not None:
        return _split_statements(masked, tokens)

    log.debug("Falling back to line-by-line tokenizing")
    statements: list[Statement] = []
    for index, line in enumerate(masked.splitlines()):
        line_tokens = tokenize_text(line)
        if line_tokens is None:
            continue
        statements.extend(_split_statements(line, line_tokens, line_offset=index))
    return statements
