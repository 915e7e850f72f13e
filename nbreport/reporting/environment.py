"""Jinja2 environment for the Markdown report templates."""

from functools import lru_cache
from pathlib import Path

import jinja2

# Template directory relative to this file
_TEMPLATE_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def create_markdown_env() -> jinja2.Environment:
    """Create the Jinja2 environment used for Markdown output.

    Autoescaping is off since the output is Markdown with embedded LaTeX,
    not HTML. trim_blocks drops the newline after each block tag so that
    loops emit exactly one line per row.

    Returns:
        Configured Jinja2 Environment with FileSystemLoader.
    """
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
        trim_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
        undefined=jinja2.StrictUndefined,
    )
