"""Markdown report generation with LaTeX math for notebook variables.

Provides the scalar, table and matrix renderers, the list parser chain
used for table columns, and the final report assembler.
"""

from nbreport.reporting.assembler import create_final_report
from nbreport.reporting.listparse import parse_list
from nbreport.reporting.renderers import (
    render_expression,
    render_markdown,
    render_matrix,
    render_record,
    render_table,
)

__all__ = [
    "create_final_report",
    "parse_list",
    "render_expression",
    "render_markdown",
    "render_matrix",
    "render_record",
    "render_table",
]
