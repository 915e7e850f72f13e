"""Notebook variable reports: symbolic expressions, substituted values and
results rendered as LaTeX math inside Markdown.
"""

from nbreport.config import DEFAULT_CONFIG, ReportConfig
from nbreport.formatting import format_to_latex
from nbreport.pipeline import build_records, generate_report, render_report

__all__ = [
    "DEFAULT_CONFIG",
    "ReportConfig",
    "format_to_latex",
    "build_records",
    "render_report",
    "generate_report",
]
