"""Final report assembly: prose cells interleaved with rendered variables."""

import logging
from collections import defaultdict

from nbreport.config.defaults import DEFAULT_CONFIG
from nbreport.config.report import ReportConfig
from nbreport.notebook.types import Cell, VariableRecord
from nbreport.reporting.environment import create_markdown_env
from nbreport.reporting.renderers import render_markdown, render_record

log = logging.getLogger(__name__)


def _group_by_cell(
    records: dict[str, VariableRecord],
) -> tuple[dict[int, list[VariableRecord]], list[VariableRecord]]:
    """Split records into those defined in a cell and those never assigned."""
    by_cell: dict[int, list[VariableRecord]] = defaultdict(list)
    unplaced: list[VariableRecord] = []
    for record in records.values():
        if record.cell_index is None:
            unplaced.append(record)
        else:
            by_cell[record.cell_index].append(record)
    for cell_records in by_cell.values():
        cell_records.sort(key=lambda r: (r.line or 0, r.name))
    unplaced.sort(key=lambda r: r.name)
    return by_cell, unplaced


def create_final_report(
    records: dict[str, VariableRecord],
    cells: list[Cell],
    config: ReportConfig = DEFAULT_CONFIG,
) -> str:
    """Render the Markdown report for one notebook.

    Walks the cells in order: markdown cells are copied through, each code
    cell is replaced by the variables whose defining assignment it holds,
    in line order. Raw cells are skipped. Variables without a defining
    assignment are listed at the end when ``config.include_unplaced``.

    Args:
        records: Fully enriched record collection.
        cells: Ordered notebook cells.
        config: Rendering conventions.

    Returns:
        The Markdown document.
    """
    by_cell, unplaced = _group_by_cell(records)

    blocks: list[str] = []
    n_rendered = 0
    for index, cell in enumerate(cells):
        if cell.kind == "markdown":
            block = render_markdown(cell)
            if block:
                blocks.append(block)
        elif cell.kind == "code":
            for record in by_cell.get(index, []):
                blocks.append(render_record(record, config))
                n_rendered += 1

    unplaced_blocks: list[str] = []
    if config.include_unplaced:
        unplaced_blocks = [render_record(record, config) for record in unplaced]
    elif unplaced:
        log.debug("Omitting %d variables without an assignment", len(unplaced))

    log.info(
        "Report: %d variables in cells, %d unplaced",
        n_rendered, len(unplaced_blocks),
    )
    template = create_markdown_env().get_template("report.md.j2")
    return template.render(
        title=config.title,
        blocks=blocks,
        unplaced=unplaced_blocks,
    )
