"""End-to-end report pipeline: snapshot + cells -> records JSON + Markdown.

Stages run strictly in order, each taking and returning the whole record
mapping: expression extraction, matrix detection, substitution, table
directive scanning, then report assembly.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generator

from nbreport.config.defaults import DEFAULT_CONFIG
from nbreport.config.report import ReportConfig
from nbreport.extraction import (
    detect_matrices,
    extract_expressions,
    find_table_commands,
    substitute_values,
)
from nbreport.notebook import (
    Cell,
    VariableRecord,
    load_snapshot,
    notebook_cells,
    read_notebook,
    records_from_snapshot,
    records_to_json,
    snapshot_from_notebook,
)
from nbreport.reporting import create_final_report

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that logs stage start and elapsed time."""
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    log.info("Completed: %s in %.3fs", name, time.monotonic() - t0)


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Paths written by one report run."""

    records_path: Path
    report_path: Path
    n_variables: int


def build_records(
    snapshot: dict[str, Any],
    cells: list[Cell],
    config: ReportConfig = DEFAULT_CONFIG,
) -> dict[str, VariableRecord]:
    """Run every enrichment stage over a fresh record collection.

    Args:
        snapshot: Mapping of name to ``{"value", "type"}``.
        cells: Ordered notebook cells.
        config: Scanning conventions.

    Returns:
        The enriched records, keyed by name.
    """
    records = records_from_snapshot(snapshot)
    log.info("Snapshot: %d variables", len(records))

    with stage_timer("Expression Extraction"):
        records = extract_expressions(records, cells)
    with stage_timer("Matrix Detection"):
        records = detect_matrices(records)
    with stage_timer("Substitution"):
        records = substitute_values(records)
    with stage_timer("Table Directives"):
        records = find_table_commands(records, cells, config.table_directive)
    return records


def render_report(
    snapshot: dict[str, Any],
    cells: list[Cell],
    config: ReportConfig = DEFAULT_CONFIG,
) -> tuple[dict[str, VariableRecord], str]:
    """Build records and the Markdown report entirely in memory."""
    records = build_records(snapshot, cells, config)
    with stage_timer("Report Assembly"):
        report = create_final_report(records, cells, config)
    return records, report


def generate_report(
    notebook_path: str | Path,
    snapshot_path: str | Path | None = None,
    output_dir: str | Path | None = None,
    config: ReportConfig = DEFAULT_CONFIG,
) -> ReportResult:
    """Generate the records JSON and Markdown report for a notebook.

    When no snapshot file is given, the snapshot printed into the
    notebook's saved outputs is used.

    Args:
        notebook_path: Path to the .ipynb file.
        snapshot_path: Optional snapshot JSON file.
        output_dir: Directory for outputs; defaults to the notebook's.
        config: Report conventions.

    Returns:
        ReportResult with the two written paths.

    Raises:
        NotebookError: If the notebook cannot be read.
        SnapshotError: If no snapshot can be loaded.
    """
    notebook_path = Path(notebook_path)
    nb = read_notebook(notebook_path)
    cells = notebook_cells(nb)

    if snapshot_path is not None:
        snapshot = load_snapshot(snapshot_path)
    else:
        snapshot = snapshot_from_notebook(nb)

    records, report = render_report(snapshot, cells, config)

    output_dir = Path(output_dir) if output_dir is not None else notebook_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = notebook_path.stem

    records_path = output_dir / f"{stem}{config.vars_suffix}"
    records_path.write_text(records_to_json(records), encoding="utf-8")
    log.info("Records written to %s", records_path)

    report_path = output_dir / f"{stem}{config.report_suffix}"
    report_path.write_text(report, encoding="utf-8")
    log.info("Report written to %s", report_path)

    return ReportResult(
        records_path=records_path,
        report_path=report_path,
        n_variables=len(records),
    )
