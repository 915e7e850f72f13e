"""Integration tests for the end-to-end report pipeline."""

import json
from pathlib import Path

import nbformat
import pytest
from nbformat.v4 import new_code_cell, new_markdown_cell, new_notebook, new_output

from nbreport.errors import NotebookError, SnapshotError
from nbreport.notebook.snapshot import SNAPSHOT_END, SNAPSHOT_START
from nbreport.notebook.types import Cell, records_to_dict
from nbreport.pipeline import build_records, generate_report, render_report

SOURCE = (
    "import numpy as np\n"
    "a = 2\n"
    "b = a * 3\n"
    "M = np.array([[1, 2], [3, 4]])\n"
    '# table: ["First", "Second"]\n'
    "loads = [a * 5, b * 5]\n"
)

SNAPSHOT = {
    "a": {"value": "2", "type": "int"},
    "b": {"value": "6", "type": "int"},
    "M": {"value": "[[1, 2], [3, 4]]", "type": "ndarray"},
    "loads": {"value": "[10, 30]", "type": "list"},
}


def _write_notebook(path: Path, with_snapshot_output: bool = False) -> Path:
    code = new_code_cell(SOURCE)
    cells = [new_markdown_cell("# Calculation"), code]
    if with_snapshot_output:
        printer = new_code_cell("print(snapshot)")
        printer.outputs = [new_output(
            "stream", name="stdout",
            text=SNAPSHOT_START + json.dumps(SNAPSHOT) + SNAPSHOT_END + "\n",
        )]
        cells.append(printer)
    nb = new_notebook(cells=cells)
    nbformat.write(nb, str(path))
    return path


class TestRenderReport:
    """In-memory pipeline from snapshot and cells to Markdown."""

    def test_single_variable_scenario(self):
        snapshot = {"x": {"value": "5", "type": "int"}}
        _, report = render_report(snapshot, [Cell("code", "x = 2 + 3\n")])
        assert "$ x = 2 + 3 = 5 $" in report

    def test_output_suppressing_semicolon(self):
        """A trailing semicolon never reaches the report."""
        snapshot = {"x": {"value": "5", "type": "int"}}
        records, report = render_report(snapshot, [Cell("code", "x = 2 + 3;\n")])
        assert records["x"].expression == "2 + 3"
        assert report == "$ x = 2 + 3 = 5 $\n\n"

    def test_full_notebook(self):
        cells = [Cell("markdown", "# Calculation"), Cell("code", SOURCE)]
        records, report = render_report(SNAPSHOT, cells)

        assert records["b"].replaced == "2 * 3"
        assert records["M"].latex_value == r"\begin{bmatrix} 1 & 2 \\ 3 & 4 \end{bmatrix}"
        assert records["loads"].table_items == ["First", "Second"]
        assert records["loads"].latex_value is None

        assert report.startswith("# Calculation\n\n$ a = 2 $\n\n")
        assert "$ b = a * 3 = 2 * 3 = 6 $" in report
        assert (
            r"$$ M = np.array([[1, 2], [3, 4]]) = "
            r"\begin{bmatrix} 1 & 2 \\ 3 & 4 \end{bmatrix} $$"
        ) in report
        assert "| First | a * 5 | 2 * 5 | 10 |" in report
        assert "| Second | b * 5 | 6 * 5 | 30 |" in report

    def test_records_serialize_in_field_order(self):
        records = build_records(SNAPSHOT, [Cell("code", SOURCE)])
        data = records_to_dict(records)
        assert list(data["loads"]) == ["value", "type", "expression", "replaced", "tableItems"]
        assert list(data["M"]) == ["value", "type", "expression", "replaced", "latexValue"]

    def test_no_records_are_dropped(self):
        snapshot = dict(SNAPSHOT, unused={"value": "1", "type": "int"})
        records = build_records(snapshot, [Cell("code", SOURCE)])
        assert set(records) == set(snapshot)
        assert records["unused"].expression is None


class TestGenerateReport:
    """File-based pipeline writing the records JSON and report."""

    def test_with_snapshot_file(self, tmp_path):
        nb_path = _write_notebook(tmp_path / "calc.ipynb")
        snapshot_path = tmp_path / "snapshot.json"
        snapshot_path.write_text(json.dumps(SNAPSHOT))

        result = generate_report(nb_path, snapshot_path)

        assert result.records_path == tmp_path / "calc_vars.json"
        assert result.report_path == tmp_path / "calc_report.md"
        assert result.n_variables == 4
        saved = json.loads(result.records_path.read_text())
        assert saved["b"]["replaced"] == "2 * 3"
        assert "$ b = a * 3 = 2 * 3 = 6 $" in result.report_path.read_text()

    def test_snapshot_from_outputs(self, tmp_path):
        nb_path = _write_notebook(tmp_path / "calc.ipynb", with_snapshot_output=True)
        result = generate_report(nb_path, output_dir=tmp_path / "out")
        assert result.report_path == tmp_path / "out" / "calc_report.md"
        assert "$ a = 2 $" in result.report_path.read_text()

    def test_missing_snapshot(self, tmp_path):
        nb_path = _write_notebook(tmp_path / "calc.ipynb")
        with pytest.raises(SnapshotError):
            generate_report(nb_path)

    def test_missing_notebook(self, tmp_path):
        with pytest.raises(NotebookError):
            generate_report(tmp_path / "nope.ipynb")
