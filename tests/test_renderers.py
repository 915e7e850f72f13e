"""Tests for the scalar, matrix and table renderers."""

import pytest

from nbreport.notebook.types import Cell, VariableRecord
from nbreport.reporting import renderers
from nbreport.reporting.renderers import (
    render_expression,
    render_markdown,
    render_matrix,
    render_record,
    render_table,
)


def _scalar(name, value, expression=None, replaced=None, type_="float"):
    return VariableRecord(
        name=name, value=value, type=type_, expression=expression, replaced=replaced,
    )


class TestRenderExpression:
    """Scalar rendering drops redundant terms."""

    def test_all_equal_collapses_to_value(self):
        assert render_expression(_scalar("x", "5", "5", "5")) == "$ x = 5 $\n\n"

    def test_no_substitution_omits_middle_term(self):
        assert render_expression(_scalar("x", "5", "2 + 3", "2 + 3")) == "$ x = 2 + 3 = 5 $\n\n"

    def test_full_chain(self):
        record = _scalar("b", "6", "a * 3", "2 * 3")
        assert render_expression(record) == "$ b = a * 3 = 2 * 3 = 6 $\n\n"

    def test_whitespace_only_difference_is_equal(self):
        record = _scalar("k", "2", "a+1", "a + 1")
        assert render_expression(record) == "$ k = a+1 = 2 $\n\n"

    def test_missing_expression_renders_value(self):
        assert render_expression(_scalar("y", "7")) == "$ y = 7 $\n\n"

    def test_unit_constructor_renders_value(self):
        record = _scalar("L", "5 [m]", "Unit(5, 'm')", "Unit(5, 'm')", type_="Unit")
        assert render_expression(record) == "$ L = 5 [m] $\n\n"

    def test_true_value_marker_stripped(self):
        record = _scalar("M", "20", "F.true_value * d", "10 * 2")
        assert render_expression(record) == "$ M = F * d = 10 * 2 = 20 $\n\n"

    def test_auto_scale_marker_stripped(self):
        record = _scalar("p", "6 [m]", "(a * b).auto_scale()", "(2 * 3).auto_scale()")
        assert render_expression(record) == "$ p = (a * b) = (2 * 3) = 6 [m] $\n\n"

    def test_empty_unit_brackets_stripped_from_value(self):
        assert render_expression(_scalar("n", "5 []", "5", "5")) == "$ n = 5 $\n\n"

    def test_exponents_and_symbols_formatted(self):
        record = _scalar("alpha", "9", "a**2", "3**2")
        assert render_expression(record) == r"$ \alpha = a^{2} = 3^{2} = 9 $" + "\n\n"

    def test_subscripted_name(self):
        assert render_expression(_scalar("v_max", "3")) == "$ v_{max} = 3 $\n\n"


class TestRenderMatrix:
    """Matrix rendering never repeats whitespace-equal terms."""

    LATEX = r"\begin{bmatrix} 1 & 2 \\ 3 & 4 \end{bmatrix}"

    def _matrix(self, expression=None, replaced=None, latex_value=None):
        return VariableRecord(
            name="M", value="[[1, 2], [3, 4]]", type="ndarray",
            expression=expression, replaced=replaced, latex_value=latex_value,
        )

    def test_all_equal_gives_one_term(self):
        same = "[[1, 2], [3, 4]]"
        output = render_matrix(self._matrix(same, "[[1,2],[3,4]]", " [[1, 2],[3, 4]] "))
        assert output == "$$ M = [[1, 2], [3, 4]] $$\n\n"
        assert output.count(" = ") == 1

    def test_expression_and_latex(self):
        expr = "np.array([[1, 2], [3, 4]])"
        output = render_matrix(self._matrix(expr, expr, self.LATEX))
        assert output == f"$$ M = {expr} = {self.LATEX} $$\n\n"

    def test_all_three_distinct(self):
        output = render_matrix(self._matrix("A @ B", "[[1]] @ [[2]]", self.LATEX))
        assert output == f"$$ M = A @ B = [[1]] @ [[2]] = {self.LATEX} $$\n\n"

    def test_no_expression(self):
        assert render_matrix(self._matrix(latex_value=self.LATEX)) == f"$$ M = {self.LATEX} $$\n\n"


class TestRenderTable:
    """One row per table item, missing entries as empty cells."""

    def _table(self, items, value="[10, 20]", expression="[g * 2, q * 2]",
               replaced="[5 * 2, 10 * 2]"):
        return VariableRecord(
            name="loads", value=value, type="list", expression=expression,
            replaced=replaced, table_items=items,
        )

    @staticmethod
    def _rows(output: str) -> list[str]:
        return [line for line in output.splitlines() if line.startswith("| ")][1:]

    def test_layout(self):
        output = render_table(self._table(["Dead", "Live"]))
        assert output == (
            "*loads*\n\n"
            "| Item | Expression | Replaced | Value |\n"
            "|---|---|---|---|\n"
            "| Dead | g * 2 | 5 * 2 | 10 |\n"
            "| Live | q * 2 | 10 * 2 | 20 |\n"
            "\n"
        )

    def test_row_count_follows_items(self):
        output = render_table(self._table(["Dead", "Live", "Total"]))
        rows = self._rows(output)
        assert len(rows) == 3
        assert rows[2] == "| Total |  |  |  |"

    def test_fewer_items_than_entries(self):
        assert len(self._rows(render_table(self._table(["Dead"])))) == 1

    def test_no_items_no_rows(self):
        assert self._rows(render_table(self._table([]))) == []

    def test_unparseable_value_becomes_single_entry(self):
        output = render_table(self._table(["only", "other"], value="42",
                                          expression=None, replaced=None))
        rows = self._rows(output)
        assert rows[0] == "| only |  |  | 42 |"
        assert rows[1] == "| other |  |  |  |"

    def test_cells_formatted(self):
        output = render_table(self._table(["sigma"], value="[2.5 [N/mm*mm]]",
                                          expression="[F/A]", replaced="[5/2]"))
        assert self._rows(output)[0] == r"| \sigma | F/A | 5/2 | 2.5 [N / mm^{2}] |"


class TestRenderRecord:
    """Renderer dispatch and failure fallback."""

    def test_table_wins(self):
        record = VariableRecord(name="t", value="[[1, 2]]", type="list",
                                latex_value="L", table_items=["a"])
        assert render_record(record).startswith("*t*")

    def test_matrix_before_scalar(self):
        record = VariableRecord(name="M", value="[[1]]", type="list", latex_value="L")
        assert render_record(record).startswith("$$ M")

    def test_scalar_default(self):
        assert render_record(_scalar("x", "1")) == "$ x = 1 $\n\n"

    def test_failure_falls_back_to_value(self, monkeypatch):
        def boom(record, config):
            raise RuntimeError("broken")

        monkeypatch.setattr(renderers, "render_expression", boom)
        assert render_record(_scalar("x", "5", "2 + 3", "2 + 3")) == "$ x = 5 $\n\n"


class TestRenderMarkdown:
    """Prose cells pass through verbatim."""

    def test_verbatim(self):
        assert render_markdown(Cell("markdown", "# Beam\n\nSome *text*")) == "# Beam\n\nSome *text*\n\n"

    @pytest.mark.parametrize("source", ["", "  \n"])
    def test_blank_cell_dropped(self, source):
        assert render_markdown(Cell("markdown", source)) == ""
