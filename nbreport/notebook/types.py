"""Notebook cell and per-variable record data structures."""

import json
from dataclasses import dataclass
from typing import Any, Literal

CellKind = Literal["markdown", "code", "raw"]


@dataclass(frozen=True, slots=True)
class Cell:
    """One notebook cell with its raw source text."""

    kind: CellKind
    source: str


@dataclass(slots=True)
class VariableRecord:
    """Everything known about one captured variable during a report run.

    Created from the snapshot, then enriched in place by each pipeline
    stage. Annotations (expression, replaced, latex_value, table_items)
    are only ever added. None means "no source evidence", which is
    different from an empty string.
    """

    name: str
    value: str
    type: str
    expression: str | None = None
    replaced: str | None = None
    latex_value: str | None = None
    table_items: list[str] | None = None
    # Location of the winning assignment: code cell index, 1-based line.
    cell_index: int | None = None
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializable view in stable field order, omitting absent annotations."""
        d: dict[str, Any] = {"value": self.value, "type": self.type}
        if self.expression is not None:
            d["expression"] = self.expression
        if self.replaced is not None:
            d["replaced"] = self.replaced
        if self.latex_value is not None:
            d["latexValue"] = self.latex_value
        if self.table_items is not None:
            d["tableItems"] = list(self.table_items)
        return d


def records_from_snapshot(snapshot: dict[str, Any]) -> dict[str, VariableRecord]:
    """Build the record collection for one run from a raw snapshot mapping.

    Entries without a string-convertible value are kept with their value
    stringified; a missing type becomes "Unknown".
    """
    records: dict[str, VariableRecord] = {}
    for name, entry in snapshot.items():
        if not name:
            continue
        if isinstance(entry, dict):
            value = entry.get("value", "")
            type_name = entry.get("type", "Unknown")
        else:
            value, type_name = entry, type(entry).__name__
        records[name] = VariableRecord(
            name=name,
            value=value if isinstance(value, str) else str(value),
            type=str(type_name),
        )
    return records


def records_to_dict(records: dict[str, VariableRecord]) -> dict[str, dict[str, Any]]:
    """Convert a record collection to plain nested dicts."""
    return {name: record.to_dict() for name, record in records.items()}


def records_to_json(records: dict[str, VariableRecord]) -> str:
    """Serialize a record collection to JSON with 4-space indent."""
    return json.dumps(records_to_dict(records), indent=4, ensure_ascii=False)
