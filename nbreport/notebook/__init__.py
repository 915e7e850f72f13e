"""Notebook cells, variable records and snapshot I/O."""

from nbreport.notebook.loader import notebook_cells, read_notebook
from nbreport.notebook.snapshot import (
    capture_namespace,
    load_snapshot,
    parse_snapshot_output,
    snapshot_cell_source,
    snapshot_from_notebook,
)
from nbreport.notebook.types import (
    Cell,
    VariableRecord,
    records_from_snapshot,
    records_to_dict,
    records_to_json,
)

__all__ = [
    "Cell",
    "VariableRecord",
    "records_from_snapshot",
    "records_to_dict",
    "records_to_json",
    "read_notebook",
    "notebook_cells",
    "capture_namespace",
    "load_snapshot",
    "parse_snapshot_output",
    "snapshot_cell_source",
    "snapshot_from_notebook",
]
