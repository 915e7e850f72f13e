"""Notebook reading via nbformat."""

import logging
from pathlib import Path

import nbformat

from nbreport.errors import NotebookError
from nbreport.notebook.types import Cell

log = logging.getLogger(__name__)

_CELL_KINDS = ("markdown", "code", "raw")


def read_notebook(path: str | Path) -> nbformat.NotebookNode:
    """Read an .ipynb file as an nbformat v4 notebook.

    Raises:
        NotebookError: If the file is missing or is not a notebook.
    """
    path = Path(path)
    try:
        nb = nbformat.read(str(path), as_version=4)
    except (OSError, ValueError) as e:
        raise NotebookError(f"Cannot read notebook {path}: {e}") from e
    log.info("Read notebook %s (%d cells)", path, len(nb.cells))
    return nb


def notebook_cells(nb: nbformat.NotebookNode) -> list[Cell]:
    """Ordered cells of a notebook with their source joined into one string."""
    cells: list[Cell] = []
    for node in nb.cells:
        kind = node.get("cell_type", "raw")
        if kind not in _CELL_KINDS:
            log.debug("Treating unknown cell type %r as raw", kind)
            kind = "raw"
        source = node.get("source", "")
        if isinstance(source, list):
            source = "".join(source)
        cells.append(Cell(kind=kind, source=source))
    return cells
