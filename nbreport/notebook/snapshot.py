"""Variable snapshots: capturing, printing and loading them.

A snapshot maps each variable name to ``{"value": str, "type": str}``.
Inside a running kernel, ``capture_namespace(globals())`` builds one;
``snapshot_cell_source()`` returns a cell that prints it between the
``<<VAR_START>>``/``<<VAR_END>>`` markers so that it can be recovered from
the saved notebook outputs later.
"""

import json
import logging
import re
import types
from pathlib import Path
from typing import Any, Mapping

import nbformat

from nbreport.errors import SnapshotError

log = logging.getLogger(__name__)

SNAPSHOT_START = "<<VAR_START>>"
SNAPSHOT_END = "<<VAR_END>>"

_MARKER_RE = re.compile(
    re.escape(SNAPSHOT_START) + r"(.*?)" + re.escape(SNAPSHOT_END), re.DOTALL
)

# Interactive-shell and helper names that are never report variables.
IGNORED_NAMES = frozenset({
    "In", "Out", "get_ipython", "exit", "quit", "open", "json", "sys", "types",
})


def _serialize_value(val: Any, unit_type: str) -> tuple[str, str]:
    """Serialize one runtime value to (value text, type name)."""
    type_name = type(val).__name__
    # numpy arrays and anything array-like serialize as nested lists
    if hasattr(val, "tolist"):
        return str(val.tolist()), type_name
    # Quantity classes carrying a unit and a raw magnitude
    if hasattr(val, "unitTop") and hasattr(val, "true_value"):
        return str(val), unit_type
    return str(val), type_name


def capture_namespace(
    namespace: Mapping[str, Any], unit_type: str = "Unit"
) -> dict[str, dict[str, str]]:
    """Capture the public, non-module names of a namespace as a snapshot.

    Private names (leading underscore), modules and IGNORED_NAMES are
    skipped. A value whose serialization raises is recorded as
    ``<Error>`` with type ``Unknown`` rather than aborting the capture.
    """
    result: dict[str, dict[str, str]] = {}
    for name, val in list(namespace.items()):
        if name.startswith("_") or name in IGNORED_NAMES:
            continue
        if isinstance(val, types.ModuleType):
            continue
        try:
            value, type_name = _serialize_value(val, unit_type)
        except Exception as e:
            log.debug("Could not serialize %s: %s", name, e)
            value, type_name = "<Error>", "Unknown"
        result[name] = {"value": value, "type": type_name}
    return result


def snapshot_cell_source() -> str:
    """Source of a code cell that prints the kernel's snapshot between markers."""
    return (
        "from nbreport.notebook.snapshot import capture_namespace as _nbr_capture\n"
        "import json as _nbr_json\n"
        f"print({SNAPSHOT_START!r} + _nbr_json.dumps(_nbr_capture(globals())) "
        f"+ {SNAPSHOT_END!r})\n"
    )


def parse_snapshot_output(text: str) -> dict[str, Any] | None:
    """Decode the last marker-delimited snapshot found in output text.

    Returns None when no marker is present or the payload is not a JSON
    object.
    """
    matches = _MARKER_RE.findall(text)
    if not matches:
        return None
    try:
        data = json.loads(matches[-1])
    except json.JSONDecodeError as e:
        log.warning("Snapshot marker found but payload is not JSON: %s", e)
        return None
    if not isinstance(data, dict):
        return None
    return data


def _output_texts(output: Mapping[str, Any]) -> list[str]:
    """Plain text carried by a single code cell output."""
    texts: list[str] = []
    if output.get("output_type") == "stream":
        text = output.get("text", "")
        texts.append("".join(text) if isinstance(text, list) else text)
    elif output.get("output_type") in ("execute_result", "display_data"):
        text = output.get("data", {}).get("text/plain", "")
        texts.append("".join(text) if isinstance(text, list) else text)
    return texts


def snapshot_from_notebook(nb: nbformat.NotebookNode) -> dict[str, Any]:
    """Recover the last printed snapshot from a notebook's saved outputs.

    Raises:
        SnapshotError: If no code cell output carries a snapshot.
    """
    found: dict[str, Any] | None = None
    for node in nb.cells:
        if node.get("cell_type") != "code":
            continue
        for output in node.get("outputs", []):
            for text in _output_texts(output):
                parsed = parse_snapshot_output(text)
                if parsed is not None:
                    found = parsed
    if found is None:
        raise SnapshotError(
            "No variable snapshot found in notebook outputs. Run a cell "
            "printing snapshot_cell_source() output, or pass --snapshot."
        )
    log.info("Recovered snapshot with %d variables from outputs", len(found))
    return found


def load_snapshot(path: str | Path) -> dict[str, Any]:
    """Load a snapshot from a JSON file.

    The file may hold the bare JSON object or text containing the
    marker-delimited form.

    Raises:
        SnapshotError: If the file is missing or holds no snapshot object.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

    data = parse_snapshot_output(text)
    if data is None:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(
            f"Snapshot {path} must be a JSON object, got {type(data).__name__}"
        )
    log.info("Loaded snapshot with %d variables from %s", len(data), path)
    return data
