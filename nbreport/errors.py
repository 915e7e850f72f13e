"""Exception types raised at the config, notebook and snapshot I/O boundary."""


class ReportError(Exception):
    """Base class for report generation failures."""


class ConfigError(ReportError):
    """Config file is missing, not JSON, or holds invalid settings."""


class NotebookError(ReportError):
    """Notebook file is missing or cannot be read as nbformat v4."""


class SnapshotError(ReportError):
    """Variable snapshot is missing or cannot be decoded."""
