"""Default configuration, the single source of truth for report conventions."""

from nbreport.config.report import ReportConfig

DEFAULT_CONFIG = ReportConfig()
