"""Report configuration system with frozen, serializable dataclasses."""

from nbreport.config.report import ReportConfig, SYMBOLS
from nbreport.config.defaults import DEFAULT_CONFIG
from nbreport.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
    load_config,
)

__all__ = [
    "ReportConfig",
    "SYMBOLS",
    "DEFAULT_CONFIG",
    "config_to_json",
    "config_from_json",
    "config_to_dict",
    "config_from_dict",
    "load_config",
]
