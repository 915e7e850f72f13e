"""Reading and writing report configs as JSON."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dacite import from_dict, Config as DaciteConfig, DaciteError

from nbreport.config.report import ReportConfig
from nbreport.errors import ConfigError

# strict: unknown keys are typos in a hand-written file.
# cast: JSON arrays come back as the tuple fields.
_DACITE = DaciteConfig(cast=[tuple], check_types=True, strict=True)


def config_to_dict(config: ReportConfig) -> dict[str, Any]:
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> ReportConfig:
    """Build a ReportConfig from a possibly partial mapping.

    Keys left out keep their defaults. Unknown keys raise
    dacite.UnexpectedDataError, wrong types raise dacite.WrongTypeError.
    """
    return from_dict(data_class=ReportConfig, data=d, config=_DACITE)


def config_to_json(config: ReportConfig) -> str:
    """Serialize with sorted keys so saved configs diff cleanly."""
    return json.dumps(config_to_dict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> ReportConfig:
    return config_from_dict(json.loads(json_str))


def load_config(path: str | Path) -> ReportConfig:
    """Read a ReportConfig from a JSON file.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object, or
            holds unknown keys, wrong types or invalid values.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config {path} must be a JSON object, got {type(data).__name__}"
        )
    try:
        return config_from_dict(data)
    except (ValueError, DaciteError) as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
