"""Configuration loading for the detect command.

Example config file (detect.yaml)::

    zscore:
      threshold: 3.0
      weight: 1.5
    bollinger:
      period: 20
      num_std: 2.0
    macd:
      enabled: false
    isolation:
      contamination: 0.05
    pattern:
      window: 3
    threshold:
      min_length: 20

Every section is optional; omitted sections and keys keep their defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from stock_anomaly.detectors import DETECTORS
from stock_anomaly.exceptions import ConfigError
from stock_anomaly.types import DetectionConfig


def parse_detection_config(raw_config: Any) -> DetectionConfig:
    """Validate an already-parsed mapping into a DetectionConfig.

    :param raw_config: Mapping of detector name to settings, or None.
    :returns: Validated DetectionConfig.
    :raises ConfigError: If a section is unknown or a value is invalid.
    """
    if raw_config is None:
        return DetectionConfig()
    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    for section, settings in raw_config.items():
        if section not in DETECTORS:
            raise ConfigError(
                f"Unknown detector '{section}'. "
                f"Valid options: {sorted(DETECTORS)}"
            )
        if settings is not None and not isinstance(settings, dict):
            raise ConfigError(f"'{section}' must be a mapping")

    sections = {k: v for k, v in raw_config.items() if v is not None}
    try:
        return DetectionConfig.model_validate(sections)
    except ValidationError as e:
        raise ConfigError(f"Invalid detection configuration: {e}") from e


def load_detection_config(config_path: str | Path) -> DetectionConfig:
    """Parse and validate a detection configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated DetectionConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    return parse_detection_config(raw_config)
