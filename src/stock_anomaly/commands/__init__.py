"""CLI command implementations.

Each command module provides:
- Configuration loading and validation
- Integration with core library functions
"""

from stock_anomaly.commands.detect import (
    load_detection_config,
    parse_detection_config,
)

__all__ = [
    "load_detection_config",
    "parse_detection_config",
]
