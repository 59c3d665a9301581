"""
fee_config -- single public entrypoint for workbench configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``. Returns a frozen ``WorkbenchConfig``.

Architecture position:
    Configuration -- sits above ``fee_kernel`` and below
    ``fee_services``. The kernel and engines MUST NEVER import from
    ``fee_config``; ``fee_services.workbench`` bridges a config into a
    scenario store.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``ConfigError`` -- missing file, malformed YAML, missing required
      keys or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``FEE_CONFIG_TRACE`` log entry containing the config_id, version,
    checksum and source path.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fee_config.loader import ConfigError, load_yaml_file, parse_config
from fee_config.schema import DefaultScenarioDef, LoggingDef, WorkbenchConfig

_logger = logging.getLogger("fee_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "workbench.yaml"


def get_active_config(path: Path | str | None = None) -> WorkbenchConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: YAML file to load. Defaults to fee_config/defaults/workbench.yaml.

    Raises:
        ConfigError: If the file cannot be loaded or fails validation.
    """
    source = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = parse_config(load_yaml_file(source))

    _logger.info(
        "FEE_CONFIG_TRACE",
        extra={
            "trace_type": "FEE_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "config_checksum": config.checksum,
            "source": str(source),
        },
    )
    return config


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "DefaultScenarioDef",
    "LoggingDef",
    "WorkbenchConfig",
    "get_active_config",
]
