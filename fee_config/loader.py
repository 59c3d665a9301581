"""
Configuration Loader (``fee_config.loader``).

Responsibility
--------------
Loads the workbench YAML file and parses it into the frozen dataclasses
of ``fee_config.schema``. Runtime callers go through
``fee_config.get_active_config()`` rather than calling this directly.

Invariants enforced
-------------------
* Required keys are never defaulted; a missing key is a ``ConfigError``.
* ``compute_checksum`` is deterministic for identical source data.

Failure modes
-------------
* Missing file, malformed YAML, a non-mapping document, missing keys or
  bad values all raise ``ConfigError`` with the file path in the message.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from fee_config.schema import DefaultScenarioDef, LoggingDef, WorkbenchConfig
from fee_kernel.domain.documents import ContractType
from fee_kernel.domain.slots import DEFAULT_SLOT_LABELS, Slot
from fee_kernel.exceptions import FeeKernelError
from fee_kernel.utils.hashing import hash_payload

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(FeeKernelError):
    """Workbench configuration could not be loaded or is invalid."""

    code: str = "CONFIG_ERROR"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and return its top-level mapping.

    Raises:
        ConfigError: if the file is missing, unreadable, malformed or not
            a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must be a mapping, got {type(data).__name__}")
    return data


def _required(data: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in data or data[key] is None:
        raise ConfigError(f"Missing required configuration key: {where}{key}")
    return data[key]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def parse_default_scenario(data: Mapping[str, Any]) -> DefaultScenarioDef:
    where = "default_scenario."
    contract_type = _text(data.get("contract_type", ContractType.CPFF.value)).strip().upper()
    try:
        ContractType.parse(contract_type)
    except FeeKernelError as exc:
        raise ConfigError(f"Invalid {where}contract_type: {exc}") from exc
    return DefaultScenarioDef(
        direct_labor=_text(_required(data, "direct_labor", where)),
        fringe_pct=_text(_required(data, "fringe_pct", where)),
        overhead_pct=_text(_required(data, "overhead_pct", where)),
        gna_pct=_text(_required(data, "gna_pct", where)),
        fee_pct=_text(_required(data, "fee_pct", where)),
        scenario_name=_text(_required(data, "scenario_name", where)),
        contract_type=contract_type,
    )


def parse_slot_labels(data: Mapping[str, Any] | None) -> dict[Slot, str]:
    labels = dict(DEFAULT_SLOT_LABELS)
    for key, label in (data or {}).items():
        try:
            slot = Slot.parse(key)
        except FeeKernelError as exc:
            raise ConfigError(f"Invalid slot in slot_labels: {key!r}") from exc
        text = _text(label).strip() if label is not None else ""
        if not text:
            raise ConfigError(f"Empty label for slot {slot.value}")
        labels[slot] = text
    return labels


def parse_logging(data: Mapping[str, Any] | None) -> LoggingDef:
    level = _text((data or {}).get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"Invalid logging.level: {level!r}")
    return LoggingDef(level=level)


def parse_config(data: Mapping[str, Any]) -> WorkbenchConfig:
    """Parse a raw configuration mapping into a WorkbenchConfig."""
    version = _required(data, "version", "")
    if isinstance(version, bool) or not isinstance(version, int):
        raise ConfigError(f"Configuration version must be an integer, got {version!r}")
    scenario = _required(data, "default_scenario", "")
    if not isinstance(scenario, Mapping):
        raise ConfigError("default_scenario must be a mapping")
    return WorkbenchConfig(
        config_id=_text(_required(data, "config_id", "")),
        version=version,
        owner_name=_text(data.get("owner_name") or ""),
        default_scenario=parse_default_scenario(scenario),
        slot_labels=parse_slot_labels(data.get("slot_labels")),
        logging=parse_logging(data.get("logging")),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: Mapping[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of the source mapping."""
    return hash_payload(dict(data))
