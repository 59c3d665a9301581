"""
Workbench configuration schema.

Frozen dataclasses that the loader produces from YAML. These are the only
configuration types the rest of the system sees.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fee_kernel.domain.slots import DEFAULT_SLOT_LABELS, Slot


@dataclass(frozen=True)
class DefaultScenarioDef:
    """Initial inputs for the baseline scenario, in editor (percent) form."""

    direct_labor: str
    fringe_pct: str
    overhead_pct: str
    gna_pct: str
    fee_pct: str
    scenario_name: str
    contract_type: str = "CPFF"


@dataclass(frozen=True)
class LoggingDef:
    level: str = "INFO"


@dataclass(frozen=True)
class WorkbenchConfig:
    """
    Runtime configuration for one workbench session.

    checksum is the SHA-256 of the canonical JSON form of the source
    mapping; identical YAML always yields the same checksum.
    """

    config_id: str
    version: int
    owner_name: str
    default_scenario: DefaultScenarioDef
    slot_labels: dict[Slot, str] = field(default_factory=lambda: dict(DEFAULT_SLOT_LABELS))
    logging: LoggingDef = LoggingDef()
    checksum: str = ""
