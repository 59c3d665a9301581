"""
Workbench session bootstrap.

Bridges a WorkbenchConfig into a ScenarioEnvelopeStore: the configured
default scenario seeds slot A, the configured slot labels name the tabs
and the configured owner is stamped on every envelope.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from fee_config import WorkbenchConfig, get_active_config
from fee_kernel.domain.slots import BASELINE_SLOT, Slot
from fee_kernel.exceptions import ScenarioError
from fee_kernel.logging_config import LogContext, get_logger
from fee_services.scenario_store import ScenarioEnvelopeStore
from fee_services.view_model import ScenarioView

logger = get_logger("services.workbench")


def default_view(config: WorkbenchConfig) -> ScenarioView:
    """The configured default scenario as an editor view."""
    scenario = config.default_scenario
    return ScenarioView(
        direct_labor=scenario.direct_labor,
        fringe_pct=scenario.fringe_pct,
        overhead_pct=scenario.overhead_pct,
        gna_pct=scenario.gna_pct,
        fee_pct=scenario.fee_pct,
        scenario_name=scenario.scenario_name,
        contract_type=scenario.contract_type,
    )


def open_session(config: WorkbenchConfig | None = None) -> ScenarioEnvelopeStore:
    """
    Start a workbench session with only the baseline scenario.

    Binds a fresh session_id and the owner into LogContext so every log
    line emitted during the session carries them.
    """
    if config is None:
        config = get_active_config()

    session_id = uuid4().hex
    LogContext.set(session_id=session_id, owner=config.owner_name or None)

    store = ScenarioEnvelopeStore.create_baseline(
        config.owner_name,
        default_view(config),
        slot_labels=config.slot_labels,
    )
    logger.info("workbench_session_opened", extra={
        "config_id": config.config_id,
        "config_checksum": config.checksum,
        "baseline_status": store.get(BASELINE_SLOT).compute.status.value,
    })
    return store


def load_scenarios(
    data: Mapping[str, Any],
    config: WorkbenchConfig | None = None,
) -> ScenarioEnvelopeStore:
    """
    Build a store from a scenario-set mapping.

    Expected shape::

        owner: Jane Analyst          # optional
        scenarios:
          A: {direct_labor: "1000.00", fringe_pct: "10", ...}
          B: {fee_pct: "12.5"}       # patch over A's view
          C: {...}

    Slot A's mapping is merged over the configured default scenario.
    Alternates start as a clone of A and then take their own fields.

    Raises:
        ScenarioError: If there are no scenarios or the mapping is malformed.
        UnknownViewFieldError: If a scenario names an unknown field.
    """
    if config is None:
        config = get_active_config()

    scenarios = data.get("scenarios")
    if not isinstance(scenarios, Mapping) or not scenarios:
        raise ScenarioError("Scenario file must contain a non-empty 'scenarios' mapping")

    by_slot: dict[Slot, Mapping[str, Any]] = {}
    for key, fields in scenarios.items():
        if not isinstance(fields, Mapping):
            raise ScenarioError(f"Scenario {key} must be a mapping of view fields")
        by_slot[Slot.parse(key)] = fields

    owner = data.get("owner") or config.owner_name
    store = ScenarioEnvelopeStore.create_baseline(
        owner,
        ScenarioView.from_mapping(by_slot.get(BASELINE_SLOT, {}), defaults=default_view(config)),
        slot_labels=config.slot_labels,
    )
    for slot in Slot:
        if slot.is_baseline or slot not in by_slot:
            continue
        store.add_slot(slot)
        if by_slot[slot]:
            store.update_view(slot, by_slot[slot])
    return store
