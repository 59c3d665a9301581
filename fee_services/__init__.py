"""
Module: fee_services
Responsibility:
    Stateful orchestration over the pure engines: the editor view model
    and its CDIO mapper, the slot-addressed scenario envelope store,
    session bootstrap from configuration, and text formatting/reporting.

Architecture position:
    Services -- may import fee_kernel, fee_engines and fee_config.
    Nothing below this layer imports from it.
"""

from fee_services.formatting import (
    fmt_currency,
    fmt_delta_currency,
    fmt_delta_percent,
    fmt_percent,
)
from fee_services.reporting import render_compare_table, render_cost_stack
from fee_services.scenario_store import (
    ComputeState,
    ComputeStatus,
    ScenarioEnvelope,
    ScenarioEnvelopeStore,
)
from fee_services.view_model import (
    DEFAULT_SCENARIO_VIEW,
    ScenarioView,
    field_errors,
    normalize_scenario_name,
    percent_to_decimal_string,
    scenario_name_key,
    view_to_cdio,
)
from fee_services.workbench import default_view, load_scenarios, open_session

__all__ = [
    # View model
    "DEFAULT_SCENARIO_VIEW",
    "ScenarioView",
    "field_errors",
    "normalize_scenario_name",
    "percent_to_decimal_string",
    "scenario_name_key",
    "view_to_cdio",
    # Store
    "ComputeState",
    "ComputeStatus",
    "ScenarioEnvelope",
    "ScenarioEnvelopeStore",
    # Session
    "default_view",
    "load_scenarios",
    "open_session",
    # Presentation
    "fmt_currency",
    "fmt_delta_currency",
    "fmt_delta_percent",
    "fmt_percent",
    "render_compare_table",
    "render_cost_stack",
]
