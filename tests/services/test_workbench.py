"""
Tests for workbench session bootstrap.

Verifies:
- open_session seeds slot A from the configured default scenario
- Session identity is bound into LogContext
- load_scenarios builds A from defaults and alternates as patched clones
- Malformed scenario sets are rejected before any store is built
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from fee_config import get_active_config
from fee_kernel.domain.slots import Slot
from fee_kernel.exceptions import ScenarioError, SlotNotFoundError, UnknownViewFieldError
from fee_kernel.logging_config import LogContext
from fee_services.scenario_store import ComputeStatus
from fee_services.workbench import default_view, load_scenarios, open_session


@pytest.fixture
def config():
    return get_active_config()


class TestOpenSession:
    def test_baseline_from_default_scenario(self, config):
        store = open_session(config)
        envelope = store.get(Slot.A)
        assert store.slots == (Slot.A,)
        assert store.owner == "Analyst"
        assert envelope.label == "Base"
        assert envelope.cdio.scenario_id == "Proof of Concept Test 1.0"
        assert envelope.compute.status is ComputeStatus.OK
        assert envelope.cdoo.cost_stack.total_cost == Decimal("110876.94")
        assert envelope.cdoo.fee_analysis.derived_contract_value == Decimal("119192.71")

    def test_loads_active_config_when_omitted(self):
        assert open_session().get(Slot.A).cdio.scenario_id == "Proof of Concept Test 1.0"

    def test_binds_log_context(self, config):
        open_session(config)
        context = LogContext.get_all()
        assert len(context["session_id"]) == 32
        assert context["owner"] == "Analyst"

    def test_sessions_get_distinct_ids(self, config):
        open_session(config)
        first = LogContext.get_all()["session_id"]
        open_session(config)
        assert LogContext.get_all()["session_id"] != first

    def test_session_opened_logged(self, config, captured_logs):
        open_session(config)
        (record,) = [r for r in captured_logs() if r["message"] == "workbench_session_opened"]
        assert record["config_id"] == "fee-workbench-default"
        assert record["config_checksum"] == config.checksum
        assert record["baseline_status"] == "ok"
        assert record["owner"] == "Analyst"

    def test_custom_labels(self, config):
        labels = {Slot.A: "Proposal", Slot.B: "Stretch", Slot.C: "Floor"}
        store = open_session(replace(config, slot_labels=labels))
        assert store.get(Slot.A).label == "Proposal"
        assert store.add_slot(Slot.B).label == "Stretch"

    def test_default_view(self, config):
        view = default_view(config)
        assert view.fringe_pct == "28.50"
        assert view.contract_type == "CPFF"


class TestLoadScenarios:
    """Tests for building a store from a scenario-set mapping."""

    def test_full_set(self, config):
        data = {
            "owner": "Jane Analyst",
            "scenarios": {
                "A": {
                    "direct_labor": "1000.00",
                    "fringe_pct": "10",
                    "overhead_pct": "20",
                    "gna_pct": "5",
                    "fee_pct": "10",
                    "scenario_name": "Golden",
                },
                "B": {"fee_pct": "11", "scenario_name": "Higher Fee"},
            },
        }
        store = load_scenarios(data, config)
        assert store.owner == "Jane Analyst"
        assert store.slots == (Slot.A, Slot.B)
        assert store.get(Slot.A).cdoo.fee_analysis.derived_contract_value == Decimal("1524.60")
        assert store.get(Slot.B).cdoo.fee_analysis.derived_contract_value == Decimal("1538.46")
        assert store.get(Slot.B).scenario_name == "Higher Fee"

    def test_baseline_merged_over_defaults(self, config):
        store = load_scenarios({"scenarios": {"A": {"fee_pct": "10"}}}, config)
        view = store.get(Slot.A).view
        assert view.fee_pct == "10"
        assert view.direct_labor == "54254.00"
        assert store.owner == "Analyst"

    def test_empty_alternate_is_clone(self, config):
        store = load_scenarios({"scenarios": {"A": {}, "C": {}}}, config)
        assert store.slots == (Slot.A, Slot.C)
        assert store.get(Slot.C).scenario_name == "Alt 2"
        assert store.get(Slot.C).cdoo.cost_stack == store.get(Slot.A).cdoo.cost_stack

    def test_lowercase_slot_keys(self, config):
        store = load_scenarios({"scenarios": {"a": {}, "b": {"fee_pct": "9"}}}, config)
        assert store.slots == (Slot.A, Slot.B)

    def test_invalid_alternate_recorded_not_raised(self, config):
        store = load_scenarios({"scenarios": {"A": {}, "B": {"fee_pct": "150"}}}, config)
        assert store.get(Slot.A).compute.status is ComputeStatus.OK
        assert store.get(Slot.B).compute.status is ComputeStatus.ERROR
        assert store.get(Slot.B).compute.error == "Fee percent must be between 0% and 100%"

    @pytest.mark.parametrize("data", [{}, {"scenarios": {}}, {"scenarios": ["A"]}])
    def test_missing_scenarios(self, config, data):
        with pytest.raises(ScenarioError, match="non-empty 'scenarios' mapping"):
            load_scenarios(data, config)

    def test_non_mapping_entry(self, config):
        with pytest.raises(ScenarioError, match="Scenario B must be a mapping"):
            load_scenarios({"scenarios": {"A": {}, "B": "fee 10"}}, config)

    def test_unknown_slot(self, config):
        with pytest.raises(SlotNotFoundError):
            load_scenarios({"scenarios": {"D": {}}}, config)

    def test_unknown_field(self, config):
        with pytest.raises(UnknownViewFieldError):
            load_scenarios({"scenarios": {"A": {"markup": "3"}}}, config)
