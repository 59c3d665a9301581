"""
Pytest fixtures for the fee confidence test suite.

Provides:
- Structured logging configured once per session, with per-test capture
- Golden CDIO and scenario view fixtures
- A store factory seeded with the golden baseline
"""

import json
import logging
from io import StringIO

import pytest

from fee_kernel.domain.documents import CDIO, ContractType, CostInputs, FeeInput
from fee_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from fee_services.scenario_store import ScenarioEnvelopeStore
from fee_services.view_model import ScenarioView

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture fee_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute(cdio)
            logs = captured_logs()
            assert any(r["message"] == "truth_engine_compute_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("fee_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Golden scenario
# =============================================================================

# 1000.00 labor, 10% fringe, 20% overhead, 5% G&A, 10% fee:
#   fringe 100.00, overhead 220.00, FBL 1320.00, G&A 66.00,
#   total 1386.00, fee 138.60, DCV 1524.60, margin 0.090909


def make_cdio(
    direct_labor="1000.00",
    fringe_rate="0.10",
    overhead_rate="0.20",
    gna_rate="0.05",
    fee_percent="0.10",
    scenario_id="Golden",
    contract_type=ContractType.CPFF,
) -> CDIO:
    return CDIO(
        scenario_id=scenario_id,
        contract_type=contract_type,
        cost_inputs=CostInputs(
            direct_labor=direct_labor,
            fringe_rate=fringe_rate,
            overhead_rate=overhead_rate,
            gna_rate=gna_rate,
        ),
        fee_input=FeeInput(fee_percent=fee_percent),
    )


@pytest.fixture
def cdio_factory():
    """make_cdio with golden defaults; override any field by keyword."""
    return make_cdio


@pytest.fixture
def golden_cdio() -> CDIO:
    return make_cdio()


@pytest.fixture
def golden_cdio_dict() -> dict:
    return {
        "cdio_version": "1.1",
        "scenario_id": "Golden",
        "contract_type": "CPFF",
        "cost_inputs": {
            "direct_labor": "1000.00",
            "fringe_rate": "0.10",
            "overhead_rate": "0.20",
            "gna_rate": "0.05",
        },
        "fee_input": {"fee_percent": "0.10"},
    }


@pytest.fixture
def golden_view() -> ScenarioView:
    return ScenarioView(
        direct_labor="1000.00",
        fringe_pct="10",
        overhead_pct="20",
        gna_pct="5",
        fee_pct="10",
        scenario_name="Golden",
    )


@pytest.fixture
def store(golden_view) -> ScenarioEnvelopeStore:
    """Store with only the golden baseline in slot A."""
    return ScenarioEnvelopeStore.create_baseline("Test Owner", golden_view)
