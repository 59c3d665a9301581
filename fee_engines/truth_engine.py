"""
Truth Engine -- CDIO v1.1 to CDOO v1.1.

Pure function with deterministic behavior. No I/O.

Rounding doctrine (v1.1):
- Money is computed in integer minor units, rates in parts-per-million
- Every rate application is rounded to minor units immediately,
  half-away-from-zero; no extended precision is carried forward
- Sums of already-rounded amounts are exact and need no rounding

Calculation order (changing it is a breaking change and needs a new
document version):

    Direct Labor x Fringe Rate                        -> Fringe
    (Direct Labor + Fringe) x Overhead Rate           -> Overhead
    Direct Labor + Fringe + Overhead                  -> Fully Burdened Labor
    Fully Burdened Labor x G&A Rate                   -> G&A
    Fully Burdened Labor + G&A                        -> Total Cost
    Total Cost x Fee Percent                          -> Fee
    Total Cost + Fee                                  -> Derived Contract Value
    Fee / Derived Contract Value (PPM, 0 if DCV == 0) -> Effective Margin

Usage:
    from fee_engines.truth_engine import compute
    from fee_kernel.domain import CDIO, CostInputs, FeeInput

    cdio = CDIO(
        scenario_id="Base",
        contract_type="CPFF",
        cost_inputs=CostInputs(
            direct_labor="1000.00",
            fringe_rate="0.10",
            overhead_rate="0.20",
            gna_rate="0.05",
        ),
        fee_input=FeeInput(fee_percent="0.10"),
    )
    cdoo = compute(cdio)
    cdoo.fee_analysis.derived_contract_value   # Decimal('1524.60')
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fee_engines.tracer import traced_engine
from fee_kernel.domain.documents import (
    CDIO,
    CDOO,
    CostStack,
    FeeAnalysis,
    RoundingMeta,
)
from fee_kernel.domain.fixed_point import (
    MoneyIngestion,
    minor_to_decimal,
    parse_money,
    parse_rate,
    ppm_to_decimal,
)
from fee_kernel.domain.rounding import PPM_SCALE, apply_rate, rounded_div
from fee_kernel.exceptions import OutOfRangeError, ValidationError
from fee_kernel.logging_config import get_logger

logger = get_logger("engines.truth_engine")

ENGINE_VERSION = "1.1"

# Field labels used in validation messages
_LABELS = {
    "direct_labor": "Direct labor",
    "fringe_rate": "Fringe rate",
    "overhead_rate": "Overhead rate",
    "gna_rate": "G&A rate",
    "fee_percent": "Fee percent",
}


@dataclass(frozen=True, slots=True)
class ParsedInputs:
    """Validated inputs in fixed-point form (minor units and PPM)."""

    direct_labor: int
    fringe_rate: int
    overhead_rate: int
    gna_rate: int
    fee_percent: int


def _require_rate_in_range(field: str, ppm: int) -> int:
    if ppm < 0 or ppm > PPM_SCALE:
        raise OutOfRangeError(
            field, _LABELS[field], str(ppm_to_decimal(ppm)), "between 0% and 100%"
        )
    return ppm


def parse_inputs(cdio: CDIO) -> ParsedInputs:
    """
    Parse and validate the five numeric inputs, failing on the first bad field.

    Order: direct_labor, fringe_rate, overhead_rate, gna_rate, fee_percent.
    Direct labor is ingested with MoneyIngestion.ROUND.

    Raises:
        InvalidMoneyError: direct_labor is not a decimal number.
        InvalidRateError: a rate is not a decimal number.
        OutOfRangeError: direct_labor < 0 or a rate outside [0, 1].
    """
    costs = cdio.cost_inputs

    direct_labor = parse_money(
        costs.direct_labor, field="direct_labor", mode=MoneyIngestion.ROUND
    )
    if direct_labor < 0:
        raise OutOfRangeError(
            "direct_labor",
            _LABELS["direct_labor"],
            str(minor_to_decimal(direct_labor)),
            "≥ 0",
        )

    fringe = _require_rate_in_range(
        "fringe_rate", parse_rate(costs.fringe_rate, field="fringe_rate")
    )
    overhead = _require_rate_in_range(
        "overhead_rate", parse_rate(costs.overhead_rate, field="overhead_rate")
    )
    gna = _require_rate_in_range(
        "gna_rate", parse_rate(costs.gna_rate, field="gna_rate")
    )
    fee = _require_rate_in_range(
        "fee_percent", parse_rate(cdio.fee_input.fee_percent, field="fee_percent")
    )

    return ParsedInputs(
        direct_labor=direct_labor,
        fringe_rate=fringe,
        overhead_rate=overhead,
        gna_rate=gna,
        fee_percent=fee,
    )


@traced_engine("truth_engine", ENGINE_VERSION, fingerprint_fields=("cdio",))
def compute(cdio: CDIO) -> CDOO:
    """
    Compute the canonical output document for one scenario.

    Pure function - no side effects, no I/O, deterministic output.

    Raises:
        InvalidMoneyError, InvalidRateError, OutOfRangeError: on the first
            invalid input field. No partial result is ever returned.
    """
    t0 = time.monotonic()
    logger.info("truth_engine_compute_started", extra={
        "scenario_id": cdio.scenario_id,
        "contract_type": cdio.contract_type.value,
    })

    try:
        inputs = parse_inputs(cdio)
    except ValidationError as exc:
        logger.warning("truth_engine_validation_failed", extra={
            "scenario_id": cdio.scenario_id,
            "field": exc.field,
            "error_code": exc.code,
            "error": str(exc),
        })
        raise

    dl = inputs.direct_labor
    fringe = apply_rate(dl, inputs.fringe_rate)
    overhead = apply_rate(dl + fringe, inputs.overhead_rate)
    fully_burdened = dl + fringe + overhead
    gna = apply_rate(fully_burdened, inputs.gna_rate)
    total_cost = fully_burdened + gna
    fee = apply_rate(total_cost, inputs.fee_percent)
    contract_value = total_cost + fee
    margin_ppm = 0 if contract_value == 0 else rounded_div(fee * PPM_SCALE, contract_value)

    cdoo = CDOO(
        scenario_id=cdio.scenario_id,
        contract_type=cdio.contract_type,
        cost_stack=CostStack(
            direct_labor=minor_to_decimal(dl),
            fringe_amount=minor_to_decimal(fringe),
            overhead_amount=minor_to_decimal(overhead),
            fully_burdened_labor=minor_to_decimal(fully_burdened),
            gna_amount=minor_to_decimal(gna),
            total_cost=minor_to_decimal(total_cost),
        ),
        fee_analysis=FeeAnalysis(
            fee_percent=ppm_to_decimal(inputs.fee_percent),
            fee_dollars=minor_to_decimal(fee),
            derived_contract_value=minor_to_decimal(contract_value),
            effective_margin_percent=ppm_to_decimal(margin_ppm),
        ),
        meta=RoundingMeta(),
    )

    logger.info("truth_engine_compute_completed", extra={
        "scenario_id": cdio.scenario_id,
        "contract_type": cdio.contract_type.value,
        "total_cost": str(cdoo.cost_stack.total_cost),
        "fee_dollars": str(cdoo.fee_analysis.fee_dollars),
        "derived_contract_value": str(cdoo.fee_analysis.derived_contract_value),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })

    return cdoo


def compute_document(data: Mapping[str, Any]) -> dict[str, Any]:
    """Wire-level entry point: CDIO dict in, CDOO dict out."""
    return compute(CDIO.from_dict(data)).to_dict()
