"""
Pure domain layer.

Fixed-point primitives, the rounding rule and the canonical documents.
No I/O, no clock, no configuration. All objects are immutable and
deterministic.
"""

from fee_kernel.domain.documents import (
    CDIO,
    CDIO_VERSION,
    CDOO,
    CDOO_VERSION,
    ContractType,
    CostInputs,
    CostStack,
    FeeAnalysis,
    FeeInput,
    RoundingMeta,
)
from fee_kernel.domain.fixed_point import (
    MoneyIngestion,
    decimal_to_minor,
    minor_to_decimal,
    parse_money,
    parse_rate,
    ppm_to_decimal,
    to_money_display,
    to_rate_display,
)
from fee_kernel.domain.slots import (
    BASELINE_SLOT,
    DEFAULT_SLOT_LABELS,
    MAX_SLOTS,
    Slot,
)
from fee_kernel.domain.rounding import (
    PPM_SCALE,
    ROUNDING_RULE,
    apply_rate,
    rounded_div,
)

__all__ = [
    # Documents
    "CDIO",
    "CDIO_VERSION",
    "CDOO",
    "CDOO_VERSION",
    "ContractType",
    "CostInputs",
    "CostStack",
    "FeeAnalysis",
    "FeeInput",
    "RoundingMeta",
    # Fixed point
    "MoneyIngestion",
    "decimal_to_minor",
    "minor_to_decimal",
    "parse_money",
    "parse_rate",
    "ppm_to_decimal",
    "to_money_display",
    "to_rate_display",
    # Slots
    "BASELINE_SLOT",
    "DEFAULT_SLOT_LABELS",
    "MAX_SLOTS",
    "Slot",
    # Rounding
    "PPM_SCALE",
    "ROUNDING_RULE",
    "apply_rate",
    "rounded_div",
]
