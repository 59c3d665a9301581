"""
Canonical documents -- CDIO (input) and CDOO (output), version 1.1.

Responsibility:
    Immutable, versioned records that form the audit-facing contract of
    the Truth Engine, plus their wire (dict/JSON) forms.

Architecture position:
    Kernel > Domain -- pure data, zero I/O.
    Produced by view-model mappers (CDIO) and by the Truth Engine (CDOO);
    consumed by the metric catalog and compare builder.

Invariants enforced:
    - Version tags are fixed at "1.1"; any other tag is rejected.
    - CDIO raw values are stored untouched; parsing happens in compute.
    - CDOO money fields are two-place Decimals and rate fields are
      six-place Decimal fractions, so every money field is an exact
      integer number of minor units.
    - CDOO.to_json() is canonical (sorted keys, compact), so identical
      documents serialize to identical bytes.

Failure modes:
    - MissingFieldError when a wire document lacks a required key.
    - UnsupportedDocumentVersionError on an unknown version tag.
    - InvalidContractTypeError on an unknown contract type.

Audit relevance:
    Any change to field names, rounding mode or step order is a breaking
    change requiring a new document version.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from fee_kernel.domain.fixed_point import (
    CURRENCY_DECIMALS,
    MoneyIngestion,
    decimal_to_minor,
    minor_to_decimal,
    parse_money,
    parse_rate,
    ppm_to_decimal,
)
from fee_kernel.domain.rounding import ROUNDING_RULE
from fee_kernel.exceptions import (
    InvalidContractTypeError,
    MissingFieldError,
    UnsupportedDocumentVersionError,
)
from fee_kernel.utils.hashing import canonicalize_json, hash_payload

CDIO_VERSION = "1.1"
CDOO_VERSION = "1.1"
RATE_PRECISION = "PPM_1e6"

RawNumber = Union[int, float, Decimal, str]


class ContractType(str, Enum):
    """Contract types accepted by the Truth Engine."""

    CPFF = "CPFF"  # Cost Plus Fixed Fee
    TM = "TM"  # Time & Materials

    @classmethod
    def parse(cls, value: Any) -> ContractType:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidContractTypeError(
                value, tuple(member.value for member in cls)
            ) from None


def _require(data: Mapping[str, Any], key: str, document: str, prefix: str = "") -> Any:
    path = f"{prefix}.{key}" if prefix else key
    if not isinstance(data, Mapping) or key not in data:
        raise MissingFieldError(document, path)
    return data[key]


def _check_version(document: str, version: Any, supported: str) -> None:
    if version != supported:
        raise UnsupportedDocumentVersionError(document, version, supported)


# ============================================================================
# CDIO
# ============================================================================


@dataclass(frozen=True, slots=True)
class CostInputs:
    """Raw cost inputs: direct labor (money) and three decimal rates."""

    direct_labor: RawNumber
    fringe_rate: RawNumber
    overhead_rate: RawNumber
    gna_rate: RawNumber


@dataclass(frozen=True, slots=True)
class FeeInput:
    """Raw fee input as a decimal fraction (0.0750 == 7.5%)."""

    fee_percent: RawNumber


@dataclass(frozen=True)
class CDIO:
    """
    Canonical Data Input Object, v1.1.

    Immutable by convention. Values in cost_inputs and fee_input are kept
    exactly as supplied (number or decimal string) and validated by the
    Truth Engine. provenance is carried for audit and ignored by compute.
    """

    scenario_id: str
    contract_type: ContractType
    cost_inputs: CostInputs
    fee_input: FeeInput
    provenance: Mapping[str, Any] | None = field(default=None, hash=False)
    cdio_version: str = CDIO_VERSION

    def __post_init__(self) -> None:
        _check_version("CDIO", self.cdio_version, CDIO_VERSION)
        object.__setattr__(self, "contract_type", ContractType.parse(self.contract_type))
        if self.provenance is not None:
            object.__setattr__(self, "provenance", dict(self.provenance))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CDIO:
        """Parse the wire form. Values are not validated beyond structure."""
        version = _require(data, "cdio_version", "CDIO")
        _check_version("CDIO", version, CDIO_VERSION)

        costs = _require(data, "cost_inputs", "CDIO")
        fee = _require(data, "fee_input", "CDIO")
        provenance = data.get("provenance")

        return cls(
            scenario_id=str(_require(data, "scenario_id", "CDIO")),
            contract_type=ContractType.parse(_require(data, "contract_type", "CDIO")),
            cost_inputs=CostInputs(
                direct_labor=_require(costs, "direct_labor", "CDIO", "cost_inputs"),
                fringe_rate=_require(costs, "fringe_rate", "CDIO", "cost_inputs"),
                overhead_rate=_require(costs, "overhead_rate", "CDIO", "cost_inputs"),
                gna_rate=_require(costs, "gna_rate", "CDIO", "cost_inputs"),
            ),
            fee_input=FeeInput(
                fee_percent=_require(fee, "fee_percent", "CDIO", "fee_input"),
            ),
            provenance=provenance if isinstance(provenance, Mapping) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "cdio_version": self.cdio_version,
            "scenario_id": self.scenario_id,
            "contract_type": self.contract_type.value,
            "cost_inputs": {
                "direct_labor": self.cost_inputs.direct_labor,
                "fringe_rate": self.cost_inputs.fringe_rate,
                "overhead_rate": self.cost_inputs.overhead_rate,
                "gna_rate": self.cost_inputs.gna_rate,
            },
            "fee_input": {
                "fee_percent": self.fee_input.fee_percent,
            },
        }
        if self.provenance is not None:
            data["provenance"] = dict(self.provenance)
        return data


# ============================================================================
# CDOO
# ============================================================================


@dataclass(frozen=True, slots=True)
class CostStack:
    """Cost build-up, every field a two-place Decimal."""

    direct_labor: Decimal
    fringe_amount: Decimal
    overhead_amount: Decimal
    fully_burdened_labor: Decimal
    gna_amount: Decimal
    total_cost: Decimal

    FIELDS = (
        "direct_labor",
        "fringe_amount",
        "overhead_amount",
        "fully_burdened_labor",
        "gna_amount",
        "total_cost",
    )

    def minor_units(self) -> dict[str, int]:
        """Every field as exact integer minor units."""
        return {name: decimal_to_minor(getattr(self, name)) for name in self.FIELDS}


@dataclass(frozen=True, slots=True)
class FeeAnalysis:
    """Fee results; fee_percent and effective_margin_percent are fractions."""

    fee_percent: Decimal
    fee_dollars: Decimal
    derived_contract_value: Decimal
    effective_margin_percent: Decimal

    MONEY_FIELDS = ("fee_dollars", "derived_contract_value")
    RATE_FIELDS = ("fee_percent", "effective_margin_percent")


@dataclass(frozen=True, slots=True)
class RoundingMeta:
    """The rounding doctrine that produced a CDOO."""

    rounding: str = ROUNDING_RULE
    currency_decimals: int = CURRENCY_DECIMALS
    rate_precision: str = RATE_PRECISION

    def to_dict(self) -> dict[str, Any]:
        return {
            "rounding": self.rounding,
            "currency_decimals": self.currency_decimals,
            "rate_precision": self.rate_precision,
        }


@dataclass(frozen=True)
class CDOO:
    """
    Canonical Data Output Object, v1.1.

    Fully rounded output of the Truth Engine. Readers (metric catalog,
    delta engine, formatters) only ever read these values; nothing
    downstream re-derives them from inputs.
    """

    scenario_id: str
    contract_type: ContractType
    cost_stack: CostStack
    fee_analysis: FeeAnalysis
    meta: RoundingMeta = field(default_factory=RoundingMeta)
    cdoo_version: str = CDOO_VERSION

    def __post_init__(self) -> None:
        _check_version("CDOO", self.cdoo_version, CDOO_VERSION)
        object.__setattr__(self, "contract_type", ContractType.parse(self.contract_type))

    def to_dict(self) -> dict[str, Any]:
        """Wire form with JSON numbers, keys in contract order."""
        stack = self.cost_stack
        fee = self.fee_analysis
        return {
            "cdoo_version": self.cdoo_version,
            "scenario_id": self.scenario_id,
            "contract_type": self.contract_type.value,
            "cost_stack": {name: float(getattr(stack, name)) for name in CostStack.FIELDS},
            "fee_analysis": {
                "fee_percent": float(fee.fee_percent),
                "fee_dollars": float(fee.fee_dollars),
                "derived_contract_value": float(fee.derived_contract_value),
                "effective_margin_percent": float(fee.effective_margin_percent),
            },
            "meta": self.meta.to_dict(),
        }

    def to_json(self) -> str:
        """Canonical JSON: byte-identical for identical documents."""
        return canonicalize_json(self.to_dict())

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form."""
        return hash_payload(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CDOO:
        """
        Parse a wire CDOO (for example one stored for later comparison).

        Money values are re-ingested from their decimal text, so a float
        such as 1524.6 comes back as Decimal('1524.60').
        """
        version = _require(data, "cdoo_version", "CDOO")
        _check_version("CDOO", version, CDOO_VERSION)

        stack = _require(data, "cost_stack", "CDOO")
        fee = _require(data, "fee_analysis", "CDOO")
        meta = data.get("meta") or {}

        def money(section: Mapping[str, Any], name: str, prefix: str) -> Decimal:
            raw = _require(section, name, "CDOO", prefix)
            return minor_to_decimal(
                parse_money(raw, field=f"{prefix}.{name}", mode=MoneyIngestion.ROUND)
            )

        def rate(section: Mapping[str, Any], name: str, prefix: str) -> Decimal:
            raw = _require(section, name, "CDOO", prefix)
            return ppm_to_decimal(parse_rate(raw, field=f"{prefix}.{name}"))

        return cls(
            scenario_id=str(_require(data, "scenario_id", "CDOO")),
            contract_type=ContractType.parse(_require(data, "contract_type", "CDOO")),
            cost_stack=CostStack(
                **{name: money(stack, name, "cost_stack") for name in CostStack.FIELDS}
            ),
            fee_analysis=FeeAnalysis(
                fee_percent=rate(fee, "fee_percent", "fee_analysis"),
                fee_dollars=money(fee, "fee_dollars", "fee_analysis"),
                derived_contract_value=money(fee, "derived_contract_value", "fee_analysis"),
                effective_margin_percent=rate(fee, "effective_margin_percent", "fee_analysis"),
            ),
            meta=RoundingMeta(
                rounding=meta.get("rounding", ROUNDING_RULE),
                currency_decimals=meta.get("currency_decimals", CURRENCY_DECIMALS),
                rate_precision=meta.get("rate_precision", RATE_PRECISION),
            ),
        )
