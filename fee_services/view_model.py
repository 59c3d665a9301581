"""
Scenario view model and its mapping to a canonical CDIO.

The view model is the editor-facing representation of a scenario: every
value is kept as the raw string the user typed, rates are in percent form
("28.50" means 28.5%), and the scenario name is display-only. It is NOT
the canonical input; ``view_to_cdio`` derives that.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from fee_kernel.domain.documents import CDIO, ContractType, CostInputs, FeeInput
from fee_kernel.domain.slots import Slot
from fee_kernel.exceptions import UnknownViewFieldError

_WHITESPACE = re.compile(r"\s+")

# Numeric view fields, in editor order, with their display labels
NUMERIC_FIELDS: dict[str, str] = {
    "direct_labor": "Direct Labor ($)",
    "fringe_pct": "Fringe (%)",
    "overhead_pct": "Overhead (%)",
    "gna_pct": "G&A (%)",
    "fee_pct": "Fee (%)",
}


@dataclass(frozen=True)
class ScenarioView:
    """
    Raw, string-typed user inputs for one scenario.

    Attributes:
        direct_labor: Dollars, e.g. "54254.00" or "$54,254.00"
        fringe_pct: Percent form, e.g. "28.50"
        overhead_pct: Percent form
        gna_pct: Percent form
        fee_pct: Percent form
        scenario_name: Display label only; becomes the CDIO scenario_id
        contract_type: "CPFF" or "TM"
    """

    direct_labor: str
    fringe_pct: str
    overhead_pct: str
    gna_pct: str
    fee_pct: str
    scenario_name: str
    contract_type: str = ContractType.CPFF.value

    def __post_init__(self) -> None:
        # Contract type comes from a fixed choice, so it is checked eagerly
        normalized = ContractType.parse(str(self.contract_type).strip().upper())
        object.__setattr__(self, "contract_type", normalized.value)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, defaults: ScenarioView | None = None) -> ScenarioView:
        """Build a view from a mapping; missing keys come from defaults."""
        base = defaults or DEFAULT_SCENARIO_VIEW
        return base.with_patch(data)

    def with_patch(self, patch: Mapping[str, Any]) -> ScenarioView:
        """
        Return a copy with the patch merged in.

        Values are stored as strings, as typed.

        Raises:
            UnknownViewFieldError: If the patch names unknown fields.
        """
        unknown = tuple(sorted(set(patch) - set(self.field_names())))
        if unknown:
            raise UnknownViewFieldError(unknown)
        return replace(self, **{k: "" if v is None else str(v) for k, v in patch.items()})

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


DEFAULT_SCENARIO_VIEW = ScenarioView(
    direct_labor="54254.00",
    fringe_pct="28.50",
    overhead_pct="42.00",
    gna_pct="12.00",
    fee_pct="7.50",
    scenario_name="Proof of Concept Test 1.0",
    contract_type=ContractType.CPFF.value,
)


# ---------------------------------------------------------------------------
# Name normalization
# ---------------------------------------------------------------------------


def normalize_scenario_name(name: str | None, fallback: str) -> str:
    """Trim and collapse internal whitespace; empty names become fallback."""
    normalized = _WHITESPACE.sub(" ", (name or "").strip())
    return normalized or fallback


def scenario_name_key(name: str | None) -> str:
    """Comparison key for uniqueness checks: normalized and lowercased."""
    return _WHITESPACE.sub(" ", (name or "").strip()).lower()


# ---------------------------------------------------------------------------
# Percent -> decimal fraction
# ---------------------------------------------------------------------------


def _clean_number_text(text: str, *symbols: str) -> str:
    cleaned = text.strip()
    for symbol in symbols:
        cleaned = cleaned.replace(symbol, "")
    return cleaned.strip()


def percent_to_decimal_string(text: str) -> str:
    """
    Convert percent-form text to decimal-fraction text ("28.50" -> "0.2850").

    The conversion is an exact decimal shift. Text that is not a finite
    number is returned unchanged so the Truth Engine rejects it with an
    InvalidRateError on the named field.
    """
    cleaned = _clean_number_text(text, "%", ",")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return text
    if not value.is_finite() or not cleaned:
        return text
    # Shift the exponent directly; scaleb would round to context precision
    sign, digits, exponent = value.as_tuple()
    return format(Decimal((sign, digits, exponent - 2)), "f")


def is_parseable_number(text: str) -> bool:
    """True when text (ignoring $, % and thousands separators) is a finite number."""
    cleaned = _clean_number_text(text, "$", "%", ",")
    if not cleaned:
        return False
    try:
        return Decimal(cleaned).is_finite()
    except InvalidOperation:
        return False


def field_errors(view: ScenarioView) -> dict[str, str]:
    """Per-field parseability errors for editor feedback."""
    return {
        name: "Enter a valid number."
        for name in NUMERIC_FIELDS
        if not is_parseable_number(getattr(view, name))
    }


# ---------------------------------------------------------------------------
# View -> CDIO
# ---------------------------------------------------------------------------


def view_to_cdio(
    view: ScenarioView,
    *,
    slot: Slot | None = None,
    fallback_name: str | None = None,
) -> CDIO:
    """
    Map a view model to its canonical input document.

    Direct labor is passed through as typed; the engine strips "$" and
    separators. Rates are converted from percent to decimal-fraction text.
    An empty scenario name becomes fallback_name (default: the slot's
    default label).
    """
    if fallback_name is None:
        fallback_name = slot.default_label if slot is not None else ""
    provenance = {"source": "scenario_view", "slot": slot.value} if slot is not None else None
    return CDIO(
        scenario_id=normalize_scenario_name(view.scenario_name, fallback_name),
        contract_type=ContractType(view.contract_type),
        cost_inputs=CostInputs(
            direct_labor=view.direct_labor,
            fringe_rate=percent_to_decimal_string(view.fringe_pct),
            overhead_rate=percent_to_decimal_string(view.overhead_pct),
            gna_rate=percent_to_decimal_string(view.gna_pct),
        ),
        fee_input=FeeInput(
            fee_percent=percent_to_decimal_string(view.fee_pct),
        ),
        provenance=provenance,
    )
