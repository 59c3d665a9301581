"""
Metric Catalog -- fixed registry of read-only projections over a CDOO.

Pure definitions. No I/O, no runtime registration.

Each MetricDefinition reads an already-rounded field of a CDOO document.
Nothing here re-derives a value from inputs; comparisons therefore
inherit the Truth Engine's rounding exactly.

Metric ids are stable keys used by the compare layout and by any stored
comparison. Keep them stable once shipped; adding or renaming a metric
bumps CATALOG_VERSION.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from fee_kernel.domain.documents import CDOO
from fee_kernel.exceptions import UnknownMetricError

CATALOG_VERSION = "1.1"


class MetricKind(str, Enum):
    """How a metric is presented and how its delta is rounded."""

    MONEY = "money"
    RATE = "rate"


class MetricSection(str, Enum):
    """Section grouping used by the compare layout."""

    COST_STACK = "Cost Stack"
    FEE_ANALYSIS = "Fee Analysis"


@dataclass(frozen=True)
class MetricDefinition:
    """
    A single catalog entry.

    Attributes:
        id: Stable identifier (e.g. "cost.total_cost")
        label: Display label
        section: Section grouping
        kind: money or rate
        code: Short display tag (e.g. "TC")
        read: Pure accessor over a CDOO document
    """

    id: str
    label: str
    section: MetricSection
    kind: MetricKind
    code: str
    read: Callable[[CDOO], Decimal]


def _money(metric_id: str, label: str, code: str, read: Callable[[CDOO], Decimal]) -> MetricDefinition:
    section = MetricSection.COST_STACK if metric_id.startswith("cost.") else MetricSection.FEE_ANALYSIS
    return MetricDefinition(metric_id, label, section, MetricKind.MONEY, code, read)


def _rate(metric_id: str, label: str, code: str, read: Callable[[CDOO], Decimal]) -> MetricDefinition:
    return MetricDefinition(metric_id, label, MetricSection.FEE_ANALYSIS, MetricKind.RATE, code, read)


_DEFINITIONS: tuple[MetricDefinition, ...] = (
    _money("cost.direct_labor", "Direct Labor", "DL",
           lambda cdoo: cdoo.cost_stack.direct_labor),
    _money("cost.fringe_amount", "Fringe Amount", "FR",
           lambda cdoo: cdoo.cost_stack.fringe_amount),
    _money("cost.overhead_amount", "Overhead Amount", "OH",
           lambda cdoo: cdoo.cost_stack.overhead_amount),
    _money("cost.fully_burdened_labor", "Fully Burdened Labor", "FBL",
           lambda cdoo: cdoo.cost_stack.fully_burdened_labor),
    _money("cost.gna_amount", "G&A Amount", "GA",
           lambda cdoo: cdoo.cost_stack.gna_amount),
    _money("cost.total_cost", "Total Cost", "TC",
           lambda cdoo: cdoo.cost_stack.total_cost),
    _rate("fee.fee_percent", "Fee %", "FP",
          lambda cdoo: cdoo.fee_analysis.fee_percent),
    _money("fee.fee_dollars", "Fee $", "F$",
           lambda cdoo: cdoo.fee_analysis.fee_dollars),
    _money("fee.derived_contract_value", "Derived Contract Value", "DCV",
           lambda cdoo: cdoo.fee_analysis.derived_contract_value),
    _rate("fee.effective_margin_percent", "Effective Margin %", "EM",
          lambda cdoo: cdoo.fee_analysis.effective_margin_percent),
)

METRICS: Mapping[str, MetricDefinition] = MappingProxyType(
    {definition.id: definition for definition in _DEFINITIONS}
)


def get_metric(metric_id: str) -> MetricDefinition:
    """Look up a metric definition by id."""
    try:
        return METRICS[metric_id]
    except KeyError:
        raise UnknownMetricError(metric_id) from None


def metrics_in_section(section: MetricSection) -> tuple[MetricDefinition, ...]:
    """Catalog entries for one section, in catalog order."""
    return tuple(d for d in _DEFINITIONS if d.section is section)
