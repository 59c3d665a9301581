"""
Compare View Builder -- sectioned, multi-scenario comparison report.

Pure function with deterministic behavior. No I/O, no hidden state.

Walks a fixed ordered layout of section headers and metric rows. For each
metric row it reads the value for every active slot that has a CDOO and
the delta against the baseline for every other slot that has one:

    Cost Stack
      Direct Labor          A: 1,000.00   B: 1,200.00   B vs A: +200.00
      ...
    Fee Analysis
      ...

Slots without a CDOO (never computed, or the last compute failed) are
simply absent from that row's values; this is "no value", not an error.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, Union

from fee_engines.delta import compute_delta, read_metric
from fee_engines.metrics import (
    CATALOG_VERSION,
    MetricKind,
    MetricSection,
    get_metric,
)
from fee_engines.tracer import traced_engine
from fee_kernel.domain.documents import CDOO
from fee_kernel.domain.slots import BASELINE_SLOT, Slot
from fee_kernel.logging_config import get_logger

logger = get_logger("engines.compare_view")


# ============================================================================
# Layout
# ============================================================================


@dataclass(frozen=True)
class SectionBlock:
    """Section header in a layout."""

    title: str


@dataclass(frozen=True)
class MetricRowBlock:
    """One metric row in a layout, by catalog id."""

    metric_id: str


LayoutBlock = Union[SectionBlock, MetricRowBlock]

GOLD_LAYOUT: tuple[LayoutBlock, ...] = (
    SectionBlock(MetricSection.COST_STACK.value),
    MetricRowBlock("cost.direct_labor"),
    MetricRowBlock("cost.fringe_amount"),
    MetricRowBlock("cost.overhead_amount"),
    MetricRowBlock("cost.fully_burdened_labor"),
    MetricRowBlock("cost.gna_amount"),
    MetricRowBlock("cost.total_cost"),
    SectionBlock(MetricSection.FEE_ANALYSIS.value),
    MetricRowBlock("fee.fee_percent"),
    MetricRowBlock("fee.fee_dollars"),
    MetricRowBlock("fee.derived_contract_value"),
    MetricRowBlock("fee.effective_margin_percent"),
)


def validate_layout(layout: Iterable[LayoutBlock]) -> None:
    """
    Check that every metric row references a catalog metric.

    Raises:
        UnknownMetricError: On the first unknown metric id.
        TypeError: If a block is not a SectionBlock or MetricRowBlock.
    """
    for block in layout:
        if isinstance(block, MetricRowBlock):
            get_metric(block.metric_id)
        elif not isinstance(block, SectionBlock):
            raise TypeError(f"Unsupported layout block: {block!r}")


# ============================================================================
# View
# ============================================================================


class ScenarioOutput(Protocol):
    """Anything that pairs a slot with its current CDOO (e.g. an envelope)."""

    @property
    def slot(self) -> Slot: ...

    @property
    def cdoo(self) -> CDOO | None: ...


@dataclass(frozen=True)
class SectionRow:
    """Section marker row."""

    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "section", "title": self.title}


@dataclass(frozen=True)
class MetricRow:
    """
    One metric across the active slots.

    Attributes:
        values: Value per slot; slots without a CDOO are absent
        deltas_vs_baseline: alternate - baseline per non-baseline slot;
            present only when both sides have a CDOO
    """

    metric_id: str
    label: str
    kind: MetricKind
    code: str
    values: Mapping[Slot, Decimal] = field(default_factory=dict)
    deltas_vs_baseline: Mapping[Slot, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "metric",
            "metric_id": self.metric_id,
            "label": self.label,
            "kind": self.kind.value,
            "values": {slot.value: float(v) for slot, v in self.values.items()},
            "deltas_vs_baseline": {
                slot.value: float(v) for slot, v in self.deltas_vs_baseline.items()
            },
        }


CompareRow = Union[SectionRow, MetricRow]


@dataclass(frozen=True)
class CompareView:
    """Ordered compare report: active slots, baseline and interleaved rows."""

    slots: tuple[Slot, ...]
    baseline: Slot
    rows: tuple[CompareRow, ...]

    @property
    def metric_rows(self) -> tuple[MetricRow, ...]:
        return tuple(row for row in self.rows if isinstance(row, MetricRow))

    def row(self, metric_id: str) -> MetricRow:
        for row in self.metric_rows:
            if row.metric_id == metric_id:
                return row
        raise KeyError(metric_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalog_version": CATALOG_VERSION,
            "slots": [slot.value for slot in self.slots],
            "baseline": self.baseline.value,
            "rows": [row.to_dict() for row in self.rows],
        }


@traced_engine("compare_view", CATALOG_VERSION)
def build_compare_view(
    layout: Sequence[LayoutBlock],
    envelopes: Iterable[ScenarioOutput],
    baseline: Slot = BASELINE_SLOT,
) -> CompareView:
    """
    Build the comparison report.

    Pure function - the same layout and envelopes always produce the
    same view.

    Args:
        layout: Ordered section and metric-row blocks
        envelopes: Active scenarios in display order
        baseline: Slot that deltas are measured against

    Raises:
        UnknownMetricError: If the layout references an unknown metric.
    """
    baseline = Slot.parse(baseline)
    by_slot: dict[Slot, CDOO | None] = {}
    for envelope in envelopes:
        by_slot[Slot.parse(envelope.slot)] = envelope.cdoo
    slots = tuple(by_slot)
    baseline_cdoo = by_slot.get(baseline)

    rows: list[CompareRow] = []
    for block in layout:
        if isinstance(block, SectionBlock):
            rows.append(SectionRow(block.title))
            continue

        definition = get_metric(block.metric_id)

        values: dict[Slot, Decimal] = {}
        for slot in slots:
            value = read_metric(definition, by_slot[slot])
            if value is not None:
                values[slot] = value

        deltas: dict[Slot, Decimal] = {}
        if baseline_cdoo is not None:
            for slot in slots:
                alternate = by_slot[slot]
                if slot is baseline or alternate is None:
                    continue
                deltas[slot] = compute_delta(definition, baseline_cdoo, alternate)

        rows.append(MetricRow(
            metric_id=definition.id,
            label=definition.label,
            kind=definition.kind,
            code=definition.code,
            values=values,
            deltas_vs_baseline=deltas,
        ))

    logger.debug("compare_view_built", extra={
        "slots": [slot.value for slot in slots],
        "baseline": baseline.value,
        "baseline_available": baseline_cdoo is not None,
        "row_count": len(rows),
    })

    return CompareView(slots=slots, baseline=baseline, rows=tuple(rows))
