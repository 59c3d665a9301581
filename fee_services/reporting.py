"""
Plain-text report rendering for the workbench.

Renders a CompareView as an aligned table (one value column per active
slot, one delta column per alternate) and a single CDOO as a cost stack
breakdown. Output is a string; callers decide where it goes.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from fee_engines.compare_view import CompareView, MetricRow, SectionRow
from fee_engines.metrics import MetricKind
from fee_kernel.domain.documents import CDOO
from fee_kernel.domain.slots import Slot
from fee_services.formatting import (
    MISSING,
    fmt_currency,
    fmt_delta_currency,
    fmt_delta_percent,
    fmt_percent,
)

LABEL_W = 30
COL_W = 16
FOOTNOTE = "Deltas are computed from rounded CDOO outputs only."


def _cell(kind: MetricKind, value: Decimal | None) -> str:
    if value is None:
        return MISSING
    return fmt_currency(value) if kind is MetricKind.MONEY else fmt_percent(value)


def _delta_cell(kind: MetricKind, value: Decimal | None) -> str:
    if value is None:
        return MISSING
    return fmt_delta_currency(value) if kind is MetricKind.MONEY else fmt_delta_percent(value)


def _metric_line(
    row: MetricRow,
    slots: Sequence[Slot],
    delta_slots: Sequence[Slot],
    show_codes: bool,
) -> str:
    label = f"  {row.label} [{row.code}]" if show_codes else f"  {row.label}"
    line = f"{label:<{LABEL_W}}"
    line += "".join(f"{_cell(row.kind, row.values.get(slot)):>{COL_W}}" for slot in slots)
    line += "".join(
        f"{_delta_cell(row.kind, row.deltas_vs_baseline.get(slot)):>{COL_W}}"
        for slot in delta_slots
    )
    return line


def render_compare_table(view: CompareView, *, show_codes: bool = False) -> str:
    """
    Render the compare view as text.

    Columns: metric label, then one column per slot, then one "Δ<slot>"
    column per non-baseline slot. Section rows are printed as headers.
    """
    delta_slots = [slot for slot in view.slots if slot is not view.baseline]
    width = LABEL_W + COL_W * (len(view.slots) + len(delta_slots))

    header = f"{'':<{LABEL_W}}"
    header += "".join(f"{slot.value:>{COL_W}}" for slot in view.slots)
    header += "".join(f"{'Δ' + slot.value:>{COL_W}}" for slot in delta_slots)
    lines = [header.rstrip(), "-" * width]

    for row in view.rows:
        if isinstance(row, SectionRow):
            lines.append(row.title)
        else:
            lines.append(_metric_line(row, view.slots, delta_slots, show_codes))

    lines.append("-" * width)
    lines.append(FOOTNOTE)
    return "\n".join(lines)


def render_cost_stack(cdoo: CDOO) -> str:
    """Render one scenario's cost stack and fee analysis."""
    stack = cdoo.cost_stack
    fee = cdoo.fee_analysis
    rows = [
        ("Direct Labor", fmt_currency(stack.direct_labor)),
        ("Fringe", fmt_currency(stack.fringe_amount)),
        ("Overhead", fmt_currency(stack.overhead_amount)),
        ("Fully Burdened Labor", fmt_currency(stack.fully_burdened_labor)),
        ("G&A", fmt_currency(stack.gna_amount)),
        ("Total Cost", fmt_currency(stack.total_cost)),
        None,
        ("Fee %", fmt_percent(fee.fee_percent)),
        ("Fee $", fmt_currency(fee.fee_dollars)),
        ("Derived Contract Value", fmt_currency(fee.derived_contract_value)),
        ("Effective Margin %", fmt_percent(fee.effective_margin_percent)),
    ]
    width = LABEL_W + COL_W
    lines = [
        f"{cdoo.scenario_id} ({cdoo.contract_type.value})",
        "=" * width,
        "Cost Stack",
    ]
    for row in rows:
        if row is None:
            lines.append("Fee Analysis")
            continue
        label, text = row
        lines.append(f"{'  ' + label:<{LABEL_W}}{text:>{COL_W}}")
    return "\n".join(lines)
