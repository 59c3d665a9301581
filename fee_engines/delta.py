"""
Delta Engine -- metric reads and per-metric differences between CDOOs.

Pure functions. Deltas are defined only between two already-rounded CDOO
documents and are never recomputed from inputs, so they are stable no
matter how often they are recomputed.
"""

from __future__ import annotations

from decimal import Decimal

from fee_engines.metrics import MetricDefinition, MetricKind
from fee_kernel.domain.documents import CDOO
from fee_kernel.domain.fixed_point import decimal_to_minor, minor_to_decimal


def read_metric(definition: MetricDefinition, cdoo: CDOO | None) -> Decimal | None:
    """
    Read a metric from a CDOO.

    Returns None when there is no CDOO (not yet computed, or errored).
    Money values are two-place Decimals, rates are decimal fractions.
    """
    if cdoo is None:
        return None
    value = definition.read(cdoo)
    if not value.is_finite():
        return None
    return value


def compute_delta(definition: MetricDefinition, baseline: CDOO, alternate: CDOO) -> Decimal:
    """
    alternate - baseline for one metric.

    Money deltas are taken in integer minor units, so they are exact
    two-place Decimals at any magnitude. Rate deltas are returned raw;
    display code applies its own formatting.
    """
    if definition.kind is MetricKind.MONEY:
        return minor_to_decimal(
            decimal_to_minor(definition.read(alternate))
            - decimal_to_minor(definition.read(baseline))
        )
    return definition.read(alternate) - definition.read(baseline)
