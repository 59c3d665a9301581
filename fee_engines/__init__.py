"""
Module: fee_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines. This is the canonical import surface for
    fee_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import fee_kernel (and sibling engine modules).
    MUST NOT import fee_services or fee_config.

Invariants enforced:
    - Integer-only money and rate arithmetic inside the Truth Engine.
    - Determinism: identical inputs always produce identical outputs.
    - Compare/delta values are read from CDOO documents, never recomputed.

Audit relevance:
    Engine invocations are traced via ``@traced_engine`` (see
    ``fee_engines.tracer``), emitting FEE_ENGINE_TRACE records with the
    engine name, version, input fingerprint and duration.
"""

from fee_engines.compare_view import (
    GOLD_LAYOUT,
    CompareRow,
    CompareView,
    LayoutBlock,
    MetricRow,
    MetricRowBlock,
    SectionBlock,
    SectionRow,
    build_compare_view,
    validate_layout,
)
from fee_engines.delta import compute_delta, read_metric
from fee_engines.metrics import (
    CATALOG_VERSION,
    METRICS,
    MetricDefinition,
    MetricKind,
    MetricSection,
    get_metric,
    metrics_in_section,
)
from fee_engines.truth_engine import (
    ENGINE_VERSION,
    ParsedInputs,
    compute,
    compute_document,
    parse_inputs,
)

__all__ = [
    # Truth Engine
    "ENGINE_VERSION",
    "ParsedInputs",
    "compute",
    "compute_document",
    "parse_inputs",
    # Metric catalog
    "CATALOG_VERSION",
    "METRICS",
    "MetricDefinition",
    "MetricKind",
    "MetricSection",
    "get_metric",
    "metrics_in_section",
    # Delta
    "compute_delta",
    "read_metric",
    # Compare view
    "GOLD_LAYOUT",
    "CompareRow",
    "CompareView",
    "LayoutBlock",
    "MetricRow",
    "MetricRowBlock",
    "SectionBlock",
    "SectionRow",
    "build_compare_view",
    "validate_layout",
]
