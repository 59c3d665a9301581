#!/usr/bin/env python3
"""
Fee confidence workbench from the command line.

Computes a single CDIO document, or builds a side-by-side comparison of
up to three scenarios from a scenario-set file.

Usage:
    python3 scripts/fee_workbench.py compute scenario.json
    python3 scripts/fee_workbench.py compute scenario.yaml --json
    python3 scripts/fee_workbench.py compare scenarios.yaml
    python3 scripts/fee_workbench.py compare scenarios.yaml --baseline B --json

A CDIO file holds a CDIO v1.1 document (rates as decimal fractions). A
scenario-set file holds editor views (rates in percent)::

    owner: Jane Analyst
    scenarios:
      A: {direct_labor: "1000.00", fringe_pct: "10", overhead_pct: "20",
          gna_pct: "5", fee_pct: "10", scenario_name: Base}
      B: {fee_pct: "12"}

Exit status is 1 when any input fails validation.
"""

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


# =============================================================================
# Helpers
# =============================================================================


def load_document(path: Path) -> dict:
    """Read a JSON or YAML file into a dict; JSON numbers become Decimals."""
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f, parse_float=Decimal)
        else:
            data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data


def error(exc) -> None:
    code = getattr(exc, "code", None)
    prefix = f"ERROR [{code}]" if code else "ERROR"
    print(f"  {prefix}: {exc}", file=sys.stderr)


# =============================================================================
# Commands
# =============================================================================


def cmd_compute(args) -> int:
    from fee_engines.truth_engine import compute
    from fee_kernel.domain.documents import CDIO
    from fee_services.reporting import render_cost_stack

    cdoo = compute(CDIO.from_dict(load_document(args.file)))
    if args.json:
        print(json.dumps(cdoo.to_dict(), indent=2))
    else:
        print(render_cost_stack(cdoo))
    return 0


def cmd_compare(args, config) -> int:
    from fee_services.reporting import render_compare_table
    from fee_services.scenario_store import ComputeStatus
    from fee_services.workbench import load_scenarios

    store = load_scenarios(load_document(args.file), config)
    view = store.compare(baseline=args.baseline)

    if args.json:
        print(json.dumps(view.to_dict(), indent=2))
    else:
        print(render_compare_table(view))

    failed = [e for e in store.envelopes() if e.compute.status is ComputeStatus.ERROR]
    for envelope in failed:
        print(
            f"  Scenario {envelope.slot.value} ({envelope.scenario_name}): "
            f"ERROR [{envelope.compute.error_code}]: {envelope.compute.error}",
            file=sys.stderr,
        )
    return 1 if failed else 0


# =============================================================================
# Entry point
# =============================================================================


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute and compare contract fee scenarios.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/fee_workbench.py compute scenario.json\n"
            "  python3 scripts/fee_workbench.py compare scenarios.yaml --baseline A\n"
        ),
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Workbench configuration YAML (default: fee_config/defaults/workbench.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Emit structured logs to stderr at the configured level",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_compute = sub.add_parser("compute", help="Compute one CDIO document")
    p_compute.add_argument("file", type=Path, help="CDIO v1.1 document (.json or .yaml)")
    p_compute.add_argument("--json", action="store_true", help="Print the CDOO as JSON")

    p_compare = sub.add_parser("compare", help="Compare up to three scenarios")
    p_compare.add_argument("file", type=Path, help="Scenario-set file (.json or .yaml)")
    p_compare.add_argument("--json", action="store_true", help="Print the compare view as JSON")
    p_compare.add_argument("--baseline", default="A", help="Baseline slot (default: A)")

    args = parser.parse_args(argv)

    from fee_config import get_active_config
    from fee_kernel.exceptions import FeeKernelError
    from fee_kernel.logging_config import configure_logging

    try:
        config = get_active_config(args.config)
        configure_logging(
            level=config.logging.level if args.verbose else "ERROR",
            stream=sys.stderr,
        )
        if args.command == "compute":
            return cmd_compute(args)
        return cmd_compare(args, config)
    except FeeKernelError as exc:
        error(exc)
        return 1
    except (OSError, ValueError, yaml.YAMLError) as exc:
        error(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
