"""
fee_engines.tracer -- Engine invocation tracer emitting FEE_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging.  The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    hash of selected arguments), outcome and duration_ms.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into engines; emits a log record only.

Invariants enforced:
    - Fingerprints are deterministic: arguments exposing ``to_dict()`` are
      fingerprinted through their canonical JSON form; everything else
      through a stable string form.
    - The decorator never mutates arguments or results, and re-raises
      whatever the wrapped engine raises after recording the failure.

Audit relevance:
    The input_fingerprint lets an auditor confirm that two runs were fed
    identical documents, and therefore must have produced identical output.

Usage:
    from fee_engines.tracer import traced_engine

    @traced_engine("truth_engine", "1.1", fingerprint_fields=("cdio",))
    def compute(cdio):
        ...
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable
from typing import Any

from fee_kernel.logging_config import get_logger
from fee_kernel.utils.hashing import short_fingerprint

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> Any:
    """Reduce a value to JSON-compatible data for fingerprinting."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _canonicalize(to_dict())
    if isinstance(value, dict):
        return {str(k): _canonicalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonicalize(v) for v in value]
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """
    Deterministic 16-hex fingerprint of the named arguments.

    Missing arguments are recorded as null.
    """
    selected = {name: _canonicalize(arguments.get(name)) for name in fingerprint_fields}
    return short_fingerprint(selected)


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits FEE_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "truth_engine").
        engine_version: Engine version (e.g., "1.1").
        fingerprint_fields: Parameter names (positional or keyword) to
            include in the input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, dict(bound.arguments))

            t0 = time.monotonic()
            outcome = "ok"
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                outcome = getattr(exc, "code", type(exc).__name__)
                raise
            finally:
                _logger.info(
                    "FEE_ENGINE_TRACE",
                    extra={
                        "trace_type": "FEE_ENGINE_TRACE",
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fp,
                        "outcome": outcome,
                        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                        "function": func.__qualname__,
                    },
                )

        return wrapper

    return decorator
