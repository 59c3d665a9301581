"""Tests for the @traced_engine decorator and input fingerprints."""

import pytest

from fee_engines.tracer import compute_input_fingerprint, traced_engine
from fee_kernel.exceptions import SlotNotFoundError


@traced_engine("sample_engine", "9.9", fingerprint_fields=("payload",))
def _sample(payload, scale=1):
    return payload["value"] * scale


@traced_engine("failing_engine", "1.0")
def _failing():
    raise SlotNotFoundError("Z")


def _traces(captured_logs):
    return [r for r in captured_logs() if r["message"] == "FEE_ENGINE_TRACE"]


class TestFingerprint:
    def test_deterministic(self):
        a = compute_input_fingerprint(("payload",), {"payload": {"value": 2}})
        assert len(a) == 16
        assert a == compute_input_fingerprint(("payload",), {"payload": {"value": 2}})

    def test_differs_with_input(self):
        a = compute_input_fingerprint(("payload",), {"payload": {"value": 2}})
        b = compute_input_fingerprint(("payload",), {"payload": {"value": 3}})
        assert a != b

    def test_uses_to_dict(self, golden_cdio, cdio_factory):
        a = compute_input_fingerprint(("cdio",), {"cdio": golden_cdio})
        b = compute_input_fingerprint(("cdio",), {"cdio": cdio_factory()})
        assert a == b


class TestTracedEngine:
    """Tests for trace emission."""

    def test_result_passed_through(self):
        assert _sample({"value": 4}, scale=2) == 8

    def test_trace_fields(self, captured_logs):
        _sample({"value": 1})
        (trace,) = _traces(captured_logs)
        assert trace["trace_type"] == "FEE_ENGINE_TRACE"
        assert trace["engine_name"] == "sample_engine"
        assert trace["engine_version"] == "9.9"
        assert trace["outcome"] == "ok"
        assert trace["duration_ms"] >= 0

    def test_positional_and_keyword_calls_fingerprint_alike(self, captured_logs):
        _sample({"value": 5})
        _sample(payload={"value": 5})
        first, second = _traces(captured_logs)
        assert first["input_fingerprint"] == second["input_fingerprint"]

    def test_failure_recorded_and_reraised(self, captured_logs):
        with pytest.raises(SlotNotFoundError):
            _failing()
        (trace,) = _traces(captured_logs)
        assert trace["outcome"] == "SLOT_NOT_FOUND"
        assert trace["input_fingerprint"] == ""

    def test_wraps_preserves_name(self):
        assert _sample.__name__ == "_sample"
