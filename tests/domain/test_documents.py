"""
Tests for the canonical CDIO/CDOO documents.

Verifies:
- Wire parsing and structural validation of CDIO
- Version tag enforcement
- CDOO wire form, canonical JSON and fingerprint stability
- CDOO re-ingestion from its wire form
"""

import json
from decimal import Decimal

import pytest

from fee_engines.truth_engine import compute
from fee_kernel.domain.documents import (
    CDIO,
    CDOO,
    CDOO_VERSION,
    ContractType,
    CostStack,
    RoundingMeta,
)
from fee_kernel.exceptions import (
    InvalidContractTypeError,
    MissingFieldError,
    UnsupportedDocumentVersionError,
)


class TestContractType:
    def test_parse_known(self):
        assert ContractType.parse("TM") is ContractType.TM
        assert ContractType.parse(ContractType.CPFF) is ContractType.CPFF

    def test_parse_unknown(self):
        with pytest.raises(InvalidContractTypeError) as exc_info:
            ContractType.parse("FFP")
        assert exc_info.value.field == "contract_type"
        assert exc_info.value.allowed == ("CPFF", "TM")


class TestCDIO:
    """Tests for the input document."""

    def test_from_dict_keeps_raw_values(self, golden_cdio_dict):
        cdio = CDIO.from_dict(golden_cdio_dict)
        assert cdio.scenario_id == "Golden"
        assert cdio.contract_type is ContractType.CPFF
        assert cdio.cost_inputs.direct_labor == "1000.00"
        assert cdio.fee_input.fee_percent == "0.10"
        assert cdio.provenance is None

    def test_round_trip_dict(self, golden_cdio_dict):
        assert CDIO.from_dict(golden_cdio_dict).to_dict() == golden_cdio_dict

    def test_provenance_is_copied(self, golden_cdio_dict):
        source = {"source": "import", "row": 4}
        cdio = CDIO.from_dict({**golden_cdio_dict, "provenance": source})
        source["row"] = 99
        assert cdio.provenance == {"source": "import", "row": 4}
        assert cdio.to_dict()["provenance"] == {"source": "import", "row": 4}

    def test_provenance_ignored_for_equality_hash(self, cdio_factory):
        a = cdio_factory()
        assert hash(a) == hash(CDIO(
            scenario_id=a.scenario_id,
            contract_type=a.contract_type,
            cost_inputs=a.cost_inputs,
            fee_input=a.fee_input,
            provenance={"source": "test"},
        ))

    def test_missing_nested_field(self, golden_cdio_dict):
        del golden_cdio_dict["cost_inputs"]["gna_rate"]
        with pytest.raises(MissingFieldError) as exc_info:
            CDIO.from_dict(golden_cdio_dict)
        assert exc_info.value.path == "cost_inputs.gna_rate"
        assert exc_info.value.code == "MISSING_FIELD"

    def test_missing_top_level_field(self, golden_cdio_dict):
        del golden_cdio_dict["fee_input"]
        with pytest.raises(MissingFieldError, match="fee_input"):
            CDIO.from_dict(golden_cdio_dict)

    def test_unsupported_version(self, golden_cdio_dict):
        golden_cdio_dict["cdio_version"] = "1.0"
        with pytest.raises(UnsupportedDocumentVersionError) as exc_info:
            CDIO.from_dict(golden_cdio_dict)
        assert exc_info.value.version == "1.0"
        assert exc_info.value.supported == "1.1"

    def test_constructor_checks_version(self, cdio_factory):
        base = cdio_factory()
        with pytest.raises(UnsupportedDocumentVersionError):
            CDIO(
                scenario_id="x",
                contract_type="CPFF",
                cost_inputs=base.cost_inputs,
                fee_input=base.fee_input,
                cdio_version="2.0",
            )

    def test_contract_type_string_coerced(self, cdio_factory):
        assert cdio_factory(contract_type="TM").contract_type is ContractType.TM

    def test_unknown_contract_type_in_wire_form(self, golden_cdio_dict):
        golden_cdio_dict["contract_type"] = "FFP"
        with pytest.raises(InvalidContractTypeError):
            CDIO.from_dict(golden_cdio_dict)


class TestCDOO:
    """Tests for the output document."""

    def test_to_dict_shape(self, golden_cdio):
        data = compute(golden_cdio).to_dict()
        assert list(data) == [
            "cdoo_version", "scenario_id", "contract_type",
            "cost_stack", "fee_analysis", "meta",
        ]
        assert data["cdoo_version"] == CDOO_VERSION
        assert list(data["cost_stack"]) == list(CostStack.FIELDS)
        assert data["fee_analysis"]["derived_contract_value"] == 1524.6
        assert data["fee_analysis"]["effective_margin_percent"] == 0.090909
        assert data["meta"] == {
            "rounding": "HALF_AWAY_FROM_ZERO",
            "currency_decimals": 2,
            "rate_precision": "PPM_1e6",
        }

    def test_to_json_is_canonical(self, golden_cdio):
        text = compute(golden_cdio).to_json()
        assert ", " not in text
        assert ": " not in text
        parsed = json.loads(text)
        assert list(parsed) == sorted(parsed)

    def test_fingerprint_is_stable(self, golden_cdio, cdio_factory):
        first = compute(golden_cdio).fingerprint()
        second = compute(cdio_factory()).fingerprint()
        assert first == second
        assert len(first) == 64

    def test_fingerprint_changes_with_output(self, golden_cdio, cdio_factory):
        assert compute(golden_cdio).fingerprint() != compute(
            cdio_factory(fee_percent="0.11")
        ).fingerprint()

    def test_from_dict_restores_exact_decimals(self, golden_cdio):
        original = compute(golden_cdio)
        restored = CDOO.from_dict(json.loads(original.to_json()))
        assert restored == original
        assert str(restored.fee_analysis.derived_contract_value) == "1524.60"
        assert str(restored.fee_analysis.effective_margin_percent) == "0.090909"

    def test_from_dict_missing_section(self, golden_cdio):
        data = compute(golden_cdio).to_dict()
        del data["cost_stack"]
        with pytest.raises(MissingFieldError):
            CDOO.from_dict(data)

    def test_cost_stack_minor_units(self, golden_cdio):
        stack = compute(golden_cdio).cost_stack
        assert stack.minor_units()["total_cost"] == 138600

    def test_default_meta(self):
        meta = RoundingMeta()
        assert meta.rounding == "HALF_AWAY_FROM_ZERO"
        assert meta.currency_decimals == 2

    def test_money_fields_are_two_place(self, golden_cdio):
        fee = compute(golden_cdio).fee_analysis
        assert fee.fee_dollars == Decimal("138.60")
        assert fee.fee_dollars.as_tuple().exponent == -2
