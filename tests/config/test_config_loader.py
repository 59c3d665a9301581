"""
Tests for workbench configuration loading.

Verifies:
- The shipped default configuration parses to the documented values
- Checksums are deterministic and sensitive to content
- Every validation failure surfaces as ConfigError
- get_active_config emits a FEE_CONFIG_TRACE record
"""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from fee_config import DEFAULT_CONFIG_PATH, ConfigError, get_active_config
from fee_config.loader import (
    compute_checksum,
    load_yaml_file,
    parse_config,
    parse_logging,
    parse_slot_labels,
)
from fee_kernel.domain.slots import Slot

VALID_YAML = """\
config_id: test-config
version: 3
owner_name: Tester
slot_labels:
  A: Proposal
default_scenario:
  scenario_name: Small Job
  contract_type: tm
  direct_labor: 1000.00
  fringe_pct: 10
  overhead_pct: 20
  gna_pct: 5
  fee_pct: 10
logging:
  level: debug
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "workbench.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def _valid_data() -> dict:
    return {
        "config_id": "c",
        "version": 1,
        "default_scenario": {
            "scenario_name": "S",
            "direct_labor": "1.00",
            "fringe_pct": "0",
            "overhead_pct": "0",
            "gna_pct": "0",
            "fee_pct": "0",
        },
    }


class TestDefaultConfig:
    """The configuration shipped with the package."""

    def test_values(self):
        config = get_active_config()
        assert config.config_id == "fee-workbench-default"
        assert config.version == 1
        assert config.owner_name == "Analyst"
        assert config.slot_labels == {Slot.A: "Base", Slot.B: "Alt 1", Slot.C: "Alt 2"}
        assert config.logging.level == "INFO"

    def test_default_scenario(self):
        scenario = get_active_config().default_scenario
        assert scenario.scenario_name == "Proof of Concept Test 1.0"
        assert scenario.contract_type == "CPFF"
        assert scenario.direct_labor == "54254.00"
        assert scenario.fee_pct == "7.50"

    def test_path_exists(self):
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_frozen(self):
        config = get_active_config()
        with pytest.raises(FrozenInstanceError):
            config.owner_name = "Someone"

    def test_trace_emitted(self, captured_logs):
        config = get_active_config()
        (trace,) = [r for r in captured_logs() if r["message"] == "FEE_CONFIG_TRACE"]
        assert trace["trace_type"] == "FEE_CONFIG_TRACE"
        assert trace["config_id"] == "fee-workbench-default"
        assert trace["config_version"] == 1
        assert trace["config_checksum"] == config.checksum
        assert trace["source"] == str(DEFAULT_CONFIG_PATH)


class TestLoadFromFile:
    def test_custom_file(self, tmp_path):
        config = get_active_config(_write(tmp_path, VALID_YAML))
        assert config.config_id == "test-config"
        assert config.version == 3
        assert config.slot_labels[Slot.A] == "Proposal"
        assert config.slot_labels[Slot.B] == "Alt 1"
        assert config.logging.level == "DEBUG"

    def test_yaml_numbers_become_text(self, tmp_path):
        scenario = get_active_config(_write(tmp_path, VALID_YAML)).default_scenario
        assert scenario.direct_labor == "1000.0"
        assert scenario.fringe_pct == "10"
        assert scenario.contract_type == "TM"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read configuration"):
            get_active_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Malformed YAML"):
            load_yaml_file(_write(tmp_path, "config_id: [unclosed\n"))

    def test_top_level_list(self, tmp_path):
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_yaml_file(_write(tmp_path, "- a\n- b\n"))

    def test_error_code(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            get_active_config(tmp_path / "absent.yaml")
        assert exc_info.value.code == "CONFIG_ERROR"


class TestParseConfig:
    """Validation of the raw mapping."""

    def test_minimal(self):
        config = parse_config(_valid_data())
        assert config.owner_name == ""
        assert config.default_scenario.contract_type == "CPFF"
        assert config.logging.level == "INFO"

    @pytest.mark.parametrize("key", ["config_id", "version", "default_scenario"])
    def test_missing_top_level_key(self, key):
        data = _valid_data()
        del data[key]
        with pytest.raises(ConfigError, match=f"Missing required configuration key: {key}"):
            parse_config(data)

    def test_missing_scenario_key(self):
        data = _valid_data()
        del data["default_scenario"]["fee_pct"]
        with pytest.raises(ConfigError, match="default_scenario.fee_pct"):
            parse_config(data)

    @pytest.mark.parametrize("version", ["1", True, 1.5])
    def test_version_must_be_int(self, version):
        data = _valid_data()
        data["version"] = version
        with pytest.raises(ConfigError, match="version must be an integer"):
            parse_config(data)

    def test_scenario_must_be_mapping(self):
        data = _valid_data()
        data["default_scenario"] = "none"
        with pytest.raises(ConfigError, match="default_scenario must be a mapping"):
            parse_config(data)

    def test_bad_contract_type(self):
        data = _valid_data()
        data["default_scenario"]["contract_type"] = "FFP"
        with pytest.raises(ConfigError, match="contract_type"):
            parse_config(data)

    def test_bad_slot_label_key(self):
        with pytest.raises(ConfigError, match="Invalid slot"):
            parse_slot_labels({"D": "Extra"})

    def test_empty_slot_label(self):
        with pytest.raises(ConfigError, match="Empty label for slot B"):
            parse_slot_labels({"b": "  "})

    def test_bad_log_level(self):
        with pytest.raises(ConfigError, match="logging.level"):
            parse_logging({"level": "chatty"})


class TestChecksum:
    def test_deterministic(self):
        assert compute_checksum(_valid_data()) == compute_checksum(_valid_data())
        assert len(compute_checksum(_valid_data())) == 64

    def test_key_order_irrelevant(self):
        data = _valid_data()
        reordered = dict(reversed(list(data.items())))
        assert compute_checksum(data) == compute_checksum(reordered)

    def test_content_sensitive(self):
        data = _valid_data()
        other = _valid_data()
        other["version"] = 2
        assert compute_checksum(data) != compute_checksum(other)

    def test_same_file_same_checksum(self, tmp_path):
        path = _write(tmp_path, VALID_YAML)
        assert get_active_config(path).checksum == get_active_config(path).checksum
        assert get_active_config(path).checksum != get_active_config().checksum
