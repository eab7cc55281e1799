"""Tests for the typed configuration store."""

import math

import numpy as np
import pytest

from rlharness.core.config import Config, ConfigValue, ValueKind, load_config
from rlharness.core.errors import ConfigError, HarnessError


class TestConfigGet:
    """Test typed lookup with defaults."""

    def test_missing_key_returns_default(self):
        """Test every kind falls back to the supplied default."""
        config = Config()
        assert config.get("n", 7) == 7
        assert config.get("x", 2.5) == 2.5
        assert config.get("s", "fallback") == "fallback"
        assert config.get("b", True) is True

    def test_matching_kind_returns_value(self):
        """Test values come back when the requested kind matches."""
        config = Config.create({"x": 5, "y": "hi", "z": True, "w": 0.25})
        assert config.get("x", 0) == 5
        assert config.get("y", "") == "hi"
        assert config.get("z", False) is True
        assert config.get("w", 0.0) == 0.25

    def test_int_not_widened_to_real(self):
        """Test an int value requested as real yields the default."""
        config = Config.create({"x": 5})
        assert config.get("x", 0.0) == 0.0
        assert config.get_float("x") == 0.0

    def test_real_not_narrowed_to_int(self):
        """Test a real value requested as int yields the default."""
        config = Config.create({"x": 5.0})
        assert config.get("x", 3) == 3

    def test_bool_is_not_an_int(self):
        """Test bool and int stay separate kinds."""
        config = Config.create({"flag": True, "count": 1})
        assert config.get("flag", 0) == 0
        assert config.get("count", False) is False

    def test_explicit_kind_with_none_default(self):
        """Test an explicit kind works with a None default."""
        config = Config.create({"seed": 3, "name": "a"})
        assert config.get_int("seed", None) == 3
        assert config.get_int("name", None) is None
        assert config.get("seed", None, kind=int) == 3
        assert config.get("seed", None, kind=ValueKind.REAL) is None

    def test_raw_lookup_without_default(self):
        """Test get without default or kind returns the stored value."""
        config = Config.create({"x": 5})
        assert config.get("x") == 5
        assert config.get("missing") is None

    def test_typed_getter_defaults(self):
        """Test typed getters use zero-like defaults."""
        config = Config()
        assert config.get_int("a") == 0
        assert config.get_float("a") == 0.0
        assert config.get_str("a") == ""
        assert config.get_bool("a") is False

    def test_get_value_carries_kind(self):
        """Test the tagged value exposes its kind."""
        config = Config.create({"x": 1.5})
        assert config.get_value("x") == ConfigValue(ValueKind.REAL, 1.5)
        assert config.get_value("missing") is None

    def test_numpy_scalars_are_unwrapped(self):
        """Test numpy scalars are stored as plain Python values."""
        config = Config.create({"i": np.int64(4), "f": np.float32(0.5), "b": np.bool_(True)})
        assert config.get("i", 0) == 4
        assert config.get("f", 0.0) == 0.5
        assert config.get("b", False) is True

    def test_set_rejects_unsupported_values(self):
        """Test non-scalar values raise TypeError."""
        config = Config()
        with pytest.raises(TypeError):
            config.set("x", [1, 2])
        with pytest.raises(TypeError):
            config.set("x", None)

    def test_set_rejects_empty_key(self):
        """Test the empty key, which the text format cannot express, is refused."""
        with pytest.raises(ConfigError):
            Config.create({"": 1})
        with pytest.raises(ConfigError):
            Config.from_yaml_text('"": 1\n')

    def test_set_overwrites(self):
        """Test set replaces value and kind."""
        config = Config.create({"x": 1})
        config.set("x", "one")
        assert config.get_str("x") == "one"
        assert config.get_int("x", -1) == -1


class TestConfigSections:
    """Test nested sections."""

    def test_missing_section_is_empty(self):
        """Test get_section returns an empty config when absent."""
        section = Config().get_section("agent_config")
        assert isinstance(section, Config)
        assert section.keys() == []

    def test_set_section_from_mapping(self):
        """Test a plain mapping is converted to a section."""
        config = Config()
        config.set_section("agent_config", {"max_force": 5.0, "inner": {"a": 1}})
        section = config.get_section("agent_config")
        assert section.get_float("max_force") == 5.0
        assert section.get_section("inner").get_int("a") == 1

    def test_values_and_sections_are_independent(self):
        """Test a scalar and a section may share a name."""
        config = Config.create({"agent": "random"})
        config.set_section("agent", {"seed": 1})
        assert config.get_str("agent") == "random"
        assert config.get_section("agent").get_int("seed") == 1
        assert config.has("agent")
        assert config.has_section("agent")

    def test_to_dict_rejects_name_collision(self):
        """Test a shared name cannot be flattened to a dict."""
        config = Config.create({"agent": "random"})
        config.set_section("agent", {"seed": 1})
        with pytest.raises(ConfigError):
            config.to_dict()

    def test_from_dict_and_to_dict(self):
        """Test nested dict conversion in both directions."""
        data = {"a": 1, "b": {"c": "x", "d": {"e": True}}}
        config = Config.from_dict(data)
        assert config.section_names() == ["b"]
        assert config.to_dict() == data

    def test_from_dict_drops_none_and_rejects_lists(self):
        """Test None is skipped and lists raise ConfigError."""
        assert Config.from_dict({"a": None}).keys() == []
        with pytest.raises(ConfigError):
            Config.from_dict({"a": [1, 2]})


class TestConfigTextFormat:
    """Test parsing and writing the line-oriented text format."""

    def test_parse_with_comments_and_trailing_comma(self):
        """Test comments, braces and trailing commas are ignored."""
        text = '{\n  # comment\n  "n": 500,\n  // another\n  "name": "random",\n  "render": false,\n}\n'
        config = Config.from_text(text)
        assert config.get("n", 0) == 500
        assert config.get("name", "") == "random"
        assert config.get("render", True) is False

    def test_parse_kinds(self):
        """Test literal kinds are inferred from their spelling."""
        config = Config.from_text('"i": -3\n"r": 1.5\n"e": 1e3\n"s": "x"\n"t": true')
        assert config.get_value("i").kind is ValueKind.INT
        assert config.get_value("r").kind is ValueKind.REAL
        assert config.get_value("e") == ConfigValue(ValueKind.REAL, 1000.0)
        assert config.get_value("s").kind is ValueKind.STRING
        assert config.get_value("t").kind is ValueKind.BOOL

    def test_special_reals(self):
        """Test Infinity, -Infinity and NaN literals."""
        config = Config.from_text('"a": Infinity\n"b": -Infinity\n"c": NaN')
        assert config.get_float("a") == math.inf
        assert config.get_float("b") == -math.inf
        assert math.isnan(config.get_float("c"))

    def test_bare_word_is_string(self):
        """Test an unquoted token becomes a string."""
        config = Config.from_text('"mode": fast')
        assert config.get_str("mode") == "fast"

    @pytest.mark.parametrize("raw,expected", [
        ("1_000", "1_000"),
        ("0x10", "0x10"),
        ("inf", "inf"),
        (".5", 0.5),
        ("+3", 3),
        ("2E-2", 0.02),
    ])
    def test_only_decimal_literals_are_numbers(self, raw, expected):
        """Test non-decimal spellings stay strings."""
        value = Config.from_text(f'"v": {raw}').get("v")
        assert value == expected
        assert type(value) is type(expected)

    def test_multiple_pairs_per_line(self):
        """Test commas outside quotes separate pairs."""
        config = Config.from_text('{"a": 1, "b": "x, y", "c": true}')
        assert config.get_int("a") == 1
        assert config.get_str("b") == "x, y"
        assert config.get_bool("c") is True

    def test_string_escapes_and_colons(self):
        """Test JSON escapes and colons inside quoted strings."""
        config = Config.from_text(r'"path": "C:\\tmp\\run \"1\""')
        assert config.get_str("path") == 'C:\\tmp\\run "1"'

    def test_last_duplicate_wins(self):
        """Test a repeated key keeps the last value."""
        config = Config.from_text('"a": 1\n"a": 2')
        assert config.get_int("a") == 2

    @pytest.mark.parametrize("text", [
        '"a" 1',
        '"": 1',
        '"a": "unterminated',
        '"a": {"b": 1}',
        '"a": [1, 2]',
        '"a":',
    ])
    def test_malformed_lines_raise(self, text):
        """Test malformed input raises ConfigError with a location."""
        with pytest.raises(ConfigError, match="<string>:1"):
            Config.from_text(text)

    def test_config_error_is_harness_error(self):
        """Test ConfigError belongs to the harness error family."""
        with pytest.raises(HarnessError):
            Config.from_text('"a" 1')

    def test_to_text_sorted_and_reparsable(self):
        """Test serialization is sorted by key and parses back unchanged."""
        config = Config.create({
            "z": 1, "a": "two", "m": 0.5, "b": True,
            "inf": math.inf, "big": 1e20, "q": 'say "hi"',
        })
        text = config.to_text()
        lines = [line.strip() for line in text.splitlines()[1:-1]]
        assert [line.split(":")[0].strip('"') for line in lines] == sorted(config.keys())
        assert Config.from_text(text) == config

    @pytest.mark.parametrize("text", ["a\u2028b", "a\u2029b", "a\x85b", "tab\there\nnewline"])
    def test_to_text_round_trip_line_separators(self, text):
        """Test strings holding Unicode line separators survive a text round trip."""
        config = Config.create({"s": text, f"key{text}": 1})
        written = config.to_text()
        assert "\u2028" not in written and "\u2029" not in written and "\x85" not in written
        assert Config.from_text(written) == config

    def test_crlf_line_endings(self):
        """Test Windows line endings parse like plain newlines."""
        config = Config.from_text('{\r\n  "a": 1,\r\n  "b": "x",\r\n}\r\n')
        assert config.get_int("a") == 1
        assert config.get_str("b") == "x"

    def test_to_text_empty(self):
        """Test an empty config writes empty braces."""
        assert Config().to_text() == "{\n}\n"

    def test_file_round_trip(self, tmp_path):
        """Test to_file/from_file preserve values and kinds."""
        path = tmp_path / "run.json"
        config = Config.create({"num_episodes": 3, "frame_delay": 0.0, "log_file": ""})
        config.to_file(path)
        assert Config.from_file(path) == config

    def test_missing_file_raises(self, tmp_path):
        """Test an unreadable file raises ConfigError."""
        with pytest.raises(ConfigError, match="Could not open"):
            Config.from_file(tmp_path / "missing.json")

    def test_unwritable_file_raises(self, tmp_path):
        """Test an unwritable path raises ConfigError."""
        with pytest.raises(ConfigError, match="Could not create"):
            Config.create({"a": 1}).to_file(tmp_path / "no" / "such" / "dir.json")


class TestConfigYaml:
    """Test YAML loading and writing."""

    def test_yaml_sections(self):
        """Test nested mappings become sections."""
        config = Config.from_yaml_text(
            "agent: random\nagent_config:\n  action_low: -2.0\n  seed: 0\nrender: false\n"
        )
        assert config.get_str("agent") == "random"
        assert config.get_bool("render", True) is False
        section = config.get_section("agent_config")
        assert section.get_float("action_low") == -2.0
        assert section.get_int("seed", None) == 0

    def test_yaml_empty_document(self):
        """Test an empty document is an empty config."""
        assert Config.from_yaml_text("") == Config()

    @pytest.mark.parametrize("text", ["- 1\n- 2\n", "a: [1, 2]\n", "a: {b\n"])
    def test_yaml_invalid(self, text):
        """Test non-mapping documents and lists raise ConfigError."""
        with pytest.raises(ConfigError):
            Config.from_yaml_text(text)

    def test_yaml_round_trip(self, tmp_path):
        """Test to_yaml then from_yaml keeps sections."""
        config = Config.create({"num_episodes": 4})
        config.set_section("environment_config", {"env_id": "Pendulum-v1", "seed": 1})
        path = tmp_path / "run.yaml"
        config.to_yaml(path)
        assert Config.from_yaml(path) == config


class TestLoadConfig:
    """Test format selection by suffix."""

    def test_yaml_suffix(self, tmp_path):
        """Test .yml files are parsed as YAML."""
        path = tmp_path / "c.yml"
        path.write_text("a:\n  b: 1\n")
        assert load_config(path).get_section("a").get_int("b") == 1

    def test_text_suffix(self, tmp_path):
        """Test other suffixes use the text format."""
        path = tmp_path / "c.cfg"
        path.write_text('{\n  // note\n  "a": 1,\n}\n')
        assert load_config(path).get_int("a") == 1

    def test_example_configs_load(self, project_root):
        """Test the shipped example configs parse."""
        text_config = load_config(project_root / "configs" / "cartpole_rule_based.json")
        assert text_config.get_str("agent") == "rule_based"
        yaml_config = load_config(project_root / "configs" / "pendulum_random.yaml")
        assert yaml_config.get_str("environment") == "gym"
        assert yaml_config.get_section("environment_config").get_str("env_id") == "Pendulum-v1"
