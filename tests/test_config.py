"""Tests for config module."""

import json

import pytest

from rpcshell.config import DEFAULT_HOST, DEFAULT_PORT, Config, load_config
from rpcshell.errors import ConfigError


class TestConfigFromDict:
    """Test config validation."""

    def test_defaults(self):
        config = Config.from_dict({})

        assert config.host == DEFAULT_HOST
        assert config.port == DEFAULT_PORT
        assert config.splash_text_path is None

    def test_int_port_normalized_to_string(self):
        assert Config.from_dict({"port": 8080}).port == "8080"

    @pytest.mark.parametrize("port", [0, 70000, "abc", True, 1.5])
    def test_invalid_port(self, port):
        with pytest.raises(ConfigError):
            Config.from_dict({"port": port})

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigError, match="Unknown config keys: colour"):
            Config.from_dict({"colour": "red"})

    def test_string_fields_type_checked(self):
        with pytest.raises(ConfigError, match="schema_path must be a string"):
            Config.from_dict({"schema_path": 3})

    def test_empty_host_rejected(self):
        with pytest.raises(ConfigError, match="host"):
            Config.from_dict({"host": ""})


class TestOverrides:
    def test_none_overrides_are_ignored(self):
        config = Config(host="a", port="1")

        assert config.with_overrides(host=None, port=None) == config

    def test_overrides_applied(self):
        config = Config().with_overrides(host="remote", port="9000", splash_text_path="~/s.txt")

        assert (config.host, config.port, config.splash_text_path) == ("remote", "9000", "~/s.txt")

    def test_override_port_validated(self):
        with pytest.raises(ConfigError):
            Config().with_overrides(port="not-a-port")


class TestLoadConfig:
    def test_load_config(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"host": "localhost", "port": 50052}), encoding="utf-8")

        config = load_config(str(path))

        assert (config.host, config.port) == ("localhost", "50052")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "missing.json"))

    def test_non_object_root(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ConfigError, match="root must be an object"):
            load_config(str(path))
