# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the configuration system."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from chainedtx.core.config import Config, config_properties
from chainedtx.kernel.exceptions import ConfigurationException


class TestConfig:
    def test_nested_lookup(self):
        config = Config({"dataSource": {"url": "sqlite://", "pool": {"size": 10}}})
        assert config.get("dataSource.url") == "sqlite://"
        assert config.get("dataSource.pool.size") == 10

    def test_default_for_missing_key(self):
        config = Config({"dataSource": "not-a-mapping"})
        assert config.get("missing.key", "fallback") == "fallback"
        assert config.get("dataSource.url", "fallback") == "fallback"

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("CHAINEDTX_LOGGING_FORMAT", "json")
        config = Config({"chainedtx": {"logging": {"format": "console"}}})
        assert config.get("chainedtx.logging.format") == "json"

    def test_get_section(self):
        config = Config({"dataSource_audit": {"url": "sqlite://", "transactional": False}})
        assert config.get_section("dataSource_audit") == {"url": "sqlite://", "transactional": False}
        assert config.get_section("dataSource_missing") == {}

    def test_to_dict_is_a_copy(self):
        config = Config({"a": 1})
        config.to_dict()["b"] = 2
        assert config.to_dict() == {"a": 1}


class TestPlaceholders:
    def test_config_reference(self):
        config = Config({"db": {"host": "localhost"}, "dataSource": {"url": "postgresql://${db.host}/orders"}})
        assert config.get("dataSource.url") == "postgresql://localhost/orders"

    def test_env_reference(self, monkeypatch):
        monkeypatch.setenv("ORDERS_DB_URL", "sqlite:///orders.db")
        config = Config({"dataSource": {"url": "${ORDERS_DB_URL}"}})
        assert config.get("dataSource.url") == "sqlite:///orders.db"

    def test_default_value(self):
        config = Config({"dataSource": {"url": "${orders.url:sqlite://}"}})
        assert config.get("dataSource.url") == "sqlite://"

    def test_unresolvable_raises(self):
        config = Config({"dataSource": {"url": "${chainedtx_test_nowhere}"}})
        with pytest.raises(ConfigurationException) as exc_info:
            config.get("dataSource.url")
        assert exc_info.value.code == "CONFIG_PLACEHOLDER_UNRESOLVED"

    def test_circular_reference_raises(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ConfigurationException):
            config.get("a")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="pool")
        @dataclass
        class PoolProperties:
            size: int = 5
            timeout: float = 1.0
            enabled: bool = False

        config = Config({"pool": {"size": 20, "enabled": True}})
        props = config.bind(PoolProperties)
        assert props.size == 20
        assert props.timeout == 1.0
        assert props.enabled is True

    def test_bind_coerces_env_strings(self, monkeypatch):
        @config_properties(prefix="pool")
        @dataclass
        class PoolProperties:
            size: int = 5
            enabled: bool = False

        monkeypatch.setenv("CHAINEDTX_POOL_SIZE", "12")
        monkeypatch.setenv("CHAINEDTX_POOL_ENABLED", "yes")
        props = Config({}).bind(PoolProperties)
        assert props.size == 12
        assert props.enabled is True

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            size: int = 5

        with pytest.raises(ConfigurationException):
            Config({}).bind(Plain)


class TestFromFile:
    def test_yaml_with_framework_defaults(self, tmp_path: Path):
        path = tmp_path / "chainedtx.yaml"
        path.write_text("dataSource:\n  url: sqlite://\n")
        config = Config.from_file(path)
        assert config.get("dataSource.url") == "sqlite://"
        assert config.get("chainedtx.transaction.chained.enabled") is True
        assert config.loaded_sources == ["chainedtx-defaults.yaml (framework defaults)", str(path)]

    def test_toml(self, tmp_path: Path):
        path = tmp_path / "chainedtx.toml"
        path.write_text('[dataSource_audit]\nurl = "sqlite://"\ntransactional = false\n')
        config = Config.from_file(path, load_defaults=False)
        assert config.get_section("dataSource_audit") == {"url": "sqlite://", "transactional": False}

    def test_missing_file_keeps_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("chainedtx.logging.format") == "console"

    def test_profile_overlays_in_order(self, tmp_path: Path):
        base = tmp_path / "chainedtx.yaml"
        base.write_text("dataSource:\n  url: base\n  pooled: true\n")
        (tmp_path / "chainedtx-dev.yaml").write_text("dataSource:\n  url: dev\n")
        (tmp_path / "chainedtx-local.yaml").write_text("dataSource:\n  url: local\n")

        config = Config.from_file(base, active_profiles=["dev", "local", "absent"], load_defaults=False)
        assert config.get("dataSource.url") == "local"
        assert config.get("dataSource.pooled") is True
        assert len(config.loaded_sources) == 3
