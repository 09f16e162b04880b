"""Tests for property validation and settings loading."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from couchbench.config import CouchbaseProperties, load_settings, resolve_config
from couchbench.core.errors import ConfigurationError
from couchbench.core.models import (
    ConnectionParams,
    DurabilityLevel,
    LegacyDurability,
    LevelDurability,
)


class TestResolveConfig:
    """Test harness property resolution."""

    def test_defaults(self) -> None:
        config = resolve_config({})
        assert config.durability == LegacyDurability(persist_to=0, replicate_to=0)
        assert config.kv_timeout_millis == 10000
        assert config.connection == ConnectionParams(
            host="127.0.0.1",
            bucket="ycsb",
            username="Administrator",
            password="password",
            kv_timeout_millis=10000,
            kv_endpoints=1,
        )

    def test_prefixed_keys(self) -> None:
        config = resolve_config(
            {
                "couchbase.host": "10.0.0.7",
                "couchbase.bucket": "bench",
                "couchbase.username": "ycsb",
                "couchbase.password": "secret",
                "couchbase.kvTimeoutMillis": "2500",
                "couchbase.kvEndpoints": "4",
                "couchbase.persistTo": "2",
                "couchbase.replicateTo": "1",
            }
        )
        assert config.durability == LegacyDurability(persist_to=2, replicate_to=1)
        assert config.kv_timeout_millis == 2500
        assert config.connection.host == "10.0.0.7"
        assert config.connection.bucket == "bench"
        assert config.connection.username == "ycsb"
        assert config.connection.password == "secret"
        assert config.connection.kv_endpoints == 4

    def test_bare_keys(self) -> None:
        config = resolve_config({"host": "cb1", "persistTo": "4", "replicateTo": "3"})
        assert config.connection.host == "cb1"
        assert config.durability == LegacyDurability(persist_to=4, replicate_to=3)

    def test_unrelated_keys_ignored(self) -> None:
        config = resolve_config({"recordcount": "1000", "workload": "core"})
        assert config.durability == LegacyDurability(0, 0)

    @pytest.mark.parametrize("level", ["0", "1", "2", "3"])
    def test_level_selected_when_present(self, level: str) -> None:
        config = resolve_config({"couchbase.durability": level})
        assert config.durability == LevelDurability(DurabilityLevel(int(level)))

    def test_level_ignores_legacy_values(self) -> None:
        config = resolve_config(
            {
                "couchbase.durability": "1",
                "couchbase.persistTo": "9",
                "couchbase.replicateTo": "not-a-number",
            }
        )
        assert config.durability == LevelDurability(DurabilityLevel.MAJORITY)

    @pytest.mark.parametrize(
        "key,value,message",
        [
            ("persistTo", "5", '"couchbase.persistTo" must be between 0 and 4'),
            ("persistTo", "-1", '"couchbase.persistTo" must be between 0 and 4'),
            ("replicateTo", "4", '"couchbase.replicateTo" must be between 0 and 3'),
            ("durability", "4", '"couchbase.durability" must be between 0 and 3'),
        ],
    )
    def test_out_of_range(self, key: str, value: str, message: str) -> None:
        with pytest.raises(ConfigurationError, match=message):
            resolve_config({f"couchbase.{key}": value})

    @pytest.mark.parametrize(
        "key", ["persistTo", "replicateTo", "durability", "kvEndpoints", "kvTimeoutMillis"]
    )
    @pytest.mark.parametrize("value", ["lots", "2.0", " 2 ", "1_0", "2e0", "", "0x2"])
    def test_non_numeric_values_rejected(self, key: str, value: str) -> None:
        with pytest.raises(ConfigurationError, match=key) as exc:
            resolve_config({f"couchbase.{key}": value})
        assert exc.value.key == key

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("persistTo", LegacyDurability(persist_to=2, replicate_to=0)),
            ("replicateTo", LegacyDurability(persist_to=0, replicate_to=2)),
            ("durability", LevelDurability(DurabilityLevel.MAJORITY_AND_PERSIST_TO_ACTIVE)),
        ],
    )
    def test_signed_integers_accepted(self, key: str, expected: object) -> None:
        assert resolve_config({f"couchbase.{key}": "+2"}).durability == expected

    def test_negative_count_is_out_of_range(self) -> None:
        with pytest.raises(ConfigurationError, match="must be between 0 and 4"):
            resolve_config({"couchbase.persistTo": "-1"})

    @pytest.mark.parametrize("key", ["kvEndpoints", "kvTimeoutMillis"])
    def test_non_positive_values_rejected(self, key: str) -> None:
        with pytest.raises(ConfigurationError, match=key):
            resolve_config({f"couchbase.{key}": "0"})

    def test_configuration_error_chains_validation_error(self) -> None:
        with pytest.raises(ConfigurationError) as exc:
            resolve_config({"couchbase.kvTimeoutMillis": "soon"})
        assert isinstance(exc.value.__cause__, ValidationError)

    def test_password_not_in_repr(self) -> None:
        props = CouchbaseProperties.model_validate({"couchbase.password": "hunter2"})
        assert "hunter2" not in repr(props)
        assert "hunter2" not in repr(props.connection_params())


class TestSettings:
    """Test command settings loading from the environment."""

    def test_load_settings_with_defaults(self) -> None:
        settings = load_settings()
        assert settings.table == "usertable"
        assert settings.record_count == 100
        assert settings.threads == 1
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_client_properties_from_env(self) -> None:
        with patch.dict(
            os.environ,
            {
                "COUCHBASE_HOST": "cb.internal",
                "COUCHBASE_DURABILITY": "1",
                "COUCHBASE_KV_TIMEOUT_MILLIS": "500",
            },
        ):
            settings = load_settings()

        properties = settings.client_properties()
        assert properties["couchbase.host"] == "cb.internal"
        assert properties["couchbase.durability"] == "1"
        assert properties["couchbase.kvTimeoutMillis"] == "500"
        assert "couchbase.persistTo" not in properties

        config = resolve_config(properties)
        assert config.durability == LevelDurability(DurabilityLevel.MAJORITY)
        assert config.kv_timeout_millis == 500

    def test_load_settings_from_env_file(self, tmp_path) -> None:
        env_file = tmp_path / "bench.env"
        env_file.write_text("COUCHBASE_BUCKET=bench\nTHREADS=4\n")
        settings = load_settings(str(env_file))
        assert settings.couchbase_bucket == "bench"
        assert settings.threads == 4

    @pytest.mark.parametrize("name", ["RECORD_COUNT", "FIELD_COUNT", "FIELD_LENGTH", "THREADS"])
    def test_workload_sizes_must_be_positive(self, name: str) -> None:
        with patch.dict(os.environ, {name: "0"}):
            with pytest.raises(ValidationError):
                load_settings()
