"""Configuration loading for the couchbench binding.

This module provides two layers of configuration:
- Harness properties: the flat string mapping a benchmark harness hands to
  every binding, validated by ``CouchbaseProperties`` and turned into a
  ``ResolvedConfig`` by ``resolve_config``
- Process settings: environment variables and .env files for the
  ``couchbench`` command, loaded by ``load_settings``
"""

import re
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    Strict,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from couchbench.core.durability import resolve_durability
from couchbench.core.errors import ConfigurationError
from couchbench.core.models import ConnectionParams, ResolvedConfig

PROPERTY_PREFIX = "couchbase."

_LEVEL_KEYS = frozenset({"durability"})
_LEGACY_KEYS = frozenset({"persistTo", "replicateTo"})
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _property(name: str) -> AliasChoices:
    """Accept a property both as ``couchbase.<name>`` and bare ``<name>``."""
    return AliasChoices(f"{PROPERTY_PREFIX}{name}", name)


def _bare(key: str) -> str:
    return key.removeprefix(PROPERTY_PREFIX)


def _parse_int(v: Any) -> Any:
    """Parse a property string holding only an optionally signed run of digits.

    Decimal points, exponents, underscores and surrounding whitespace are
    rejected rather than coerced.
    """
    if isinstance(v, str):
        if not _INTEGER.fullmatch(v):
            raise ValueError("must be an integer")
        return int(v)
    return v


PropertyInt = Annotated[int, Strict(), BeforeValidator(_parse_int)]


class CouchbaseProperties(BaseModel):
    """Binding properties as supplied by the harness.

    Unknown keys are ignored; the harness passes its own workload
    properties through the same mapping.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    host: str = Field(default="127.0.0.1", validation_alias=_property("host"))
    bucket: str = Field(default="ycsb", validation_alias=_property("bucket"))
    username: str = Field(
        default="Administrator", validation_alias=_property("username")
    )
    password: str = Field(
        default="password", validation_alias=_property("password"), repr=False
    )
    kv_timeout_millis: PropertyInt = Field(
        default=10000,
        validation_alias=_property("kvTimeoutMillis"),
        description="Per-operation timeout in milliseconds",
    )
    kv_endpoints: PropertyInt = Field(
        default=1,
        validation_alias=_property("kvEndpoints"),
        description="KV connection pool width",
    )
    durability: PropertyInt | None = Field(
        default=None,
        validation_alias=_property("durability"),
        description="Durability level 0-3; overrides persistTo/replicateTo",
    )
    persist_to: PropertyInt = Field(default=0, validation_alias=_property("persistTo"))
    replicate_to: PropertyInt = Field(default=0, validation_alias=_property("replicateTo"))

    @model_validator(mode="before")
    @classmethod
    def drop_legacy_durability(cls, data: Any) -> Any:
        """Ignore persistTo/replicateTo entirely once a level is configured."""
        if not isinstance(data, Mapping):
            return data
        if not any(_bare(key) in _LEVEL_KEYS for key in data):
            return data
        return {key: value for key, value in data.items() if _bare(key) not in _LEGACY_KEYS}

    @field_validator("kv_timeout_millis")
    @classmethod
    def validate_kv_timeout(cls, v: int) -> int:
        """Ensure the operation timeout is positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("kv_endpoints")
    @classmethod
    def validate_kv_endpoints(cls, v: int) -> int:
        """Ensure at least one KV endpoint."""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    def connection_params(self) -> ConnectionParams:
        return ConnectionParams(
            host=self.host,
            bucket=self.bucket,
            username=self.username,
            password=self.password,
            kv_timeout_millis=self.kv_timeout_millis,
            kv_endpoints=self.kv_endpoints,
        )


def resolve_config(properties: Mapping[str, str]) -> ResolvedConfig:
    """Validate harness properties and select the durability policy.

    Args:
        properties: Flat mapping of property keys to string values.

    Returns:
        ResolvedConfig with the active durability policy, the operation
        timeout and the connection parameters.

    Raises:
        ConfigurationError: If a value is not an integer where one is
            required, or is out of range. The message names the key.
    """
    try:
        props = CouchbaseProperties.model_validate(dict(properties))
    except ValidationError as e:
        error = e.errors()[0]
        key = _bare(str(error["loc"][0])) if error["loc"] else None
        raise ConfigurationError(
            f'"{PROPERTY_PREFIX}{key}" {error["msg"].lower()}', key=key
        ) from e

    durability = resolve_durability(
        level=props.durability,
        persist_to=props.persist_to,
        replicate_to=props.replicate_to,
    )
    return ResolvedConfig(
        durability=durability,
        kv_timeout_millis=props.kv_timeout_millis,
        connection=props.connection_params(),
    )


class Settings(BaseSettings):
    """Settings for the ``couchbench`` command loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. The ``couchbase_*`` values are
    handed to ``resolve_config`` unchanged, so they are validated exactly
    like harness properties.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Binding properties (validated by resolve_config)
    couchbase_host: str | None = Field(default=None, description="Store endpoint")
    couchbase_bucket: str | None = Field(default=None, description="Bucket name")
    couchbase_username: str | None = Field(default=None, description="Username")
    couchbase_password: str | None = Field(
        default=None, description="Password", repr=False
    )
    couchbase_kv_timeout_millis: str | None = Field(
        default=None, description="Per-operation timeout in milliseconds"
    )
    couchbase_kv_endpoints: str | None = Field(
        default=None, description="KV connection pool width"
    )
    couchbase_durability: str | None = Field(
        default=None, description="Durability level 0-3"
    )
    couchbase_persist_to: str | None = Field(
        default=None, description="Legacy persist count 0-4"
    )
    couchbase_replicate_to: str | None = Field(
        default=None, description="Legacy replicate count 0-3"
    )

    # Smoke workload
    table: str = Field(default="usertable", description="Logical table name")
    record_count: int = Field(default=100, description="Records per worker")
    field_count: int = Field(default=10, description="Fields per record")
    field_length: int = Field(default=100, description="Characters per field value")
    threads: int = Field(default=1, description="Worker threads")

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("record_count", "field_count", "field_length", "threads")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Ensure workload sizes are positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    def client_properties(self) -> dict[str, str]:
        """Binding properties in harness form, only for values that are set."""
        names = {
            "host": self.couchbase_host,
            "bucket": self.couchbase_bucket,
            "username": self.couchbase_username,
            "password": self.couchbase_password,
            "kvTimeoutMillis": self.couchbase_kv_timeout_millis,
            "kvEndpoints": self.couchbase_kv_endpoints,
            "durability": self.couchbase_durability,
            "persistTo": self.couchbase_persist_to,
            "replicateTo": self.couchbase_replicate_to,
        }
        return {
            f"{PROPERTY_PREFIX}{name}": value
            for name, value in names.items()
            if value is not None
        }


def load_settings(env_file: str | None = None) -> Settings:
    """Load command settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = [
    "CouchbaseProperties",
    "Settings",
    "load_settings",
    "resolve_config",
]
