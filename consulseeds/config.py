"""
Seed provider configuration.

Options are fixed once a SeedProviderConfig is built. They can come from a
property mapping using the dotted ``consul.*`` keys, or from CONSUL_*
environment variables. Unset options take the defaults below.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

from .logger import get_logger
from .normalize import split_list

DEFAULT_URL = "http://localhost:8500/"
DEFAULT_KV_ENABLED = False
DEFAULT_KV_PREFIX = "cassandra/seeds"
DEFAULT_SERVICE_NAME = "cassandra"
DEFAULT_SERVICE_TAGS = ""
DEFAULT_TIMEOUT = 15.0

# property key -> environment variable
PROPERTY_ENV_VARS = {
    "consul.url": "CONSUL_URL",
    "consul.kv.enabled": "CONSUL_KV_ENABLED",
    "consul.kv.prefix": "CONSUL_KV_PREFIX",
    "consul.service.name": "CONSUL_SERVICE_NAME",
    "consul.service.tags": "CONSUL_SERVICE_TAGS",
    "consul.timeout": "CONSUL_TIMEOUT",
}

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when a configuration value cannot be interpreted."""
    pass


def parse_bool(value: Optional[str], key: str) -> bool:
    if value is None:
        return DEFAULT_KV_ENABLED
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def parse_timeout(value: Optional[str], key: str) -> Optional[float]:
    """Seconds as float; 'none' or '0' disables the timeout."""
    if value is None:
        return DEFAULT_TIMEOUT
    v = value.strip().lower()
    if v in ("none", "0", "0.0"):
        return None
    try:
        timeout = float(v)
    except ValueError:
        raise ConfigError(f"{key} must be a number of seconds, got {value!r}")
    if timeout < 0:
        raise ConfigError(f"{key} must not be negative, got {value!r}")
    return timeout


def _parse_or_default(parse, props: Mapping[str, str], key: str, default, strict: bool):
    try:
        return parse(props.get(key), key)
    except ConfigError as e:
        if strict:
            raise
        get_logger().error(f"Could not parse {key}, using default", value=props.get(key), default=default, error=str(e))
        return default


@dataclass(frozen=True)
class SeedProviderConfig:
    """Immutable options for ConsulSeedProvider."""

    url: str = DEFAULT_URL
    kv_enabled: bool = DEFAULT_KV_ENABLED
    kv_prefix: str = DEFAULT_KV_PREFIX
    service_name: str = DEFAULT_SERVICE_NAME
    service_tags: Tuple[str, ...] = field(default_factory=tuple)
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @property
    def mode(self) -> str:
        return "kv" if self.kv_enabled else "catalog"

    @classmethod
    def from_properties(cls, props: Mapping[str, str], strict: bool = False) -> "SeedProviderConfig":
        """
        Build a config from dotted property keys.

        A malformed consul.kv.enabled or consul.timeout is logged and the
        default used instead, unless strict is set.

        Args:
            props: Mapping such as {"consul.url": "http://consul:8500/"}
            strict: Raise instead of falling back to defaults

        Returns:
            SeedProviderConfig with defaults for every missing key

        Raises:
            ConfigError: If strict and consul.kv.enabled or consul.timeout is malformed
        """
        return cls(
            url=props.get("consul.url", DEFAULT_URL),
            kv_enabled=_parse_or_default(
                parse_bool, props, "consul.kv.enabled", DEFAULT_KV_ENABLED, strict
            ),
            kv_prefix=props.get("consul.kv.prefix", DEFAULT_KV_PREFIX),
            service_name=props.get("consul.service.name", DEFAULT_SERVICE_NAME),
            service_tags=tuple(split_list(props.get("consul.service.tags", DEFAULT_SERVICE_TAGS))),
            timeout=_parse_or_default(
                parse_timeout, props, "consul.timeout", DEFAULT_TIMEOUT, strict
            ),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, strict: bool = False) -> "SeedProviderConfig":
        """Build a config from CONSUL_* environment variables."""
        environ = os.environ if environ is None else environ
        props = {}
        for key, var in PROPERTY_ENV_VARS.items():
            if var in environ:
                props[key] = environ[var]
        return cls.from_properties(props, strict=strict)

    def with_overrides(self, **changes) -> "SeedProviderConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def as_properties(self) -> dict:
        return {
            "consul.url": self.url,
            "consul.kv.enabled": str(self.kv_enabled).lower(),
            "consul.kv.prefix": self.kv_prefix,
            "consul.service.name": self.service_name,
            "consul.service.tags": ",".join(self.service_tags),
            "consul.timeout": "none" if self.timeout is None else str(self.timeout),
        }
