"""
Minimal read-only client for the Consul HTTP API.

Covers the two lookups seed resolution needs: recursive KV reads under a
prefix and catalog reads for a service. Transport and protocol failures
are raised as RegistryError; a single malformed record is logged and
skipped.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlparse

import requests

from .logger import StructuredLogger, get_logger

DEFAULT_PORT = 8500


class RegistryError(Exception):
    """Raised when the registry cannot be queried or returns garbage."""
    pass


@dataclass(frozen=True)
class KeyValue:
    key: str
    value: Optional[str] = None  # base64 text as returned by Consul

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "KeyValue":
        if not isinstance(data, dict):
            raise TypeError(f"KV record must be an object, got {data!r}")
        key = data["Key"]
        if not isinstance(key, str):
            raise ValueError(f"KV key must be a string, got {key!r}")
        return cls(key=key, value=data.get("Value"))

    def decoded_value(self) -> Optional[bytes]:
        if self.value is None:
            return None
        try:
            return base64.b64decode(self.value)
        except (binascii.Error, ValueError):
            return None


@dataclass(frozen=True)
class CatalogService:
    node: str
    address: str
    service_name: str
    service_address: str
    service_tags: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CatalogService":
        if not isinstance(data, dict):
            raise TypeError(f"Catalog record must be an object, got {data!r}")
        tags = data.get("ServiceTags") or []
        if not isinstance(tags, list):
            raise ValueError(f"ServiceTags must be a list, got {tags!r}")
        return cls(
            node=data.get("Node") or "",
            address=data.get("Address") or "",
            service_name=data.get("ServiceName") or "",
            service_address=data.get("ServiceAddress") or "",
            service_tags=[str(t) for t in tags if t is not None],
        )

    @property
    def effective_address(self) -> str:
        """Service address, or the node address when none is registered."""
        return self.service_address or self.address


def registry_base_url(url: str) -> str:
    """
    Reduce a configured registry URL to scheme://host:port.

    Any path on the URL is ignored; a missing port means Consul's 8500.

    Raises:
        ValueError: If the URL has no usable scheme, host or port
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Unsupported registry URL scheme: {url!r}")
    host = parsed.hostname
    if not host:
        raise ValueError(f"Registry URL has no host: {url!r}")
    port = parsed.port or DEFAULT_PORT  # .port raises ValueError when out of range
    if ":" in host:
        host = f"[{host}]"
    return f"{parsed.scheme}://{host}:{port}"


class ConsulClient:
    """Blocking Consul API client; one per seed provider."""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: Optional[float] = 15.0,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.logger = logger or get_logger()

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ConsulClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def get_kv_values(self, prefix: str) -> Optional[List[KeyValue]]:
        """All KV entries under prefix, or None when nothing is stored there."""
        path = "/v1/kv/" + quote(prefix.lstrip("/"), safe="/")
        data = self._get_json(path, params={"recurse": "true"}, missing_ok=True)
        if data is None:
            return None
        return self._parse_records(data, KeyValue.from_json)

    def get_catalog_service(self, name: str) -> List[CatalogService]:
        """Every catalog entry registered under the service name."""
        path = "/v1/catalog/service/" + quote(name, safe="")
        data = self._get_json(path)
        if data is None:
            return []
        return self._parse_records(data, CatalogService.from_json)

    def _get_json(self, path: str, params: Optional[dict] = None, missing_ok: bool = False):
        if self.base_url is None:
            raise RegistryError("Registry URL is not configured (see earlier parse error)")
        url = self.base_url + path
        self.logger.debug("Registry request", url=url)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            if missing_ok and resp.status_code == 404:
                return None
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            raise RegistryError(f"Registry request failed ({status}): {url}") from e
        except requests.exceptions.Timeout as e:
            raise RegistryError(f"Registry request timed out: {url}") from e
        except requests.exceptions.RequestException as e:
            raise RegistryError(f"Registry request error: {e}") from e

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RegistryError(f"Registry returned invalid JSON: {url}") from e

    def _parse_records(self, data, parse) -> list:
        if not isinstance(data, list):
            raise RegistryError(f"Expected a JSON list from registry, got {type(data).__name__}")
        records = []
        for item in data:
            try:
                records.append(parse(item))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning("Skipping malformed registry record", record=item, error=str(e))
        return records
