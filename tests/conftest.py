"""
Pytest configuration and shared fixtures.
"""

import ipaddress
import json
import socket
from typing import Dict, List

import pytest
import requests

from consulseeds.client import CatalogService, KeyValue
from consulseeds.logger import StructuredLogger, reset_logger


@pytest.fixture(autouse=True)
def fresh_global_logger():
    """Keep the module-level logger from leaking metrics between tests."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger(name="consulseeds.test", level="DEBUG", enable_console=False)


@pytest.fixture
def fake_dns(monkeypatch) -> Dict[str, str]:
    """Replace system DNS with a dict of name -> IP.

    IP literals always resolve; unknown names fail like a real lookup.
    Tests add entries to the returned dict.
    """
    names: Dict[str, str] = {
        "cass-1.example": "10.1.0.1",
        "cass-2.example": "10.1.0.2",
        "Node-A": "10.2.0.1",
    }

    def getaddrinfo(host, port, *args, **kwargs):
        try:
            ip = str(ipaddress.ip_address(host))
        except ValueError:
            if host not in names:
                raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
            ip = names[host]
        family = socket.AF_INET6 if ":" in ip else socket.AF_INET
        return [(family, socket.SOCK_STREAM, 6, "", (ip, 0))]

    monkeypatch.setattr(socket, "getaddrinfo", getaddrinfo)
    return names


def make_response(status_code: int = 200, payload=None, body: bytes = None) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = "http://consul.test:8500/"
    resp.encoding = "utf-8"
    if body is None:
        body = b"" if payload is None else json.dumps(payload).encode("utf-8")
    resp._content = body
    return resp


class FakeSession:
    """Stands in for requests.Session; replays queued responses or errors."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: List[dict] = []
        self.closed = False

    def close(self):
        self.closed = True

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeConsulClient:
    """In-memory registry used by provider tests."""

    def __init__(self, kv=None, services=None):
        self.kv = kv
        self.services = services or []
        self.kv_calls: List[str] = []
        self.catalog_calls: List[str] = []

    def get_kv_values(self, prefix):
        self.kv_calls.append(prefix)
        if self.kv is None:
            return None
        return [KeyValue(key=k) for k in self.kv]

    def get_catalog_service(self, name):
        self.catalog_calls.append(name)
        return list(self.services)


def service(address: str, tags=None, node: str = "node", node_address: str = "") -> CatalogService:
    return CatalogService(
        node=node,
        address=node_address,
        service_name="cassandra",
        service_address=address,
        service_tags=list(tags or []),
    )
