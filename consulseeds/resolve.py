"""Hostname to address resolution for seed entries."""

import ipaddress
import socket
from typing import Iterable, List, NamedTuple, Optional, Union

from .logger import StructuredLogger, get_logger

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class SeedAddress(NamedTuple):
    """A resolved seed: the name it was given as, and its IP address."""

    host: str
    address: IPAddress

    def __str__(self) -> str:
        return str(self.address)


def to_address(host: str, logger: Optional[StructuredLogger] = None) -> Optional[SeedAddress]:
    """Resolve host through system DNS.

    IP literals resolve without a lookup. Returns None (after logging a
    warning) when the name cannot be resolved.
    """
    log = logger or get_logger()
    if not host:
        log.record_resolution(False)
        log.warning("Error while adding seed: empty address")
        return None
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
        # sockaddr[0] may carry an IPv6 scope suffix ("fe80::1%eth0")
        ip = infos[0][4][0].split("%", 1)[0]
        seed = SeedAddress(host, ipaddress.ip_address(ip))
    except (socket.gaierror, UnicodeError, ValueError, IndexError) as e:
        log.record_resolution(False)
        log.warning(f"Error while adding seed {host}", error=str(e))
        return None
    log.record_resolution(True)
    return seed


def resolve_all(hosts: Iterable[str], logger: Optional[StructuredLogger] = None) -> List[SeedAddress]:
    """Resolve each host in order, dropping the ones that fail."""
    seeds = []
    for host in hosts:
        address = to_address(host, logger)
        if address is not None:
            seeds.append(address)
    return seeds
