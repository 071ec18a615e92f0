"""Cluster seed discovery through a Consul registry."""

__version__ = "0.1.0"

from .client import CatalogService, ConsulClient, KeyValue, RegistryError
from .config import ConfigError, SeedProviderConfig
from .provider import ConsulSeedProvider
from .resolve import SeedAddress

__all__ = [
    "CatalogService",
    "ConfigError",
    "ConsulClient",
    "ConsulSeedProvider",
    "KeyValue",
    "RegistryError",
    "SeedAddress",
    "SeedProviderConfig",
]
