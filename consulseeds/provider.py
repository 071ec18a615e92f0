"""
Consul-backed seed provider.

Resolves the addresses a starting node contacts to join the cluster. The
registry is queried in one of two modes:

- key-value mode: every key under a prefix names a seed in its last path
  segment (``cassandra/seeds/10.0.0.1``)
- catalog mode: every instance of a service is a seed, optionally limited
  by tags

When the lookup yields no usable address the statically configured seeds
are returned instead.
"""

from typing import List, Mapping, Optional, Tuple

from .client import ConsulClient, registry_base_url
from .config import SeedProviderConfig
from .logger import StructuredLogger, get_logger
from .normalize import deduplicate, host_from_key, split_list, tags_allowed
from .resolve import SeedAddress, resolve_all, to_address


class ConsulSeedProvider:
    """
    Seed provider backed by a Consul registry with a static fallback list.

    Construction never contacts the registry. Each resolve_seeds() call
    issues one fresh registry request.
    """

    def __init__(
        self,
        params: Mapping[str, str],
        config: Optional[SeedProviderConfig] = None,
        client: Optional[ConsulClient] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            params: Provider parameters; "seeds" is the comma-separated fallback list
            config: Registry options (default: read from CONSUL_* environment)
            client: Registry client to use instead of one built from config.url
            logger: Logger to use instead of the global one
        """
        self.logger = logger or get_logger()
        self.config = config or SeedProviderConfig.from_env()
        self.default_seeds: Tuple[SeedAddress, ...] = tuple(
            resolve_all(deduplicate(split_list(params.get("seeds"))), self.logger)
        )

        if client is None:
            base_url = None
            try:
                base_url = registry_base_url(self.config.url)
            except ValueError as e:
                self.logger.error("Could not parse consul.url", url=self.config.url, error=str(e))
            client = ConsulClient(base_url, timeout=self.config.timeout, logger=self.logger)
        self.client = client

        self.logger.debug(
            "Seed provider configured",
            consul_url=self.config.url,
            mode=self.config.mode,
            kv_prefix=self.config.kv_prefix,
            service_name=self.config.service_name,
            service_tags=list(self.config.service_tags),
            default_seeds=[str(s) for s in self.default_seeds],
        )

    def close(self):
        """Release the registry client's HTTP resources."""
        close = getattr(self.client, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "ConsulSeedProvider":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def resolve_seeds(self) -> Tuple[SeedAddress, ...]:
        """
        Look up the current seeds.

        Returns:
            Registry seeds in registry order, or the fallback seeds when the
            registry yields none

        Raises:
            RegistryError: If the registry cannot be queried
        """
        if self.config.kv_enabled:
            seeds = self._key_value_seeds()
        else:
            seeds = self._service_seeds()

        if not seeds:
            self.logger.record_fallback()
            seeds = list(self.default_seeds)

        self.logger.info(f"Seeds {[str(s) for s in seeds]}")
        return tuple(seeds)

    def _key_value_seeds(self) -> List[SeedAddress]:
        seeds: List[SeedAddress] = []
        records = self.client.get_kv_values(self.config.kv_prefix) or []
        self.logger.record_lookup("kv", len(records))

        for record in records:
            self.logger.debug("kv record", key=record.key)
            try:
                address = to_address(host_from_key(record.key), self.logger)
            except Exception as e:
                self.logger.warning("Error while processing kv record", key=record.key, error=repr(e))
                continue
            if address is not None:
                seeds.append(address)
        return seeds

    def _service_seeds(self) -> List[SeedAddress]:
        seeds: List[SeedAddress] = []
        required = self.config.service_tags
        services = self.client.get_catalog_service(self.config.service_name)
        self.logger.record_lookup("catalog", len(services))

        for service in services:
            self.logger.debug("Service", node=service.node, address=service.effective_address)
            try:
                # A service qualifies when its own tags are within the required set
                if required and not tags_allowed(service.service_tags, required):
                    self.logger.debug(
                        "Service skipped by tag filter",
                        service_tags=service.service_tags,
                        required_tags=list(required),
                    )
                    continue
                address = to_address(service.effective_address, self.logger)
            except Exception as e:
                self.logger.warning("Error while processing service", node=service.node, error=repr(e))
                continue
            if address is not None:
                seeds.append(address)
        return seeds
