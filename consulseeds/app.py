import argparse

from .env import load_env

from . import __version__
from .client import RegistryError
from .config import ConfigError, SeedProviderConfig
from .logger import get_logger
from .normalize import split_list
from .provider import ConsulSeedProvider


def build_config(args: argparse.Namespace) -> SeedProviderConfig:
    try:
        config = SeedProviderConfig.from_env(strict=True)
    except ConfigError as e:
        raise SystemExit(str(e))
    if getattr(args, "timeout", None) is not None and args.timeout <= 0:
        raise SystemExit("--timeout must be a positive number of seconds")
    tags = tuple(split_list(args.tags)) if getattr(args, "tags", None) is not None else None
    return config.with_overrides(
        url=getattr(args, "url", None),
        kv_enabled=True if getattr(args, "kv", False) else None,
        kv_prefix=getattr(args, "kv_prefix", None),
        service_name=getattr(args, "service", None),
        service_tags=tags,
        timeout=getattr(args, "timeout", None),
    )


def cmd_resolve(args: argparse.Namespace) -> None:
    config = build_config(args)
    logger = get_logger()
    provider = ConsulSeedProvider({"seeds": args.seeds or ""}, config=config)
    try:
        seeds = provider.resolve_seeds()
    except RegistryError as e:
        raise SystemExit(str(e))
    finally:
        provider.close()
    for seed in seeds:
        if seed.host != str(seed.address):
            print(f"{seed.address}\t{seed.host}")
        else:
            print(seed.address)
    logger.log_metrics_summary()


def cmd_config(args: argparse.Namespace) -> None:
    config = build_config(args)
    for key, value in config.as_properties().items():
        print(f"{key}={value}")


def _add_registry_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--url", help="Registry URL (or set CONSUL_URL; default http://localhost:8500/)")
    p.add_argument("--kv", action="store_true", help="Use key-value mode instead of the service catalog")
    p.add_argument("--kv-prefix", help="KV prefix holding one key per seed (default cassandra/seeds)")
    p.add_argument("--service", help="Catalog service name (default cassandra)")
    p.add_argument("--tags", help="Comma-separated tags a service may carry (catalog mode)")
    p.add_argument("--timeout", type=float, help="HTTP timeout in seconds (default 15)")


def main():
    # Load .env if present (CONSUL_URL, CONSUL_KV_ENABLED, etc.)
    load_env()
    parser = argparse.ArgumentParser(prog="consul-seeds", description="Resolve cluster seeds from Consul")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    res = subparsers.add_parser("resolve", help="Query the registry and print the seed addresses")
    res.add_argument("--seeds", help="Comma-separated fallback seeds used when the registry has none")
    _add_registry_options(res)
    res.set_defaults(func=cmd_resolve)

    cfg = subparsers.add_parser("config", help="Print the effective registry configuration")
    _add_registry_options(cfg)
    cfg.set_defaults(func=cmd_config)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
