#!/usr/bin/env python3
"""Run a bootstrap or full proxy migration.

Usage:
    python scripts/migrate.py full --owner 0x... --sender 0x... \
        --rpc-url http://localhost:8545 --artifacts-dir ./artifacts --network ganache

    python scripts/migrate.py bootstrap --owner 0x... --sender 0x... --dry-run
"""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from web3 import Web3

from proxy_migration import bootstrap_migrate, full_migrate
from proxy_migration.config.loader import ConfigLoader
from proxy_migration.deployment.artifacts import ArtifactStore
from proxy_migration.deployment.base import TxDefaults
from proxy_migration.deployment.memory import InMemoryDeployer
from proxy_migration.deployment.web3_deployer import Web3Deployer
from proxy_migration.errors import MigrationError
from proxy_migration.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deploy and finalize a modular proxy")
    parser.add_argument("mode", choices=["bootstrap", "full"], help="Feature set to migrate")
    parser.add_argument("--owner", required=True, help="Address the proxy is handed to")
    parser.add_argument("--sender", required=True, help="Deploying account")
    parser.add_argument("--network", default="ganache", help="Network entry in networks.yaml")
    parser.add_argument("--config-dir", type=Path, default=None, help="Directory holding networks.yaml")
    parser.add_argument("--rpc-url", default="http://localhost:8545", help="JSON-RPC endpoint")
    parser.add_argument("--artifacts-dir", type=Path, default=project_root / "artifacts",
                        help="Directory of contract build artifacts")
    parser.add_argument("--gas", type=int, default=None, help="Gas limit per transaction")
    parser.add_argument("--dry-run", action="store_true",
                        help="Run against the in-memory environment instead of a node")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, format_json=args.json_logs)

    loader = ConfigLoader.create(args.config_dir)
    tx_defaults = TxDefaults(from_address=args.sender, gas=args.gas)

    if args.dry_run:
        deployer = InMemoryDeployer()
    else:
        web3 = Web3(Web3.HTTPProvider(args.rpc_url))
        deployer = Web3Deployer(web3, ArtifactStore(args.artifacts_dir))

    try:
        overrides = loader.feature_overrides(args.network)
        if args.mode == "bootstrap":
            proxy = bootstrap_migrate(args.owner, deployer, tx_defaults, overrides)
        else:
            config = loader.merge_config(args.network)
            proxy = full_migrate(args.owner, deployer, tx_defaults, overrides, config)
    except MigrationError as e:
        print(f"❌ Migration failed at step '{e.step}': {e}")
        return 1

    print(f"✅ Proxy deployed at {proxy.address}")
    for role, address in proxy.features.as_dict().items():
        print(f"  • {role.value}: {address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
