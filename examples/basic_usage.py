#!/usr/bin/env python3
"""
Basic Usage Example - Proxy Migration

Runs a bootstrap and a full migration against the in-memory execution
environment and shows how to:
- Reuse an already-deployed feature instead of redeploying it
- Inspect the operable proxy returned by a migration
- Handle a rejected finalize

Run: python examples/basic_usage.py
"""

from web3 import Web3

from proxy_migration import bootstrap_migrate, full_migrate
from proxy_migration.deployment.base import TxDefaults
from proxy_migration.deployment.memory import InMemoryDeployer
from proxy_migration.errors import FinalizeFailure
from proxy_migration.logging import configure_logging
from proxy_migration.models.features import FEATURE_ARTIFACTS, Role

SENDER = Web3.to_checksum_address("0x" + "5e" * 20)
OWNER = Web3.to_checksum_address("0x" + "0a" * 20)


def main():
    configure_logging(level="INFO")
    tx_defaults = TxDefaults(from_address=SENDER)

    print("=== Bootstrap migration ===")
    deployer = InMemoryDeployer()
    proxy = bootstrap_migrate(OWNER, deployer, tx_defaults)
    print(f"Proxy {proxy.address} owned by {proxy.owner()}")

    print("\n=== Full migration reusing a token spender ===")
    spender = deployer.deploy(FEATURE_ARTIFACTS[Role.TOKEN_SPENDER], tx_defaults)
    full = full_migrate(
        OWNER,
        deployer,
        tx_defaults,
        overrides={Role.TOKEN_SPENDER: spender.address},
        config={"protocol_fee_multiplier": 150000},
    )
    for role, address in full.features.as_dict().items():
        print(f"  {role.value:20s} {address}")
    print(f"Protocol fee multiplier: {full.get_protocol_fee_multiplier()}")
    print(f"Transformer deployer: {full.get_transformer_deployer()}")

    print("\n=== Rejected finalize ===")
    try:
        full_migrate(OWNER, InMemoryDeployer(reject_finalize=True), tx_defaults)
    except FinalizeFailure as e:
        print(f"Finalize failed for proxy {e.proxy_address}: {e}")


if __name__ == "__main__":
    main()
