"""Default deployment parameters for full feature migrations."""

from dataclasses import dataclass, fields
from typing import Any, Optional

NULL_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_PROTOCOL_FEE_MULTIPLIER = 70000


@dataclass(frozen=True)
class DeploymentConfig:
    """Environment-specific parameters independent of module identity."""
    # Constructor argument for proxy-dependent features
    proxy_address: str = NULL_ADDRESS

    # Limit order settlement
    peer_asset_address: str = NULL_ADDRESS           # Wrapped native asset
    staking_system_address: str = NULL_ADDRESS       # Protocol fee collector
    protocol_fee_multiplier: int = DEFAULT_PROTOCOL_FEE_MULTIPLIER

    # Registered as transformer deployer at finalize; None means the sender
    deployer_of_record: Optional[str] = None


@dataclass(frozen=True)
class FinalizeOptions:
    """Options passed to the full migrator's finalize entry point."""
    proxy_address: str
    peer_asset_address: str
    staking_system_address: str
    protocol_fee_multiplier: int
    deployer_of_record: str

    @classmethod
    def from_config(cls, config: DeploymentConfig, sender: str) -> "FinalizeOptions":
        """Build options from a merged config, defaulting the deployer of record to the sender."""
        return cls(
            proxy_address=config.proxy_address,
            peer_asset_address=config.peer_asset_address,
            staking_system_address=config.staking_system_address,
            protocol_fee_multiplier=config.protocol_fee_multiplier,
            deployer_of_record=config.deployer_of_record or sender,
        )

    def abi_struct(self) -> dict[str, Any]:
        """Encode as the on-chain MigrateOpts struct."""
        return {"transformerDeployer": self.deployer_of_record}


def get_default_deploy_config() -> DeploymentConfig:
    """Get the default deployment configuration instance."""
    return DeploymentConfig()


def deploy_config_keys() -> set[str]:
    """Names of every recognized DeploymentConfig option."""
    return {f.name for f in fields(DeploymentConfig)}
