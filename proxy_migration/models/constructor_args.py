"""
Constructor arguments for proxy-dependent features.

Field declaration order is the positional order of the deployed module's
constructor. Adding a dependent feature means adding a dataclass here, never
passing a bare tuple.
"""

from dataclasses import dataclass, fields
from typing import Any

from ..config.defaults import DeploymentConfig


@dataclass(frozen=True)
class ConstructorArgs:
    """Base class for named constructor arguments."""

    def ordered(self) -> tuple[Any, ...]:
        """Positional constructor arguments."""
        return tuple(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class TransformERC20Args(ConstructorArgs):
    zero_ex_address: str


@dataclass(frozen=True)
class MetaTransactionsArgs(ConstructorArgs):
    zero_ex_address: str


@dataclass(frozen=True)
class LimitOrdersArgs(ConstructorArgs):
    zero_ex_address: str
    weth_address: str
    staking_address: str
    protocol_fee_multiplier: int

    @classmethod
    def from_config(cls, config: DeploymentConfig) -> "LimitOrdersArgs":
        return cls(
            zero_ex_address=config.proxy_address,
            weth_address=config.peer_asset_address,
            staking_address=config.staking_system_address,
            protocol_fee_multiplier=config.protocol_fee_multiplier,
        )
