"""Base classes for deployment primitives."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from ..errors import ConfigurationError


@dataclass(frozen=True)
class TxDefaults:
    """Transaction defaults applied to every deployment and call."""
    from_address: Optional[str] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None

    def to_tx_params(self) -> dict[str, Any]:
        """Transaction parameter dict with unset fields omitted."""
        params: dict[str, Any] = {}
        if self.from_address:
            params["from"] = self.from_address
        if self.gas is not None:
            params["gas"] = self.gas
        if self.gas_price is not None:
            params["gasPrice"] = self.gas_price
        return params

    def require_sender(self) -> str:
        """Sender identity; migrations cannot bind a controller without one."""
        if not self.from_address:
            raise ConfigurationError(
                "Transaction defaults must name a sender (from_address)",
                field="from_address",
                value=self.from_address,
            )
        return self.from_address


@dataclass(frozen=True)
class DeployedContract:
    """A deployed contract and the arguments it was constructed with."""
    address: str
    artifact: str
    constructor_args: tuple = ()


@dataclass(frozen=True)
class TxReceipt:
    """Confirmed transaction receipt."""
    tx_hash: str
    success: bool = True
    block_number: Optional[int] = None


class ExecutionError(Exception):
    """The execution environment rejected a deployment, call or transaction."""
    pass


class BaseDeployer(ABC):
    """Base class for deployment primitives."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"deployment.{name}")
        self._deploy_count = 0
        self._transaction_count = 0

    @abstractmethod
    def deploy(self, artifact: str, tx_defaults: TxDefaults, *constructor_args: Any) -> DeployedContract:
        """
        Deploy a new contract instance, blocking until it is mined.

        Args:
            artifact: Build artifact name
            tx_defaults: Transaction defaults (sender, gas)
            constructor_args: Positional constructor arguments

        Returns:
            The deployed contract
        """
        pass

    @abstractmethod
    def call(self, contract: DeployedContract, function: str, *args: Any) -> Any:
        """Read-only call against a deployed contract."""
        pass

    @abstractmethod
    def transact(
        self,
        contract: DeployedContract,
        function: str,
        *args: Any,
        tx_defaults: TxDefaults
    ) -> TxReceipt:
        """Submit a transaction and block until it is confirmed successful."""
        pass

    def get_stats(self) -> dict[str, Any]:
        """Get deployment statistics."""
        return {
            "name": self.name,
            "deploy_count": self._deploy_count,
            "transaction_count": self._transaction_count,
        }

    def reset_stats(self):
        """Reset deployment statistics."""
        self._deploy_count = 0
        self._transaction_count = 0
