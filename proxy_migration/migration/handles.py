"""Handles to operable proxies returned by the migration entry points."""

from dataclasses import dataclass
from typing import Any, ClassVar

from ..deployment.base import BaseDeployer, DeployedContract, TxDefaults, TxReceipt
from ..models.features import PROXY_ARTIFACT, PROXY_INTERFACE_ARTIFACT, BootstrapFeatures, FullFeatures
from ..models.proxy import ProxyLifecycleState


@dataclass(frozen=True)
class ProxyHandle:
    """An operable proxy with the minimal feature set registered."""

    address: str
    deployer: BaseDeployer
    tx_defaults: TxDefaults
    features: BootstrapFeatures
    state: ProxyLifecycleState = ProxyLifecycleState.OPERABLE

    artifact: ClassVar[str] = PROXY_ARTIFACT

    @property
    def contract(self) -> DeployedContract:
        return DeployedContract(address=self.address, artifact=self.artifact)

    @property
    def interface(self) -> DeployedContract:
        """The proxy addressed through its full dispatch interface."""
        return DeployedContract(address=self.address, artifact=PROXY_INTERFACE_ARTIFACT)

    def call(self, function: str, *args: Any) -> Any:
        """Read-only call dispatched to a registered feature."""
        return self.deployer.call(self.interface, function, *args)

    def transact(self, function: str, *args: Any) -> TxReceipt:
        """Transaction dispatched to a registered feature."""
        return self.deployer.transact(self.interface, function, *args, tx_defaults=self.tx_defaults)

    def owner(self) -> str:
        return self.call("owner")

    def get_function_implementation(self, selector: Any) -> str:
        """Feature address registered for a selector, or the zero address."""
        return self.deployer.call(self.contract, "getFunctionImplementation", selector)


@dataclass(frozen=True)
class FullProxyHandle(ProxyHandle):
    """An operable proxy exposing the complete feature surface."""

    features: FullFeatures

    artifact: ClassVar[str] = PROXY_INTERFACE_ARTIFACT

    def get_transformer_deployer(self) -> str:
        return self.call("getTransformerDeployer")

    def get_protocol_fee_multiplier(self) -> int:
        return self.call("getProtocolFeeMultiplier")
