"""JSON-RPC deployment primitive backed by web3.py."""

from typing import Any

from web3 import Web3
from web3.exceptions import Web3Exception

from .artifacts import ArtifactStore
from .base import BaseDeployer, DeployedContract, ExecutionError, TxDefaults, TxReceipt

DEFAULT_RECEIPT_TIMEOUT = 120.0


def encode_arg(value: Any) -> Any:
    """Convert dataclass arguments exposing abi_struct() to ABI structs."""
    if hasattr(value, "abi_struct"):
        return value.abi_struct()
    return value


class Web3Deployer(BaseDeployer):
    """Deploys and drives contracts through a web3 provider."""

    def __init__(
        self,
        web3: Web3,
        artifacts: ArtifactStore,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        name: str = "web3",
    ):
        super().__init__(name)
        self.web3 = web3
        self.artifacts = artifacts
        self.receipt_timeout = receipt_timeout

    def deploy(self, artifact: str, tx_defaults: TxDefaults, *constructor_args: Any) -> DeployedContract:
        """Deploy a contract from its artifact and wait for the receipt."""
        compiled = self.artifacts.get(artifact)
        if not compiled.deployable:
            raise ExecutionError(f"Artifact {artifact} has no creation bytecode")

        factory = self.web3.eth.contract(abi=compiled.abi, bytecode=compiled.bytecode)
        encoded = [encode_arg(arg) for arg in constructor_args]

        self.logger.debug("Submitting deployment", artifact=artifact, args=encoded)

        try:
            tx_hash = factory.constructor(*encoded).transact(tx_defaults.to_tx_params())
            receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except (Web3Exception, ValueError) as e:
            raise ExecutionError(f"Deployment of {artifact} failed: {e}") from e

        if receipt["status"] != 1 or not receipt["contractAddress"]:
            raise ExecutionError(f"Deployment of {artifact} reverted in tx {Web3.to_hex(tx_hash)}")

        self._deploy_count += 1
        return DeployedContract(
            address=Web3.to_checksum_address(receipt["contractAddress"]),
            artifact=artifact,
            constructor_args=tuple(constructor_args),
        )

    def call(self, contract: DeployedContract, function: str, *args: Any) -> Any:
        """Read-only call against a deployed contract."""
        bound = self._bind(contract)
        try:
            return getattr(bound.functions, function)(*[encode_arg(arg) for arg in args]).call()
        except (Web3Exception, ValueError) as e:
            raise ExecutionError(f"Call {contract.artifact}.{function} failed: {e}") from e

    def transact(
        self,
        contract: DeployedContract,
        function: str,
        *args: Any,
        tx_defaults: TxDefaults
    ) -> TxReceipt:
        """Submit a transaction and wait until it is mined."""
        bound = self._bind(contract)
        encoded = [encode_arg(arg) for arg in args]

        try:
            tx_hash = getattr(bound.functions, function)(*encoded).transact(tx_defaults.to_tx_params())
            receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except (Web3Exception, ValueError) as e:
            raise ExecutionError(f"Transaction {contract.artifact}.{function} failed: {e}") from e

        if receipt["status"] != 1:
            raise ExecutionError(
                f"Transaction {contract.artifact}.{function} reverted in tx {Web3.to_hex(tx_hash)}"
            )

        self._transaction_count += 1
        return TxReceipt(
            tx_hash=Web3.to_hex(tx_hash),
            success=True,
            block_number=receipt.get("blockNumber"),
        )

    def _bind(self, contract: DeployedContract):
        compiled = self.artifacts.get(contract.artifact)
        return self.web3.eth.contract(address=contract.address, abi=compiled.abi)
