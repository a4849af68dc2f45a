"""
Simulated in-memory execution environment.

Models just enough of the proxy and its transient controllers to exercise
a migration end to end without a node: controllers only accept finalize
from the sender that deployed them, only for a proxy that recorded them as
its bootstrapper, and only once. Finalize builds the new registry off to
the side and commits it together with the owner, so a rejected finalize
leaves the proxy untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from web3 import Web3

from ..config.defaults import NULL_ADDRESS, FinalizeOptions
from ..models.features import (
    FEATURE_ARTIFACTS,
    FULL_MIGRATION_ARTIFACT,
    INITIAL_MIGRATION_ARTIFACT,
    PROXY_ARTIFACT,
    BootstrapFeatures,
    FullFeatures,
)
from .base import BaseDeployer, DeployedContract, ExecutionError, TxDefaults, TxReceipt

# Entry points each feature registers into the proxy
FEATURE_FUNCTIONS: dict[str, tuple[str, ...]] = {
    "SimpleFunctionRegistryFeature": (
        "extend", "rollback", "getRollbackLength", "getRollbackEntryAtIndex",
    ),
    "OwnableFeature": ("owner", "transferOwnership", "migrate"),
    "TokenSpenderFeature": (
        "getAllowanceTarget", "getSpendableERC20BalanceOf", "_spendERC20Tokens",
    ),
    "TransformERC20Feature": (
        "transformERC20", "getTransformerDeployer", "setTransformerDeployer",
        "getTransformWallet", "createTransformWallet",
    ),
    "SignatureValidatorFeature": ("validateHashSignature", "isValidHashSignature"),
    "MetaTransactionsFeature": (
        "executeMetaTransaction", "batchExecuteMetaTransactions",
        "getMetaTransactionExecutedBlock", "getMetaTransactionHashExecutedBlock",
        "getMetaTransactionHash",
    ),
    "LimitOrdersFeature": (
        "fillLimitOrder", "fillRfqOrder", "cancelLimitOrder", "cancelRfqOrder",
        "getLimitOrderInfo", "getProtocolFeeMultiplier",
    ),
}


def normalize_address(address: Any) -> str:
    """Checksum an address, rejecting anything that is not one."""
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as e:
        raise ExecutionError(f"Invalid address: {address!r}") from e


@dataclass
class SimulatedContract:
    """A contract living in the simulated environment."""
    address: str
    artifact: str
    deployer: str
    constructor_args: tuple
    storage: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionRecord:
    """A transaction submitted to the simulated environment."""
    contract_address: str
    function: str
    args: tuple
    sender: Optional[str]
    success: bool
    error: Optional[str] = None


class InMemoryDeployer(BaseDeployer):
    """Deterministic deployment primitive for dry runs and tests."""

    def __init__(
        self,
        fail_artifacts: Iterable[str] = (),
        reject_finalize: bool = False,
        address_seed: int = 0x1000,
        name: str = "memory",
    ):
        super().__init__(name)
        self.fail_artifacts = set(fail_artifacts)
        self.reject_finalize = reject_finalize
        self.contracts: dict[str, SimulatedContract] = {}
        self.deployments: list[SimulatedContract] = []
        self.transactions: list[TransactionRecord] = []
        self._next_address = address_seed
        self._block_number = 0

    # Deployment

    def deploy(self, artifact: str, tx_defaults: TxDefaults, *constructor_args: Any) -> DeployedContract:
        """Deploy a simulated contract, recording the call."""
        if not tx_defaults.from_address:
            raise ExecutionError(f"Deployment of {artifact} has no sender")

        if artifact in self.fail_artifacts:
            raise ExecutionError(f"Deployment of {artifact} rejected")

        contract = SimulatedContract(
            address=self._allocate_address(),
            artifact=artifact,
            deployer=normalize_address(tx_defaults.from_address),
            constructor_args=tuple(constructor_args),
        )
        contract.storage = self._initial_storage(contract)

        self.contracts[contract.address] = contract
        self.deployments.append(contract)
        self._deploy_count += 1
        self._block_number += 1

        self.logger.debug(
            "Simulated deployment",
            artifact=artifact,
            address=contract.address,
            args=list(constructor_args)
        )

        return DeployedContract(
            address=contract.address,
            artifact=artifact,
            constructor_args=tuple(constructor_args),
        )

    def get_contract(self, address: str) -> SimulatedContract:
        """Look up a deployed contract by address."""
        contract = self.contracts.get(normalize_address(address))
        if contract is None:
            raise ExecutionError(f"No contract deployed at {address}")
        return contract

    def deployments_of(self, artifact: str) -> list[SimulatedContract]:
        """Every deployment of an artifact, oldest first."""
        return [c for c in self.deployments if c.artifact == artifact]

    def finalize_transactions(self) -> list[TransactionRecord]:
        """Every finalize attempt, successful or not."""
        return [tx for tx in self.transactions if tx.function in ("initializeZeroEx", "migrateZeroEx")]

    # Calls

    def call(self, contract: DeployedContract, function: str, *args: Any) -> Any:
        """Read-only call against a simulated contract."""
        target = self.get_contract(contract.address)

        if target.artifact == FULL_MIGRATION_ARTIFACT and function == "getBootstrapper":
            return target.storage["bootstrapper"]

        if target.artifact == PROXY_ARTIFACT:
            return self._proxy_call(target, function, args)

        raise ExecutionError(f"{target.artifact} has no view function {function}")

    def transact(
        self,
        contract: DeployedContract,
        function: str,
        *args: Any,
        tx_defaults: TxDefaults
    ) -> TxReceipt:
        """Execute a simulated transaction atomically."""
        target = self.get_contract(contract.address)
        handlers: dict[tuple[str, str], Callable[..., None]] = {
            (INITIAL_MIGRATION_ARTIFACT, "initializeZeroEx"): self._initialize_zero_ex,
            (FULL_MIGRATION_ARTIFACT, "migrateZeroEx"): self._migrate_zero_ex,
        }
        handler = handlers.get((target.artifact, function))

        try:
            if handler is None:
                raise ExecutionError(f"{target.artifact} has no function {function}")
            handler(target, tx_defaults.from_address, *args)
        except ExecutionError as e:
            self.transactions.append(TransactionRecord(
                contract_address=target.address,
                function=function,
                args=tuple(args),
                sender=tx_defaults.from_address,
                success=False,
                error=str(e),
            ))
            raise

        self.transactions.append(TransactionRecord(
            contract_address=target.address,
            function=function,
            args=tuple(args),
            sender=tx_defaults.from_address,
            success=True,
        ))
        self._transaction_count += 1
        self._block_number += 1

        return TxReceipt(
            tx_hash=f"0x{len(self.transactions):064x}",
            success=True,
            block_number=self._block_number,
        )

    # Simulated contract logic

    def _allocate_address(self) -> str:
        self._next_address += 1
        return Web3.to_checksum_address(f"0x{self._next_address:040x}")

    def _initial_storage(self, contract: SimulatedContract) -> dict[str, Any]:
        args = contract.constructor_args

        if contract.artifact == PROXY_ARTIFACT:
            return {
                "bootstrapper": normalize_address(args[0]),
                "owner": None,
                "implementations": {},
                "transformer_deployer": None,
            }

        if contract.artifact == INITIAL_MIGRATION_ARTIFACT:
            return {"initialize_caller": normalize_address(args[0]), "spent": False}

        if contract.artifact == FULL_MIGRATION_ARTIFACT:
            # The full migrator finalizes through an internal bootstrapper
            return {
                "initialize_caller": normalize_address(args[0]),
                "bootstrapper": self._allocate_address(),
                "spent": False,
            }

        return {}

    def _proxy_call(self, proxy: SimulatedContract, function: str, args: tuple) -> Any:
        implementations = proxy.storage["implementations"]

        if function == "getFunctionImplementation":
            return implementations.get(args[0], NULL_ADDRESS)

        if function not in implementations:
            raise ExecutionError(f"Proxy {proxy.address} has no implementation for {function}")

        feature = self.contracts[implementations[function]]
        if function == "owner":
            return proxy.storage["owner"]
        if function == "getTransformerDeployer":
            return proxy.storage["transformer_deployer"]
        if function == "getProtocolFeeMultiplier":
            return feature.constructor_args[3]

        raise ExecutionError(f"{function} is not a view function")

    def _initialize_zero_ex(self, controller: SimulatedContract, sender: Optional[str],
                            owner: str, proxy_address: str, features: BootstrapFeatures) -> None:
        self._finalize(
            controller, sender, owner, proxy_address, features,
            expected_bootstrapper=controller.address,
            transformer_deployer=None,
        )

    def _migrate_zero_ex(self, controller: SimulatedContract, sender: Optional[str],
                         owner: str, proxy_address: str, features: FullFeatures,
                         options: FinalizeOptions) -> None:
        self._finalize(
            controller, sender, owner, proxy_address, features,
            expected_bootstrapper=controller.storage["bootstrapper"],
            transformer_deployer=normalize_address(options.deployer_of_record),
        )

    def _finalize(self, controller: SimulatedContract, sender: Optional[str], owner: str,
                  proxy_address: str, features: BootstrapFeatures,
                  expected_bootstrapper: str, transformer_deployer: Optional[str]) -> None:
        storage = controller.storage

        if storage["spent"]:
            raise ExecutionError(f"{controller.artifact}/ALREADY_SPENT")
        if sender is None or normalize_address(sender) != storage["initialize_caller"]:
            raise ExecutionError(f"{controller.artifact}/INVALID_SENDER")

        proxy = self.get_contract(proxy_address)
        if proxy.artifact != PROXY_ARTIFACT:
            raise ExecutionError(f"{proxy_address} is not a proxy")
        if proxy.storage["bootstrapper"] != expected_bootstrapper:
            raise ExecutionError("ZeroEx/INVALID_BOOTSTRAPPER")

        if self.reject_finalize:
            raise ExecutionError(f"{controller.artifact} finalize rejected")

        implementations: dict[str, str] = {}
        for role, address in features.as_dict().items():
            feature = self.get_contract(address)
            if feature.artifact != FEATURE_ARTIFACTS[role]:
                raise ExecutionError(
                    f"{address} is a {feature.artifact}, expected {FEATURE_ARTIFACTS[role]} for {role.value}"
                )
            for function in FEATURE_FUNCTIONS[feature.artifact]:
                implementations[function] = feature.address

        proxy.storage.update(
            implementations=implementations,
            owner=normalize_address(owner),
            bootstrapper=NULL_ADDRESS,
            transformer_deployer=transformer_deployer,
        )
        storage["spent"] = True
