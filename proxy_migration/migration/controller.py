"""
Transient controllers.

A transient controller holds one-time authority to finalize one specific
proxy. The proxy records the controller's authority at construction; the
controller proves it holds that authority before finalizing, and is spent
after its single finalize attempt.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..config.defaults import FinalizeOptions
from ..config.validation import is_valid_address
from ..deployment.base import BaseDeployer, DeployedContract, ExecutionError, TxDefaults, TxReceipt
from ..errors import BindingError, ConfigurationError, DeploymentFailure, FinalizeFailure, MigrationError
from ..logging.config import get_migration_logger, log_finalize
from ..models.features import (
    FULL_MIGRATION_ARTIFACT,
    INITIAL_MIGRATION_ARTIFACT,
    BootstrapFeatures,
    FullFeatures,
    is_null_address,
)
from .resolver import deploy_artifact

logger = get_migration_logger(__name__)


def require_owner(owner: Any) -> str:
    """Validate the address the proxy will be handed to."""
    if not is_valid_address(owner) or is_null_address(owner):
        raise ConfigurationError(
            "Owner must be a non-null address",
            field="owner",
            value=owner,
        )
    return owner


class TransientController(ABC):
    """Base class for the single-use initializer and migrator."""

    artifact: str
    finalize_function: str

    def __init__(self, deployer: BaseDeployer, contract: DeployedContract, tx_defaults: TxDefaults):
        self.deployer = deployer
        self.contract = contract
        self.tx_defaults = tx_defaults
        self.logger = logger
        self._spent = False

    @classmethod
    def deploy(cls, deployer: BaseDeployer, tx_defaults: TxDefaults) -> "TransientController":
        """Deploy a controller that only accepts finalize from the current sender."""
        sender = tx_defaults.require_sender()
        contract = deploy_artifact(deployer, cls.artifact, tx_defaults, sender, role="controller")

        logger.info(
            "Transient controller deployed",
            artifact=cls.artifact,
            controller_address=contract.address,
            initialize_caller=sender
        )

        return cls(deployer, contract, tx_defaults)

    @property
    def address(self) -> str:
        return self.contract.address

    @property
    def spent(self) -> bool:
        return self._spent

    @abstractmethod
    def authority(self) -> str:
        """Address a proxy must be constructed with for this controller to finalize it."""
        pass

    def assert_bound(self, proxy: DeployedContract) -> None:
        """
        Check the proxy recorded this controller's authority as its bootstrapper.

        The orchestrators deploy the proxy with authority() themselves, so the
        check only fails for a proxy handle deployed elsewhere, or, in the full
        flow, when the migrator reports a different bootstrapper on re-query.
        """
        recorded = proxy.constructor_args[0] if proxy.constructor_args else None
        expected = self.authority()

        if not recorded or str(recorded).lower() != str(expected).lower():
            raise BindingError(
                f"Proxy {proxy.address} is not bound to controller {self.address}",
                expected=expected,
                actual=recorded,
                context={"proxy_address": proxy.address, "controller_address": self.address},
            )

    def _submit(self, owner: str, proxy: DeployedContract, features: BootstrapFeatures,
                *extra_args: Any) -> TxReceipt:
        if self._spent:
            raise MigrationError(
                f"Controller {self.address} has already been used",
                step="finalize",
                context={"controller_address": self.address},
            )
        self._spent = True

        roles = [role.value for role in features.roles()]

        try:
            receipt = self.deployer.transact(
                self.contract,
                self.finalize_function,
                owner,
                proxy.address,
                features,
                *extra_args,
                tx_defaults=self.tx_defaults,
            )
        except ExecutionError as e:
            log_finalize(
                self.logger,
                proxy_address=proxy.address,
                controller_address=self.address,
                owner=owner,
                roles=roles,
                succeeded=False,
                context={"error": str(e)},
            )
            raise FinalizeFailure(
                f"Finalize of proxy {proxy.address} failed: {e}",
                proxy_address=proxy.address,
                controller_address=self.address,
                context={"owner": owner, "roles": roles},
            ) from e

        log_finalize(
            self.logger,
            proxy_address=proxy.address,
            controller_address=self.address,
            owner=owner,
            roles=roles,
            succeeded=True,
            context={"tx_hash": receipt.tx_hash},
        )

        return receipt


class InitialMigrationController(TransientController):
    """Initializer for a proxy carrying only the minimal feature set."""

    artifact = INITIAL_MIGRATION_ARTIFACT
    finalize_function = "initializeZeroEx"

    def authority(self) -> str:
        # The proxy is bound directly to the initializer
        return self.address

    def finalize(self, owner: str, proxy: DeployedContract, features: BootstrapFeatures) -> TxReceipt:
        """Register the minimal features and transfer ownership in one transaction."""
        return self._submit(owner, proxy, features)


class FullMigrationController(TransientController):
    """Migrator for a proxy carrying the full feature set."""

    artifact = FULL_MIGRATION_ARTIFACT
    finalize_function = "migrateZeroEx"

    def authority(self) -> str:
        """Query the bootstrapper the migrator finalizes through."""
        try:
            return self.deployer.call(self.contract, "getBootstrapper")
        except ExecutionError as e:
            raise DeploymentFailure(
                f"Could not query bootstrapper of migrator {self.address}: {e}",
                role="controller",
                artifact=self.artifact,
                step="query_authority",
            ) from e

    def finalize(self, owner: str, proxy: DeployedContract, features: FullFeatures,
                 options: FinalizeOptions) -> TxReceipt:
        """Register every feature and transfer ownership in one transaction."""
        return self._submit(owner, proxy, features, options)
