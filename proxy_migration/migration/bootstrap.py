"""
Bootstrap migration.

Deploys the minimal feature set (function registry and ownership) and a
proxy bound to a one-shot initializer, then registers the features and
transfers ownership in a single finalize call.
"""

from typing import Optional

from ..config.loader import FeatureOverrides, normalize_feature_overrides
from ..deployment.base import BaseDeployer, TxDefaults
from ..logging.config import get_migration_logger
from ..models.features import PROXY_ARTIFACT, BootstrapFeatures, Role
from .controller import InitialMigrationController, require_owner
from .handles import ProxyHandle
from .resolver import FeatureResolver, deploy_artifact

logger = get_migration_logger(__name__)


def deploy_minimal_features(
    deployer: BaseDeployer,
    tx_defaults: TxDefaults,
    overrides: Optional[FeatureOverrides] = None
) -> BootstrapFeatures:
    """Deploy the minimum features of the proxy, reusing any overridden address."""
    resolver = FeatureResolver(deployer, tx_defaults, overrides)
    return BootstrapFeatures(
        registry=resolver.resolve(Role.REGISTRY),
        ownable=resolver.resolve(Role.OWNABLE),
    )


def bootstrap_migrate(
    owner: str,
    deployer: BaseDeployer,
    tx_defaults: TxDefaults,
    overrides: Optional[FeatureOverrides] = None
) -> ProxyHandle:
    """
    Migrate a new proxy with the minimum viable features.

    Args:
        owner: Address the proxy is handed to
        deployer: Deployment primitive
        tx_defaults: Transaction defaults; must name the sender
        overrides: Already-deployed feature addresses keyed by role

    Returns:
        Handle to the operable proxy

    Raises:
        ConfigurationError: Invalid owner, sender or overrides
        DeploymentFailure: A controller, proxy or feature deployment failed
        FinalizeFailure: The finalize transaction failed
    """
    owner = require_owner(owner)
    sender = tx_defaults.require_sender()
    overrides = normalize_feature_overrides(overrides)

    logger.info("Starting bootstrap migration", owner=owner, sender=sender,
                overridden_roles=[role.value for role in overrides])

    controller = InitialMigrationController.deploy(deployer, tx_defaults)
    proxy = deploy_artifact(deployer, PROXY_ARTIFACT, tx_defaults, controller.authority(), role="proxy")

    logger.info("Proxy deployed", proxy_address=proxy.address, bootstrapper=controller.authority())

    features = deploy_minimal_features(deployer, tx_defaults, overrides)
    features.require_complete()

    controller.assert_bound(proxy)
    controller.finalize(owner, proxy, features)

    return ProxyHandle(
        address=proxy.address,
        deployer=deployer,
        tx_defaults=tx_defaults,
        features=features,
    )
