"""
Full migration.

The proxy is deployed before the proxy-dependent features, since their
constructors take the proxy address. Everything is registered and
ownership transferred by one finalize call on the migrator.
"""

from dataclasses import replace
from typing import Optional

from ..config.defaults import FinalizeOptions
from ..config.loader import ConfigOverrides, FeatureOverrides, merge_deploy_config, normalize_feature_overrides
from ..deployment.base import BaseDeployer, TxDefaults
from ..logging.config import get_migration_logger
from ..models.constructor_args import LimitOrdersArgs, MetaTransactionsArgs, TransformERC20Args
from ..models.features import PROXY_ARTIFACT, FullFeatures, Role
from .bootstrap import deploy_minimal_features
from .controller import FullMigrationController, require_owner
from .handles import FullProxyHandle
from .resolver import FeatureResolver, deploy_artifact

logger = get_migration_logger(__name__)


def deploy_full_features(
    deployer: BaseDeployer,
    tx_defaults: TxDefaults,
    config: Optional[ConfigOverrides] = None,
    overrides: Optional[FeatureOverrides] = None
) -> FullFeatures:
    """
    Deploy all the features for a full proxy.

    Proxy-dependent features are constructed with config.proxy_address,
    which defaults to the zero address when called standalone.
    """
    cfg = merge_deploy_config(config)
    resolver = FeatureResolver(deployer, tx_defaults, overrides)

    minimal = deploy_minimal_features(deployer, tx_defaults, resolver.overrides)

    return FullFeatures(
        registry=minimal.registry,
        ownable=minimal.ownable,
        token_spender=resolver.resolve(Role.TOKEN_SPENDER),
        transform_erc20=resolver.resolve(
            Role.TRANSFORM_ERC20,
            TransformERC20Args(zero_ex_address=cfg.proxy_address),
        ),
        signature_validator=resolver.resolve(Role.SIGNATURE_VALIDATOR),
        meta_transactions=resolver.resolve(
            Role.META_TRANSACTIONS,
            MetaTransactionsArgs(zero_ex_address=cfg.proxy_address),
        ),
        limit_orders=resolver.resolve(Role.LIMIT_ORDERS, LimitOrdersArgs.from_config(cfg)),
    )


def full_migrate(
    owner: str,
    deployer: BaseDeployer,
    tx_defaults: TxDefaults,
    overrides: Optional[FeatureOverrides] = None,
    config: Optional[ConfigOverrides] = None
) -> FullProxyHandle:
    """
    Deploy a fully featured proxy and hand it to owner.

    Args:
        owner: Address the proxy is handed to
        deployer: Deployment primitive
        tx_defaults: Transaction defaults; must name the sender
        overrides: Already-deployed feature addresses keyed by role
        config: Deployment config overrides; proxy_address is always replaced
            by the proxy deployed here

    Returns:
        Handle to the operable proxy, typed to its full interface

    Raises:
        ConfigurationError: Invalid owner, sender, config or overrides
        BindingError: Proxy and migrator disagree on the bootstrapper
        DeploymentFailure: A controller, proxy or feature deployment failed
        FinalizeFailure: The finalize transaction failed
    """
    owner = require_owner(owner)
    sender = tx_defaults.require_sender()
    overrides = normalize_feature_overrides(overrides)
    base_config = merge_deploy_config(config)

    logger.info("Starting full migration", owner=owner, sender=sender,
                overridden_roles=[role.value for role in overrides])

    controller = FullMigrationController.deploy(deployer, tx_defaults)
    bootstrapper = controller.authority()
    proxy = deploy_artifact(deployer, PROXY_ARTIFACT, tx_defaults, bootstrapper, role="proxy")

    logger.info("Proxy deployed", proxy_address=proxy.address, bootstrapper=bootstrapper)

    migration_config = replace(base_config, proxy_address=proxy.address)
    features = deploy_full_features(deployer, tx_defaults, migration_config, overrides)
    features.require_complete()

    options = FinalizeOptions.from_config(migration_config, sender)

    controller.assert_bound(proxy)
    controller.finalize(owner, proxy, features, options)

    return FullProxyHandle(
        address=proxy.address,
        deployer=deployer,
        tx_defaults=tx_defaults,
        features=features,
    )
