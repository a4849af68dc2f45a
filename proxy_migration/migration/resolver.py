"""
Feature set resolution.

Each role resolves independently: a supplied override address is used
unchanged, otherwise the feature is deployed. Sibling roles never depend on
each other; ordering only matters between batches, which the orchestrators
sequence.
"""

from typing import Any, Callable, Iterable, Optional

from ..config.loader import FeatureOverrides, normalize_feature_overrides
from ..deployment.base import BaseDeployer, DeployedContract, ExecutionError, TxDefaults
from ..errors import DeploymentFailure
from ..logging.config import get_migration_logger, log_feature_resolution
from ..models.constructor_args import ConstructorArgs
from ..models.features import FEATURE_ARTIFACTS, Role

logger = get_migration_logger(__name__)


def resolve_feature(role: Role, override: Optional[str], deploy_fn: Callable[[], str]) -> str:
    """Return the override if one is given, otherwise deploy and return the new address."""
    if override:
        return override
    return deploy_fn()


def deploy_artifact(
    deployer: BaseDeployer,
    artifact: str,
    tx_defaults: TxDefaults,
    *constructor_args: Any,
    role: Optional[str] = None
) -> DeployedContract:
    """Deploy through the primitive, tagging failures with the role being deployed."""
    try:
        return deployer.deploy(artifact, tx_defaults, *constructor_args)
    except DeploymentFailure as e:
        if e.role is None:
            e.role = role
        raise
    except ExecutionError as e:
        raise DeploymentFailure(
            f"Failed to deploy {artifact} for {role or 'unknown role'}: {e}",
            role=role,
            artifact=artifact,
            context={"constructor_args": list(constructor_args)},
        ) from e


class FeatureResolver:
    """Resolves feature roles against a fixed set of overrides."""

    def __init__(
        self,
        deployer: BaseDeployer,
        tx_defaults: TxDefaults,
        overrides: Optional[FeatureOverrides] = None
    ) -> None:
        self.deployer = deployer
        self.tx_defaults = tx_defaults
        self.overrides = normalize_feature_overrides(overrides)
        self.logger = logger

    def resolve(self, role: Role, args: Optional[ConstructorArgs] = None) -> str:
        """Resolve one role, deploying its feature with args if no override exists."""
        role = Role(role)
        artifact = FEATURE_ARTIFACTS[role]
        constructor_args = args.ordered() if args is not None else ()

        def deploy_fn() -> str:
            return deploy_artifact(
                self.deployer, artifact, self.tx_defaults, *constructor_args, role=role.value
            ).address

        override = self.overrides.get(role)
        address = resolve_feature(role, override, deploy_fn)

        log_feature_resolution(
            self.logger,
            role=role.value,
            address=address,
            deployed=not override,
            context={"artifact": artifact} if not override else None,
        )

        return address

    def resolve_many(self, roles: Iterable[Role]) -> dict[Role, str]:
        """Resolve several roles without constructor arguments."""
        return {Role(role): self.resolve(role) for role in roles}
