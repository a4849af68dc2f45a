"""
Feature roles and module address sets.

A role is a fixed logical name for a feature module, independent of where
that module ends up deployed. Address sets are immutable: resolution builds
a complete set once, and finalize consumes it as-is.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from ..config.defaults import NULL_ADDRESS
from ..errors import ConfigurationError


class Role(str, Enum):
    """Feature roles, valued by their address-set field names."""
    REGISTRY = "registry"
    OWNABLE = "ownable"
    TOKEN_SPENDER = "token_spender"
    TRANSFORM_ERC20 = "transform_erc20"
    SIGNATURE_VALIDATOR = "signature_validator"
    META_TRANSACTIONS = "meta_transactions"
    LIMIT_ORDERS = "limit_orders"


# Build artifact names
PROXY_ARTIFACT = "ZeroEx"
PROXY_INTERFACE_ARTIFACT = "IZeroEx"
INITIAL_MIGRATION_ARTIFACT = "InitialMigration"
FULL_MIGRATION_ARTIFACT = "FullMigration"

FEATURE_ARTIFACTS: dict[Role, str] = {
    Role.REGISTRY: "SimpleFunctionRegistryFeature",
    Role.OWNABLE: "OwnableFeature",
    Role.TOKEN_SPENDER: "TokenSpenderFeature",
    Role.TRANSFORM_ERC20: "TransformERC20Feature",
    Role.SIGNATURE_VALIDATOR: "SignatureValidatorFeature",
    Role.META_TRANSACTIONS: "MetaTransactionsFeature",
    Role.LIMIT_ORDERS: "LimitOrdersFeature",
}

# On-chain struct member names
ABI_FIELD_NAMES: dict[Role, str] = {
    Role.REGISTRY: "registry",
    Role.OWNABLE: "ownable",
    Role.TOKEN_SPENDER: "tokenSpender",
    Role.TRANSFORM_ERC20: "transformERC20",
    Role.SIGNATURE_VALIDATOR: "signatureValidator",
    Role.META_TRANSACTIONS: "metaTransactions",
    Role.LIMIT_ORDERS: "limitOrders",
}

# Features whose constructor needs the proxy address
PROXY_DEPENDENT_ROLES = (
    Role.TRANSFORM_ERC20,
    Role.META_TRANSACTIONS,
    Role.LIMIT_ORDERS,
)


def is_null_address(address: Any) -> bool:
    """True for None, empty strings and the zero address."""
    return not address or str(address).lower() == NULL_ADDRESS


@dataclass(frozen=True)
class BootstrapFeatures:
    """Addresses of the minimum features every operable proxy needs."""
    registry: str
    ownable: str

    @classmethod
    def roles(cls) -> tuple[Role, ...]:
        """Roles covered by this address set, in struct order."""
        return tuple(Role(f.name) for f in fields(cls))

    def address_of(self, role: Role) -> str:
        """Address resolved for a role."""
        return getattr(self, Role(role).value)

    def as_dict(self) -> dict[Role, str]:
        """Role-keyed view of the address set."""
        return {role: self.address_of(role) for role in self.roles()}

    def missing_roles(self) -> list[Role]:
        """Roles that did not resolve to a usable address."""
        return [role for role, address in self.as_dict().items() if is_null_address(address)]

    def require_complete(self) -> None:
        """Raise if any role is unresolved; finalize must never see a null address."""
        missing = self.missing_roles()
        if missing:
            raise ConfigurationError(
                f"Unresolved feature roles: {', '.join(role.value for role in missing)}",
                field=missing[0].value,
                value=self.address_of(missing[0]),
                step="validate_features",
            )

    def abi_struct(self) -> dict[str, str]:
        """Encode as the on-chain features struct."""
        return {ABI_FIELD_NAMES[role]: address for role, address in self.as_dict().items()}


@dataclass(frozen=True)
class FullFeatures(BootstrapFeatures):
    """Addresses of every feature in a full deployment."""
    token_spender: str
    transform_erc20: str
    signature_validator: str
    meta_transactions: str
    limit_orders: str
