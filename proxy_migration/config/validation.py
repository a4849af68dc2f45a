"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any, Mapping

from web3 import Web3

from ..models.features import Role, is_null_address
from .defaults import deploy_config_keys

ADDRESS_FIELDS = (
    "proxy_address",
    "peer_asset_address",
    "staking_system_address",
    "deployer_of_record",
)


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def is_valid_address(value: Any) -> bool:
    """True if value is a hex address (checksummed when mixed-case)."""
    if not isinstance(value, str) or not Web3.is_address(value):
        return False
    digits = value[2:] if value[:2].lower() == "0x" else value
    if digits == digits.lower() or digits == digits.upper():
        return True
    return Web3.is_checksum_address(value)


class ConfigValidator:
    """Validates deployment configuration and feature overrides."""

    @staticmethod
    def validate_deploy_config(params: Mapping[str, Any]) -> list[ValidationError]:
        """Validate deployment config parameters."""
        errors = []

        known = deploy_config_keys()
        for key in params:
            if key not in known:
                errors.append(ValidationError(
                    field=str(key),
                    message="Unknown deployment config option",
                    value=params[key]
                ))

        for key in ADDRESS_FIELDS:
            if key in params and params[key] is not None:
                value = params[key]
                if not is_valid_address(value):
                    errors.append(ValidationError(
                        field=key,
                        message="Must be a 20-byte hex address",
                        value=value
                    ))

        # Validate protocol_fee_multiplier
        if "protocol_fee_multiplier" in params:
            value = params["protocol_fee_multiplier"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(ValidationError(
                    field="protocol_fee_multiplier",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_feature_overrides(overrides: Mapping[Any, Any]) -> list[ValidationError]:
        """Validate a role -> address override mapping."""
        errors = []
        roles = {role.value for role in Role}

        for key, value in overrides.items():
            role_name = key.value if isinstance(key, Role) else key
            if role_name not in roles:
                errors.append(ValidationError(
                    field=str(role_name),
                    message="Unknown feature role",
                    value=value
                ))
                continue

            if value and not is_valid_address(value):
                errors.append(ValidationError(
                    field=role_name,
                    message="Must be a 20-byte hex address",
                    value=value
                ))
            elif value and is_null_address(value):
                errors.append(ValidationError(
                    field=role_name,
                    message="Override must not be the null address",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_network_config(config: Mapping[str, Any]) -> list[ValidationError]:
        """Validate one network entry from the networks file."""
        errors = []

        unknown = set(config) - {"deploy_config", "features"}
        for key in sorted(unknown):
            errors.append(ValidationError(
                field=key,
                message="Unknown network section",
                value=config[key]
            ))

        if "deploy_config" in config:
            errors.extend(ConfigValidator.validate_deploy_config(config["deploy_config"] or {}))

        if "features" in config:
            errors.extend(ConfigValidator.validate_feature_overrides(config["features"] or {}))

        return errors
