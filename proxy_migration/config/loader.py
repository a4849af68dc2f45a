"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..errors import ConfigurationError
from ..models.features import Role
from .defaults import DeploymentConfig, get_default_deploy_config
from .validation import ConfigValidator, ValidationError

ConfigOverrides = Union[DeploymentConfig, Mapping[str, Any]]
FeatureOverrides = Mapping[Union[Role, str], Optional[str]]


def _raise_for_errors(message: str, errors: list[ValidationError]) -> None:
    if errors:
        error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
        raise ConfigurationError(
            f"{message}: " + "; ".join(error_msgs),
            field=errors[0].field,
            value=errors[0].value,
            errors=errors,
        )


def merge_deploy_config(
    overrides: Optional[ConfigOverrides] = None,
    base: Optional[DeploymentConfig] = None,
) -> DeploymentConfig:
    """
    Shallow-merge caller overrides onto a base config.

    An override wins per key; keys that are absent or None fall back to
    the base value. Neither input is mutated. A DeploymentConfig passed as
    overrides is taken as complete and replaces the base.
    """
    if base is None:
        base = get_default_deploy_config()

    if overrides is None:
        return base

    if isinstance(overrides, DeploymentConfig):
        base = get_default_deploy_config()
        overrides = {f.name: getattr(overrides, f.name) for f in fields(overrides)}

    updates = {key: value for key, value in overrides.items() if value is not None}

    _raise_for_errors(
        "Invalid deployment configuration",
        ConfigValidator.validate_deploy_config(updates),
    )

    return replace(base, **updates)


def normalize_feature_overrides(overrides: Optional[FeatureOverrides] = None) -> dict[Role, str]:
    """Validate overrides and key them by Role, dropping empty entries."""
    if not overrides:
        return {}

    _raise_for_errors(
        "Invalid feature overrides",
        ConfigValidator.validate_feature_overrides(overrides),
    )

    return {Role(key): value for key, value in overrides.items() if value}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DeploymentConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_deploy_config(),
        )

    def load_networks(self) -> dict[str, Any]:
        """Load every network entry from the networks file."""
        networks_file = self.config_dir / "networks.yaml"

        if not networks_file.exists():
            return {}

        with open(networks_file) as f:
            networks_config = yaml.safe_load(f) or {}

        return networks_config.get("networks", {}) or {}

    def load_network_config(self, network: str) -> dict[str, Any]:
        """Load network-specific configuration, validated."""
        network_config = self.load_networks().get(network, {}) or {}

        _raise_for_errors(
            f"Invalid configuration for network '{network}'",
            ConfigValidator.validate_network_config(network_config),
        )

        return network_config

    def merge_config(
        self,
        network: str,
        call_overrides: Optional[ConfigOverrides] = None
    ) -> DeploymentConfig:
        """
        Merge deployment configuration with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. Network-specific overrides
        3. Global defaults (lowest priority)
        """
        network_config = self.load_network_config(network)

        config = merge_deploy_config(network_config.get("deploy_config"), base=self.defaults)

        if call_overrides is not None:
            config = merge_deploy_config(call_overrides, base=config)

        return config

    def feature_overrides(
        self,
        network: str,
        call_overrides: Optional[FeatureOverrides] = None
    ) -> dict[Role, str]:
        """Already-deployed feature addresses for a network, with call overrides on top."""
        features = normalize_feature_overrides(self.load_network_config(network).get("features"))
        features.update(normalize_feature_overrides(call_overrides))
        return features
