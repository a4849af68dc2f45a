#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from proxy_migration.config.loader import ConfigLoader
from proxy_migration.config.validation import ConfigValidator, ValidationError


def validate_network_config(loader: ConfigLoader, network: str) -> List[ValidationError]:
    """Validate configuration for a specific network."""
    return ConfigValidator.validate_network_config(loader.load_networks().get(network) or {})


def main():
    """Main validation function."""
    print("🔍 Validating proxy migration configuration...")

    loader = ConfigLoader.create()
    networks = loader.load_networks()

    if not networks:
        print(f"⚠️  No networks found in {loader.config_dir / 'networks.yaml'}")

    all_valid = True

    for network in networks:
        print(f"\n🌐 Validating {network}...")

        errors = validate_network_config(loader, network)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            config = loader.merge_config(network)
            print(f"✅ {network} configuration is valid "
                  f"(fee multiplier {config.protocol_fee_multiplier})")

    if all_valid:
        print(f"\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
