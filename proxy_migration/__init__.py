"""
Proxy Migration - Staged provisioning for modular upgradeable proxies

Deploys independently versioned feature modules, resolves the
deployment-order dependencies between them and the proxy, and hands the
freshly deployed proxy to its permanent owner in one finalize transaction.
"""

from .migration import (
    bootstrap_migrate,
    deploy_full_features,
    deploy_minimal_features,
    full_migrate,
)

__version__ = "0.1.0"
__author__ = "Proxy Migration Team"

__all__ = [
    "bootstrap_migrate",
    "deploy_full_features",
    "deploy_minimal_features",
    "full_migrate",
]
