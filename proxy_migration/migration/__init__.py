"""
Migration orchestration module.

Bootstrap and full migrations, the feature resolver they share and the
transient controllers that finalize a proxy.
"""

from .bootstrap import bootstrap_migrate, deploy_minimal_features
from .full import deploy_full_features, full_migrate
from .handles import FullProxyHandle, ProxyHandle

__all__ = [
    "bootstrap_migrate",
    "deploy_full_features",
    "deploy_minimal_features",
    "full_migrate",
    "FullProxyHandle",
    "ProxyHandle",
]
