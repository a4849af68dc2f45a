"""
Error classification for proxy migrations.

Every failure aborts the whole migration call; these classes only carry
enough context (role, step, addresses) to diagnose what went wrong.
"""

from .migration_failures import (
    MigrationError,
    DeploymentFailure,
    FinalizeFailure,
    ConfigurationError,
    BindingError,
)

__all__ = [
    "MigrationError",
    "DeploymentFailure",
    "FinalizeFailure",
    "ConfigurationError",
    "BindingError",
]
