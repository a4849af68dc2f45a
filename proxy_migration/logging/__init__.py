"""
Logging configuration and utilities for proxy migrations.
"""
from .config import configure_logging, get_logger, get_migration_logger

__all__ = ["configure_logging", "get_logger", "get_migration_logger"]
