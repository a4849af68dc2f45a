"""Tests for logging integration in migration components."""

from unittest.mock import Mock

from proxy_migration.deployment.memory import InMemoryDeployer
from proxy_migration.logging.config import (
    configure_logging,
    get_migration_logger,
    log_feature_resolution,
    log_finalize,
)
from proxy_migration.migration.bootstrap import deploy_minimal_features
from proxy_migration.migration.controller import InitialMigrationController
from proxy_migration.migration.resolver import FeatureResolver
from proxy_migration.models.features import Role


def make_mock_logger() -> Mock:
    """Mock logger whose bind() returns itself, recording every bound field."""
    logger = Mock()
    logger.bound = {}

    def bind(**kwargs):
        logger.bound.update(kwargs)
        return logger

    logger.bind.side_effect = bind
    return logger


class TestLoggingHelpers:
    """Test standardized audit log helpers."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)

    def test_migration_logger_binds_subsystem(self):
        logger = get_migration_logger("test")
        assert logger is not None

    def test_feature_deployed(self):
        logger = make_mock_logger()

        log_feature_resolution(logger, role="registry", address="0xabc", deployed=True)

        assert logger.bound["resolution"] == "deployed"
        assert logger.bound["role"] == "registry"
        logger.info.assert_called_once_with("Feature deployed")

    def test_feature_override(self):
        logger = make_mock_logger()

        log_feature_resolution(logger, role="ownable", address="0xabc", deployed=False)

        assert logger.bound["resolution"] == "override"
        logger.info.assert_called_once_with("Feature override reused")

    def test_finalize_failure_logged_as_error(self):
        logger = make_mock_logger()

        log_finalize(logger, proxy_address="0x1", controller_address="0x2", owner="0x3",
                     roles=["registry"], succeeded=False, context={"error": "boom"})

        assert logger.bound["finalize_result"] == "FAILED"
        assert logger.bound["context"] == {"error": "boom"}
        logger.error.assert_called_once_with("Proxy finalize failed")
        logger.info.assert_not_called()


class TestComponentLogging:
    """Test that components emit audit events."""

    def test_resolver_logs_each_role(self, recording_deployer, tx_defaults):
        resolver = FeatureResolver(recording_deployer, tx_defaults, {"registry": "0x" + "01" * 20})
        resolver.logger = make_mock_logger()

        resolver.resolve_many([Role.REGISTRY, Role.OWNABLE])

        messages = [c.args[0] for c in resolver.logger.info.call_args_list]
        assert messages == ["Feature override reused", "Feature deployed"]

    def test_controller_logs_finalize(self, tx_defaults, owner):
        deployer = InMemoryDeployer()
        controller = InitialMigrationController.deploy(deployer, tx_defaults)
        controller.logger = make_mock_logger()
        proxy = deployer.deploy("ZeroEx", tx_defaults, controller.address)
        features = deploy_minimal_features(deployer, tx_defaults)

        controller.finalize(owner, proxy, features)

        assert controller.logger.bound["finalize_result"] == "SUCCESS"
        assert controller.logger.bound["roles"] == ["registry", "ownable"]
        controller.logger.info.assert_called_once_with("Proxy finalized")
