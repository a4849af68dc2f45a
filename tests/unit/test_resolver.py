"""Tests for feature set resolution."""

from unittest.mock import Mock

import pytest

from proxy_migration.deployment.base import ExecutionError
from proxy_migration.errors import ConfigurationError, DeploymentFailure
from proxy_migration.migration.resolver import FeatureResolver, deploy_artifact, resolve_feature
from proxy_migration.models.constructor_args import LimitOrdersArgs
from proxy_migration.models.features import FEATURE_ARTIFACTS, Role

OVERRIDE = "0x" + "ab" * 20


class TestResolveFeature:
    """Test the pure deploy-or-reuse function."""

    def test_override_skips_deployment(self):
        deploy_fn = Mock(return_value="0xdeployed")

        assert resolve_feature(Role.REGISTRY, OVERRIDE, deploy_fn) == OVERRIDE
        deploy_fn.assert_not_called()

    def test_missing_override_deploys_once(self):
        deploy_fn = Mock(return_value="0xdeployed")

        assert resolve_feature(Role.REGISTRY, None, deploy_fn) == "0xdeployed"
        deploy_fn.assert_called_once_with()

    def test_empty_override_deploys(self):
        deploy_fn = Mock(return_value="0xdeployed")

        assert resolve_feature(Role.OWNABLE, "", deploy_fn) == "0xdeployed"
        assert deploy_fn.call_count == 1

    def test_resolution_with_override_is_idempotent(self):
        deploy_fn = Mock()

        first = resolve_feature(Role.LIMIT_ORDERS, OVERRIDE, deploy_fn)
        second = resolve_feature(Role.LIMIT_ORDERS, OVERRIDE, deploy_fn)

        assert first == second == OVERRIDE
        deploy_fn.assert_not_called()


class TestFeatureResolver:
    """Test FeatureResolver against a recording deployer."""

    def test_overridden_roles_never_deployed(self, recording_deployer, tx_defaults):
        resolver = FeatureResolver(recording_deployer, tx_defaults, {"registry": OVERRIDE})

        addresses = resolver.resolve_many([Role.REGISTRY, Role.OWNABLE])

        assert addresses[Role.REGISTRY] == OVERRIDE
        deployed_artifacts = [c.args[0] for c in recording_deployer.deploy.call_args_list]
        assert deployed_artifacts == [FEATURE_ARTIFACTS[Role.OWNABLE]]

    def test_constructor_args_passed_in_declared_order(self, recording_deployer, tx_defaults):
        resolver = FeatureResolver(recording_deployer, tx_defaults)
        args = LimitOrdersArgs(
            zero_ex_address="0x" + "01" * 20,
            weth_address="0x" + "02" * 20,
            staking_address="0x" + "03" * 20,
            protocol_fee_multiplier=70000,
        )

        resolver.resolve(Role.LIMIT_ORDERS, args)

        recording_deployer.deploy.assert_called_once_with(
            "LimitOrdersFeature", tx_defaults,
            "0x" + "01" * 20, "0x" + "02" * 20, "0x" + "03" * 20, 70000,
        )

    def test_resolving_twice_with_override_issues_no_deploys(self, recording_deployer, tx_defaults):
        resolver = FeatureResolver(recording_deployer, tx_defaults, {Role.TOKEN_SPENDER: OVERRIDE})

        assert resolver.resolve(Role.TOKEN_SPENDER) == resolver.resolve(Role.TOKEN_SPENDER) == OVERRIDE
        recording_deployer.deploy.assert_not_called()

    def test_invalid_override_rejected_before_deploying(self, recording_deployer, tx_defaults):
        with pytest.raises(ConfigurationError):
            FeatureResolver(recording_deployer, tx_defaults, {"registry": "0x1234"})
        recording_deployer.deploy.assert_not_called()

    def test_execution_error_wrapped_with_role(self, recording_deployer, tx_defaults):
        recording_deployer.deploy.side_effect = ExecutionError("out of gas")
        resolver = FeatureResolver(recording_deployer, tx_defaults)

        with pytest.raises(DeploymentFailure) as exc_info:
            resolver.resolve(Role.SIGNATURE_VALIDATOR)

        error = exc_info.value
        assert error.role == "signature_validator"
        assert error.artifact == "SignatureValidatorFeature"
        assert error.step == "deploy"
        assert isinstance(error.__cause__, ExecutionError)


class TestDeployArtifact:
    """Test failure propagation from the deployment primitive."""

    def test_deployment_failure_propagates_verbatim(self, recording_deployer, tx_defaults):
        original = DeploymentFailure("rejected by node")
        recording_deployer.deploy.side_effect = original

        with pytest.raises(DeploymentFailure) as exc_info:
            deploy_artifact(recording_deployer, "ZeroEx", tx_defaults, role="proxy")

        assert exc_info.value is original
        assert exc_info.value.role == "proxy"

    def test_existing_role_preserved(self, recording_deployer, tx_defaults):
        recording_deployer.deploy.side_effect = DeploymentFailure("rejected", role="ownable")

        with pytest.raises(DeploymentFailure) as exc_info:
            deploy_artifact(recording_deployer, "OwnableFeature", tx_defaults, role="proxy")

        assert exc_info.value.role == "ownable"

    def test_unexpected_errors_not_wrapped(self, recording_deployer, tx_defaults):
        recording_deployer.deploy.side_effect = KeyError("bug")

        with pytest.raises(KeyError):
            deploy_artifact(recording_deployer, "ZeroEx", tx_defaults, role="proxy")
