"""Tests for the web3-backed deployment primitive."""

import json
from unittest.mock import Mock

import pytest
from web3.exceptions import ContractLogicError, Web3RPCError

from proxy_migration.config.defaults import FinalizeOptions, get_default_deploy_config
from proxy_migration.deployment.artifacts import ArtifactStore
from proxy_migration.deployment.base import DeployedContract, ExecutionError
from proxy_migration.deployment.web3_deployer import Web3Deployer, encode_arg
from proxy_migration.errors import DeploymentFailure
from proxy_migration.migration.bootstrap import bootstrap_migrate
from proxy_migration.models.features import BootstrapFeatures

ABI = [{"type": "constructor", "inputs": [], "stateMutability": "nonpayable"}]
DEPLOYED = "0x" + "ab" * 20
TX_HASH = b"\x01" * 32


@pytest.fixture
def artifacts(tmp_path):
    for name, bytecode in [("ZeroEx", "0x6080"), ("InitialMigration", "0x6080"), ("IZeroEx", "0x")]:
        (tmp_path / f"{name}.json").write_text(json.dumps({"abi": ABI, "bytecode": bytecode}))
    return ArtifactStore(tmp_path)


@pytest.fixture
def web3():
    mock = Mock()
    mock.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "contractAddress": DEPLOYED,
        "blockNumber": 12,
    }
    contract = mock.eth.contract.return_value
    contract.constructor.return_value.transact.return_value = TX_HASH
    contract.functions.initializeZeroEx.return_value.transact.return_value = TX_HASH
    contract.functions.getBootstrapper.return_value.call.return_value = DEPLOYED
    return mock


class TestEncodeArg:
    """Test ABI argument encoding."""

    def test_features_encoded_as_struct(self):
        features = BootstrapFeatures(registry="0x" + "01" * 20, ownable="0x" + "02" * 20)

        assert encode_arg(features) == {"registry": "0x" + "01" * 20, "ownable": "0x" + "02" * 20}

    def test_finalize_options_encoded_as_migrate_opts(self, sender):
        options = FinalizeOptions.from_config(get_default_deploy_config(), sender)

        assert encode_arg(options) == {"transformerDeployer": sender}

    def test_plain_values_unchanged(self):
        assert encode_arg(70000) == 70000


class TestWeb3Deployer:
    """Test Web3Deployer against a mocked provider."""

    def test_deploy(self, web3, artifacts, tx_defaults, sender):
        deployer = Web3Deployer(web3, artifacts)

        contract = deployer.deploy("ZeroEx", tx_defaults, sender)

        web3.eth.contract.assert_called_with(abi=ABI, bytecode="0x6080")
        web3.eth.contract.return_value.constructor.assert_called_once_with(sender)
        web3.eth.contract.return_value.constructor.return_value.transact.assert_called_once_with(
            {"from": sender, "gas": 6_000_000}
        )
        web3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HASH, timeout=120.0)
        assert contract.address.lower() == DEPLOYED
        assert contract.constructor_args == (sender,)
        assert deployer.get_stats()["deploy_count"] == 1

    def test_deploy_reverted(self, web3, artifacts, tx_defaults):
        web3.eth.wait_for_transaction_receipt.return_value = {"status": 0, "contractAddress": None}
        deployer = Web3Deployer(web3, artifacts)

        with pytest.raises(ExecutionError):
            deployer.deploy("ZeroEx", tx_defaults)

    def test_deploy_logic_error(self, web3, artifacts, tx_defaults):
        web3.eth.contract.return_value.constructor.return_value.transact.side_effect = ContractLogicError("revert")
        deployer = Web3Deployer(web3, artifacts)

        with pytest.raises(ExecutionError) as exc_info:
            deployer.deploy("ZeroEx", tx_defaults)
        assert isinstance(exc_info.value.__cause__, ContractLogicError)

    def test_interface_artifact_not_deployable(self, web3, artifacts, tx_defaults):
        deployer = Web3Deployer(web3, artifacts)

        with pytest.raises(ExecutionError):
            deployer.deploy("IZeroEx", tx_defaults)
        web3.eth.contract.assert_not_called()

    def test_call(self, web3, artifacts):
        deployer = Web3Deployer(web3, artifacts)
        contract = DeployedContract(address=DEPLOYED, artifact="ZeroEx")

        assert deployer.call(contract, "getBootstrapper") == DEPLOYED
        web3.eth.contract.assert_called_with(address=DEPLOYED, abi=ABI)

    def test_transact_encodes_structs(self, web3, artifacts, tx_defaults, owner):
        deployer = Web3Deployer(web3, artifacts)
        controller = DeployedContract(address=DEPLOYED, artifact="InitialMigration")
        features = BootstrapFeatures(registry="0x" + "01" * 20, ownable="0x" + "02" * 20)

        receipt = deployer.transact(controller, "initializeZeroEx", owner, DEPLOYED, features,
                                    tx_defaults=tx_defaults)

        web3.eth.contract.return_value.functions.initializeZeroEx.assert_called_once_with(
            owner, DEPLOYED, features.abi_struct()
        )
        assert receipt.success
        assert receipt.block_number == 12
        assert receipt.tx_hash == "0x" + "01" * 32

    def test_transact_reverted(self, web3, artifacts, tx_defaults, owner):
        web3.eth.wait_for_transaction_receipt.return_value = {"status": 0}
        deployer = Web3Deployer(web3, artifacts)
        controller = DeployedContract(address=DEPLOYED, artifact="InitialMigration")

        with pytest.raises(ExecutionError):
            deployer.transact(controller, "initializeZeroEx", owner, tx_defaults=tx_defaults)
        assert deployer.get_stats()["transaction_count"] == 0

    def test_deploy_node_rejection(self, web3, artifacts, tx_defaults):
        rejection = Web3RPCError("insufficient funds for gas * price + value")
        web3.eth.contract.return_value.constructor.return_value.transact.side_effect = rejection
        deployer = Web3Deployer(web3, artifacts)

        with pytest.raises(ExecutionError) as exc_info:
            deployer.deploy("ZeroEx", tx_defaults)
        assert exc_info.value.__cause__ is rejection
        assert deployer.get_stats()["deploy_count"] == 0

    def test_call_node_rejection(self, web3, artifacts):
        web3.eth.contract.return_value.functions.getBootstrapper.return_value.call.side_effect = (
            Web3RPCError("execution reverted")
        )
        deployer = Web3Deployer(web3, artifacts)
        contract = DeployedContract(address=DEPLOYED, artifact="ZeroEx")

        with pytest.raises(ExecutionError):
            deployer.call(contract, "getBootstrapper")

    def test_transact_node_rejection(self, web3, artifacts, tx_defaults, owner):
        web3.eth.contract.return_value.functions.initializeZeroEx.return_value.transact.side_effect = (
            Web3RPCError("nonce too low")
        )
        deployer = Web3Deployer(web3, artifacts)
        controller = DeployedContract(address=DEPLOYED, artifact="InitialMigration")

        with pytest.raises(ExecutionError):
            deployer.transact(controller, "initializeZeroEx", owner, tx_defaults=tx_defaults)

    def test_node_rejection_maps_to_deployment_failure(self, web3, artifacts, tx_defaults, owner):
        web3.eth.contract.return_value.constructor.return_value.transact.side_effect = (
            Web3RPCError("insufficient funds for gas * price + value")
        )
        deployer = Web3Deployer(web3, artifacts)

        with pytest.raises(DeploymentFailure) as exc_info:
            bootstrap_migrate(owner, deployer, tx_defaults)
        assert exc_info.value.role == "controller"
        assert exc_info.value.artifact == "InitialMigration"
        assert isinstance(exc_info.value.__cause__, ExecutionError)
