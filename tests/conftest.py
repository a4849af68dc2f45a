"""Pytest configuration and shared fixtures."""

import itertools
from unittest.mock import Mock

import pytest
from web3 import Web3

from proxy_migration.deployment.base import BaseDeployer, DeployedContract, TxDefaults
from proxy_migration.deployment.memory import InMemoryDeployer

SENDER = Web3.to_checksum_address("0x" + "5e" * 20)
OWNER = Web3.to_checksum_address("0x" + "0a" * 20)
OTHER_ACCOUNT = Web3.to_checksum_address("0x" + "bb" * 20)


@pytest.fixture
def sender() -> str:
    return SENDER


@pytest.fixture
def owner() -> str:
    return OWNER


@pytest.fixture
def tx_defaults() -> TxDefaults:
    """Transaction defaults naming the deploying account."""
    return TxDefaults(from_address=SENDER, gas=6_000_000)


@pytest.fixture
def deployer() -> InMemoryDeployer:
    """Fresh simulated execution environment."""
    return InMemoryDeployer()


@pytest.fixture
def recording_deployer() -> Mock:
    """Deployer mock handing out sequential addresses for every deploy call."""
    counter = itertools.count(0xA000)
    mock = Mock(spec=BaseDeployer)

    def deploy(artifact, tx_defaults, *args):
        address = Web3.to_checksum_address(f"0x{next(counter):040x}")
        return DeployedContract(address=address, artifact=artifact, constructor_args=tuple(args))

    mock.deploy.side_effect = deploy
    return mock


@pytest.fixture
def other_account() -> str:
    return OTHER_ACCOUNT
