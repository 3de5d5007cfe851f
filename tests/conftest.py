from types import SimpleNamespace

import pytest
from eth_utils import to_checksum_address

from proxy_deployment.config import DeploymentConfig
from proxy_deployment.procedure import Resolver, Upgrader

# Common constants
OWNER = to_checksum_address("0x" + "11" * 20)
DEPLOYER = to_checksum_address("0x" + "22" * 20)
BOX_PROXY = to_checksum_address("0x" + "33" * 20)


class FakeContract:
    def __init__(self, contract_name, address):
        self.contract_type = SimpleNamespace(name=contract_name)
        self.address = address


class FakeFactory:
    def __init__(self, contract_name):
        self.contract_type = SimpleNamespace(name=contract_name)

    def at(self, address):
        return FakeContract(self.contract_type.name, address)


class FakeResolver(Resolver):
    def __init__(self, calls, known=("BoxContract", "GachaContract")):
        self.calls = calls
        self.known = known

    def get_factory(self, contract_name):
        self.calls.append(("get_factory", contract_name))
        if contract_name not in self.known:
            raise ValueError(f"No contract found with name '{contract_name}'.")
        return FakeFactory(contract_name)

    def attach(self, contract_name, address):
        self.calls.append(("attach", contract_name, address))
        return self.get_factory(contract_name).at(address)


class FakeUpgrader(Upgrader):
    def __init__(self, calls, proxy_address="0xP1", implementation_address="0xL1", error=None):
        self.calls = calls
        self.proxy_address = proxy_address
        self._implementation_address = implementation_address
        self.error = error

    def deploy_proxy(self, factory, args, kind="uups"):
        self.calls.append(("deploy_proxy", factory, args, kind))
        if self.error:
            raise self.error
        return factory.at(self.proxy_address)

    def upgrade_proxy(self, proxy, factory):
        self.calls.append(("upgrade_proxy", proxy, factory))
        if self.error:
            raise self.error
        return factory.at(proxy.address)

    def implementation_address(self, proxy_address):
        self.calls.append(("implementation_address", proxy_address))
        return self._implementation_address


# Fixtures
@pytest.fixture
def creator(accounts):
    return accounts[0]


@pytest.fixture
def account1(accounts):
    return accounts[1]


@pytest.fixture
def calls():
    return list()


@pytest.fixture
def resolver(calls):
    return FakeResolver(calls)


@pytest.fixture
def upgrader(calls):
    return FakeUpgrader(calls)


@pytest.fixture
def deployment_config():
    return DeploymentConfig.from_env(
        environ={
            "ADDRESS": OWNER.lower(),
            "BOX_PROXY_ADDRESS": BOX_PROXY,
            "BSC_TESTNET_PROVIDER": "https://data-seed-prebsc-1-s1.binance.org:8545",
        }
    )
