import os
from types import SimpleNamespace

import pytest

from proxy_deployment import utils
from proxy_deployment.config import DeploymentConfig, DeploymentConfigError
from proxy_deployment.constants import INITIALIZER_PARAMS_DIR

TESTNET_URI = "https://data-seed-prebsc-1-s1.binance.org:8545"


def _connect(monkeypatch, name, chain_id, uri=None):
    provider = SimpleNamespace(
        network=SimpleNamespace(
            name=name, chain_id=chain_id, ecosystem=SimpleNamespace(name="bsc")
        ),
        uri=uri,
    )
    monkeypatch.setattr(utils, "networks", SimpleNamespace(provider=provider))


def test_validate_config(monkeypatch):
    _connect(monkeypatch, "testnet", 97)
    config = {"deployment": {"chain_id": 97}, "contracts": ["BoxContract"]}
    utils.validate_config(config)

    with pytest.raises(ValueError, match=r"chain_id in params file \(56\) does not match"):
        utils.validate_config({"deployment": {"chain_id": 56}, "contracts": ["BoxContract"]})


def test_validate_config_allows_any_chain_locally(monkeypatch):
    _connect(monkeypatch, "local", 1337)
    utils.validate_config({"deployment": {"chain_id": 97}, "contracts": ["BoxContract"]})


@pytest.mark.parametrize(
    "config,message",
    [
        ({"contracts": ["BoxContract"]}, "deployment is not set"),
        ({"deployment": {"name": "box"}, "contracts": ["BoxContract"]}, "chain_id is not set"),
        ({"deployment": {"chain_id": 97}}, "missing 'contracts'"),
    ],
)
def test_validate_config_rejects_incomplete_params(monkeypatch, config, message):
    _connect(monkeypatch, "testnet", 97)
    with pytest.raises(ValueError, match=message):
        utils.validate_config(config)


@pytest.mark.parametrize(
    "network_name,directory",
    [("local", "testnet"), ("testnet", "testnet"), ("mainnet", "mainnet")],
)
def test_params_filepath(monkeypatch, network_name, directory):
    _connect(monkeypatch, network_name, 97)
    filepath = utils.params_filepath("box-proxy.yml")
    assert filepath == INITIALIZER_PARAMS_DIR / directory / "box-proxy.yml"


def test_params_filepath_missing(monkeypatch):
    _connect(monkeypatch, "testnet", 97)
    with pytest.raises(FileNotFoundError, match="No params file found"):
        utils.params_filepath("missing.yml")


def test_check_provider(monkeypatch):
    deployment_config = DeploymentConfig.from_env(environ={"BSC_TESTNET_PROVIDER": TESTNET_URI})

    _connect(monkeypatch, "testnet", 97, uri=TESTNET_URI)
    utils.check_provider(deployment_config)

    _connect(monkeypatch, "mainnet", 56)
    with pytest.raises(DeploymentConfigError, match="No RPC endpoint configured for network"):
        utils.check_provider(deployment_config)


def test_check_provider_detects_unexpanded_endpoint(monkeypatch):
    deployment_config = DeploymentConfig.from_env(environ={"BSC_TESTNET_PROVIDER": TESTNET_URI})
    _connect(monkeypatch, "testnet", 97, uri="$BSC_TESTNET_PROVIDER")
    with pytest.raises(DeploymentConfigError, match="ape connected to \\$BSC_TESTNET_PROVIDER"):
        utils.check_provider(deployment_config)


def test_check_etherscan_plugin_exports_api_key(monkeypatch):
    monkeypatch.setattr(os, "environ", dict())
    monkeypatch.setattr(utils, "API_KEY_ENV_KEY_MAP", {"bsc": "BSCSCAN_API_KEY"})
    _connect(monkeypatch, "testnet", 97)

    utils.check_etherscan_plugin(DeploymentConfig.from_env(environ={"BSC_API_KEY": "key"}))
    assert os.environ["BSCSCAN_API_KEY"] == "key"

    del os.environ["BSCSCAN_API_KEY"]
    with pytest.raises(DeploymentConfigError, match="BSCSCAN_API_KEY is not set"):
        utils.check_etherscan_plugin(DeploymentConfig.from_env(environ={}))
