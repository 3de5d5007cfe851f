from collections import OrderedDict

import pytest
from ape.utils import ZERO_ADDRESS

from proxy_deployment.config import DeploymentConfig, DeploymentConfigError
from proxy_deployment.params import InitializerParameters, VariableContext
from tests.conftest import BOX_PROXY, DEPLOYER, OWNER

PARAMS_CONFIG = {
    "deployment": {"name": "gacha-proxy", "chain_id": 97},
    "constants": {"BOX_CONTRACT": BOX_PROXY, "SYMBOLS": ["BOX", "GACHA"]},
    "contracts": [
        "EmptyContract",
        {
            "BoxContract": {
                "initializer": {
                    "name": "Box",
                    "symbol": "BOX",
                    "ownerAddress": "$owner",
                }
            }
        },
        {
            "GachaContract": {
                "initializer": {
                    "boxContract": "$env:BOX_PROXY_ADDRESS",
                    "ownerAddress": "$owner",
                }
            }
        },
        {
            "LinkedContract": {
                "initializer": {
                    "box": "$BOX_CONTRACT",
                    "admins": ["$deployer", "$owner"],
                    "symbols": "$SYMBOLS",
                }
            }
        },
    ],
}


def _load(config, deployment_config, deployer_address=DEPLOYER):
    context = VariableContext(
        deployment_config=deployment_config,
        constants=config.get("constants"),
        deployer_address=deployer_address,
    )
    return InitializerParameters.from_config(config, context)


def test_initializer_parameters(deployment_config):
    parameters = _load(PARAMS_CONFIG, deployment_config)

    assert list(parameters.parameters) == [
        "EmptyContract",
        "BoxContract",
        "GachaContract",
        "LinkedContract",
    ]
    assert parameters.resolve("EmptyContract") == OrderedDict()

    box = parameters.resolve("BoxContract")
    assert list(box.items()) == [("name", "Box"), ("symbol", "BOX"), ("ownerAddress", OWNER)]

    gacha = parameters.resolve("GachaContract")
    assert list(gacha.values()) == [BOX_PROXY, OWNER]

    linked = parameters.resolve("LinkedContract")
    assert linked["box"] == BOX_PROXY
    assert linked["admins"] == [DEPLOYER, OWNER]
    assert linked["symbols"] == ["BOX", "GACHA"]


def test_deployer_variable_without_account(deployment_config):
    parameters = _load(PARAMS_CONFIG, deployment_config, deployer_address=None)
    assert parameters.resolve("LinkedContract")["admins"] == [ZERO_ADDRESS, OWNER]


def test_unknown_contract(deployment_config):
    parameters = _load(PARAMS_CONFIG, deployment_config)
    with pytest.raises(InitializerParameters.Invalid, match="No initializer parameters"):
        parameters.resolve("MissingContract")


def test_owner_required():
    deployment_config = DeploymentConfig.from_env(environ={"BOX_PROXY_ADDRESS": BOX_PROXY})
    with pytest.raises(DeploymentConfigError, match="ADDRESS is not set"):
        _load(PARAMS_CONFIG, deployment_config)


def test_missing_environment_value():
    deployment_config = DeploymentConfig.from_env(environ={"ADDRESS": OWNER})
    with pytest.raises(DeploymentConfigError, match="BOX_PROXY_ADDRESS is not set"):
        _load(PARAMS_CONFIG, deployment_config)


@pytest.mark.parametrize(
    "value,error,message",
    [
        ("$MISSING", ValueError, "Constant 'MISSING' not found"),
        ("$someContract", InitializerParameters.Invalid, "Unknown variable"),
    ],
)
def test_bad_variables(deployment_config, value, error, message):
    config = {"contracts": [{"BoxContract": {"initializer": {"owner": value}}}]}
    with pytest.raises(error, match=message):
        _load(config, deployment_config)


@pytest.mark.parametrize(
    "contracts",
    [
        [{"BoxContract": {}, "GachaContract": {}}],
        [["BoxContract"]],
        [{"BoxContract": {"initializer": ["Box", "BOX"]}}],
    ],
)
def test_malformed_params(deployment_config, contracts):
    with pytest.raises(InitializerParameters.Invalid, match="Malformed"):
        _load({"contracts": contracts}, deployment_config)
