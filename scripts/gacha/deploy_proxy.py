#!/usr/bin/python3

from proxy_deployment.params import deploy_from_yaml
from proxy_deployment.procedure import ProxyDeployment, run
from proxy_deployment.utils import params_filepath

VERIFY = False
CONTRACT_NAME = "GachaContract"
PARAMS_FILENAME = "gacha-proxy.yml"


def deploy() -> ProxyDeployment:
    filepath = params_filepath(PARAMS_FILENAME)
    return deploy_from_yaml(filepath=filepath, contract_name=CONTRACT_NAME, verify=VERIFY)


def main():
    """
    This script deploys GachaContract behind a UUPS proxy.

    The BoxContract proxy it links to is read from $BOX_PROXY_ADDRESS
    and the owner from $ADDRESS.
    """
    run(deploy)
