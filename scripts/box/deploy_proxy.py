#!/usr/bin/python3

from proxy_deployment.params import deploy_from_yaml
from proxy_deployment.procedure import ProxyDeployment, run
from proxy_deployment.utils import params_filepath

VERIFY = False
CONTRACT_NAME = "BoxContract"
PARAMS_FILENAME = "box-proxy.yml"


def deploy() -> ProxyDeployment:
    filepath = params_filepath(PARAMS_FILENAME)
    return deploy_from_yaml(filepath=filepath, contract_name=CONTRACT_NAME, verify=VERIFY)


def main():
    """
    This script deploys BoxContract behind a UUPS proxy, owned by $ADDRESS.
    """
    run(deploy)
