import os
import typing
from pathlib import Path
from typing import Any, Dict, List

import yaml
from ape import accounts, networks, project
from ape.api import AccountAPI
from ape.contracts import ContractContainer, ContractInstance
from ape_etherscan.utils import API_KEY_ENV_KEY_MAP
from ethpm_types import MethodABI
from web3.auto import w3

from proxy_deployment.config import DeploymentConfig, DeploymentConfigError
from proxy_deployment.constants import BSC_TESTNET, INITIALIZER_PARAMS_DIR, LOCAL_NETWORKS


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def is_local_network() -> bool:
    return networks.provider.network.name in LOCAL_NETWORKS


def validate_config(config: Dict) -> None:
    """
    Checks that the params file is well-formed and targets the chain
    of the connected network.
    """
    print("Validating parameters YAML...")

    deployment = config.get("deployment")
    if not deployment:
        raise ValueError("deployment is not set in params file.")

    config_chain_id = deployment.get("chain_id")
    if not config_chain_id:
        raise ValueError("chain_id is not set in params file.")

    contracts = config.get("contracts")
    if not contracts:
        raise ValueError("Initializer parameters file missing 'contracts' field.")

    config_chain_id = int(config_chain_id)
    chain_mismatch = config_chain_id != networks.provider.network.chain_id
    if chain_mismatch and not is_local_network():
        raise ValueError(
            f"chain_id in params file ({config_chain_id}) does not match "
            f"chain_id of current network ({networks.provider.network.chain_id})."
        )


def check_provider(deployment_config: DeploymentConfig) -> None:
    """
    Checks that an RPC endpoint is configured for the connected BSC network
    and that ape is actually connected to it.
    """
    if is_local_network():
        return  # unnecessary for local deployment
    network_name = networks.provider.network.name
    configured_uri = deployment_config.provider_uri(network_name)
    if not configured_uri:
        raise DeploymentConfigError(f"No RPC endpoint configured for network '{network_name}'.")
    # ape expands ape-config.yaml before any .env file is loaded
    connected_uri = getattr(networks.provider, "uri", None)
    if connected_uri and connected_uri != configured_uri:
        raise DeploymentConfigError(
            f"RPC endpoint for '{network_name}' is {configured_uri} but ape connected to "
            f"{connected_uri}. Export it in the shell or use 'dotenv run -- ape run ...'."
        )


def check_etherscan_plugin(deployment_config: DeploymentConfig) -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the explorer API key is available to it.

    ape-etherscan only reads its key from its own environment variable, so
    a key configured as BSC_API_KEY is exported into os.environ under that
    name.
    """
    if is_local_network():
        # unnecessary for local deployment
        return
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to use this script.")
    ecosystem_name = networks.provider.network.ecosystem.name
    explorer_envvar = API_KEY_ENV_KEY_MAP.get(ecosystem_name)
    if not explorer_envvar:
        raise ValueError(f"No explorer support for ecosystem '{ecosystem_name}'.")
    api_key = os.environ.get(explorer_envvar) or deployment_config.explorer_api_key
    if not api_key:
        raise DeploymentConfigError(f"{explorer_envvar} is not set.")
    os.environ[explorer_envvar] = api_key


def check_plugins(deployment_config: DeploymentConfig, verify: bool) -> None:
    print("Checking plugins...")
    check_provider(deployment_config)
    if verify:
        check_etherscan_plugin(deployment_config)


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name}...")
        explorer.publish_contract(instance.address)


def get_deployer_account(deployment_config: DeploymentConfig) -> AccountAPI:
    """Returns the deployer account for the connected network."""
    if is_local_network():
        return accounts.test_accounts[0]
    try:
        return accounts.load(deployment_config.account_alias)
    except (IndexError, KeyError):
        raise DeploymentConfigError(
            f"No account found with alias '{deployment_config.account_alias}'. "
            "Run 'ape run import_account' first."
        )


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def validate_method_args(
    method_abis: List[MethodABI], args: typing.Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise ValueError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = {}
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def params_filepath(filename: str) -> Path:
    """Returns the params file for the connected network; local runs use the testnet params."""
    network_name = BSC_TESTNET if is_local_network() else networks.provider.network.name
    filepath = INITIALIZER_PARAMS_DIR / network_name / filename
    if not filepath.exists():
        raise FileNotFoundError(f"No params file found at {filepath}")
    return filepath
