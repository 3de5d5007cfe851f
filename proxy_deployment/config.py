import os
import typing
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from proxy_deployment.constants import (
    ACCOUNT_ALIAS_ENVVAR,
    BSC_MAINNET,
    BSC_PROVIDER_ENVVAR,
    BSC_TESTNET,
    BSC_TESTNET_PROVIDER_ENVVAR,
    DEFAULT_ACCOUNT_ALIAS,
    EXPLORER_API_KEY_ENVVAR,
    OWNER_ADDRESS_ENVVAR,
    PASSPHRASE_ENVVAR,
    PRIVATE_KEY_ENVVAR,
)


class DeploymentConfigError(ValueError):
    pass


def load_environment(dotenv_path: Optional[Path] = None) -> bool:
    """
    Loads a .env file (by default the one nearest the working directory) into
    os.environ. Variables already set in the environment take precedence.
    """
    return load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True))


def _checksum_or_none(name: str, value: Optional[str]) -> Optional[ChecksumAddress]:
    if not value:
        return None
    try:
        return to_checksum_address(value)
    except ValueError:
        raise DeploymentConfigError(f"{name} is not a valid address: '{value}'")


class DeploymentConfig(typing.NamedTuple):
    """
    Process-wide settings for a deployment run.

    Built once at process entry and handed to everything that needs
    credentials, endpoints or environment-sourced parameters.
    """

    private_key: Optional[str] = None
    owner_address: Optional[ChecksumAddress] = None
    bsc_provider: Optional[str] = None
    bsc_testnet_provider: Optional[str] = None
    explorer_api_key: Optional[str] = None
    account_alias: str = DEFAULT_ACCOUNT_ALIAS
    passphrase: Optional[str] = None
    environment: Mapping[str, str] = MappingProxyType({})

    @classmethod
    def from_env(
        cls,
        environ: Optional[typing.Mapping[str, str]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "DeploymentConfig":
        """Reads the deployment settings from the environment (and a .env file, if any)."""
        if environ is None:
            load_environment(dotenv_path=dotenv_path)
            environ = os.environ
        environment = MappingProxyType(dict(environ))

        return cls(
            private_key=environment.get(PRIVATE_KEY_ENVVAR) or None,
            owner_address=_checksum_or_none(
                OWNER_ADDRESS_ENVVAR, environment.get(OWNER_ADDRESS_ENVVAR)
            ),
            bsc_provider=environment.get(BSC_PROVIDER_ENVVAR) or None,
            bsc_testnet_provider=environment.get(BSC_TESTNET_PROVIDER_ENVVAR) or None,
            explorer_api_key=environment.get(EXPLORER_API_KEY_ENVVAR) or None,
            account_alias=environment.get(ACCOUNT_ALIAS_ENVVAR) or DEFAULT_ACCOUNT_ALIAS,
            passphrase=environment.get(PASSPHRASE_ENVVAR) or None,
            environment=environment,
        )

    def provider_uri(self, network_name: str) -> Optional[str]:
        """Returns the RPC endpoint configured for a BSC network."""
        uris = {
            BSC_MAINNET: self.bsc_provider,
            BSC_TESTNET: self.bsc_testnet_provider,
        }
        return uris.get(network_name)

    def get_env(self, name: str) -> str:
        try:
            value = self.environment[name]
        except KeyError:
            raise DeploymentConfigError(f"{name} is not set.")
        if not value:
            raise DeploymentConfigError(f"{name} is empty.")
        return value

    def require_owner(self) -> ChecksumAddress:
        if self.owner_address is None:
            raise DeploymentConfigError(f"{OWNER_ADDRESS_ENVVAR} is not set.")
        return self.owner_address
