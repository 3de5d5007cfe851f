"""
Deploy and upgrade UUPS proxies.

Each procedure is a single linear run: resolve a contract factory, deploy or
upgrade the proxy, wait for the transactions, then report the proxy and
logic addresses. Failures are never recovered locally; they surface through
:func:`execute`, which turns them into a non-zero exit status.
"""

import sys
import typing
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

import click

from proxy_deployment.constants import UUPS_PROXY_KIND


class ProxyDeployment(typing.NamedTuple):
    contract_name: str
    proxy_address: str
    implementation_address: str


class Resolver(ABC):
    """Looks up compiled contract factories and attaches them to deployed addresses."""

    @abstractmethod
    def get_factory(self, contract_name: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def attach(self, contract_name: str, address: str) -> Any:
        raise NotImplementedError


class Upgrader(ABC):
    """Creates and upgrades proxies."""

    @abstractmethod
    def deploy_proxy(self, factory: Any, args: Sequence[Any], kind: str = UUPS_PROXY_KIND) -> Any:
        raise NotImplementedError

    @abstractmethod
    def upgrade_proxy(self, proxy: Any, factory: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def implementation_address(self, proxy_address: str) -> str:
        raise NotImplementedError


def announce_deployer(account) -> None:
    click.echo(f"Deployer: {account.address}")
    click.echo(f"Balance: {account.balance}")


def deploy_proxy(
    resolver: Resolver,
    upgrader: Upgrader,
    contract_name: str,
    initializer_args: Sequence[Any],
) -> ProxyDeployment:
    factory = resolver.get_factory(contract_name)
    click.echo(f"Deploying {contract_name}...")
    proxy = upgrader.deploy_proxy(factory, list(initializer_args), kind=UUPS_PROXY_KIND)
    implementation_address = upgrader.implementation_address(proxy.address)
    deployment = ProxyDeployment(
        contract_name=contract_name,
        proxy_address=proxy.address,
        implementation_address=implementation_address,
    )
    report_addresses(deployment)
    return deployment


def upgrade_proxy(
    resolver: Resolver,
    upgrader: Upgrader,
    proxy_address: str,
    contract_name: str,
    current_contract_name: Optional[str] = None,
) -> ProxyDeployment:
    current_contract_name = current_contract_name or contract_name
    current = resolver.attach(current_contract_name, proxy_address)
    click.echo(f"Upgrading {current_contract_name} at {proxy_address}...")

    factory = resolver.get_factory(contract_name)
    upgraded = upgrader.upgrade_proxy(current, factory)
    if upgraded.address.lower() != proxy_address.lower():
        raise ValueError(
            f"Upgrade of {proxy_address} returned a handle at a different address "
            f"({upgraded.address})."
        )

    implementation_address = upgrader.implementation_address(proxy_address)
    deployment = ProxyDeployment(
        contract_name=contract_name,
        proxy_address=proxy_address,
        implementation_address=implementation_address,
    )
    report_addresses(deployment)
    return deployment


def report_addresses(deployment: ProxyDeployment) -> None:
    click.echo(f"{deployment.contract_name} proxy address: {deployment.proxy_address}")
    click.echo(f"{deployment.contract_name} logic address: {deployment.implementation_address}")


def execute(procedure: Callable[..., Any], *args, **kwargs) -> int:
    """Runs a procedure and returns the process exit status."""
    try:
        procedure(*args, **kwargs)
    except Exception as e:
        click.echo(f"{type(e).__name__}: {e}", err=True)
        return 1
    return 0


def run(procedure: Callable[..., Any], *args, **kwargs) -> None:
    exit_code = execute(procedure, *args, **kwargs)
    if exit_code:
        sys.exit(exit_code)
