#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from proxy_deployment.options import proxy_address_option
from proxy_deployment.procedure import run
from proxy_deployment.upgrader import UUPSUpgrader


def show_addresses(upgrader: UUPSUpgrader, proxy_address: str) -> None:
    implementation_address = upgrader.implementation_address(proxy_address)
    click.echo(f"Proxy address: {proxy_address}")
    click.echo(f"Logic address: {implementation_address}")


@click.command(cls=ConnectedProviderCommand, name="implementation-address")
@network_option(required=True)
@proxy_address_option()
def cli(network, proxy_address):
    """Print the logic contract a UUPS proxy currently points to."""
    # read-only; nothing is signed
    run(show_addresses, UUPSUpgrader(transactor=None), proxy_address)


if __name__ == "__main__":
    cli()
