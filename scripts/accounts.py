#!/usr/bin/python3

import click
from ape import accounts
from ape.cli import ConnectedProviderCommand, network_option

from proxy_deployment.utils import is_local_network


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
def cli(network):
    """Print the list of accounts and their balances."""
    click.echo(f"Connected to {network.name} network.")
    available = accounts.test_accounts if is_local_network() else accounts
    for account in available:
        click.secho(f"{account.address} {account.balance}", fg="cyan")


if __name__ == "__main__":
    cli()
