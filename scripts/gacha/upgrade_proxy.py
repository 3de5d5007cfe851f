#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from proxy_deployment.options import autosign_option, proxy_address_option, verify_option
from proxy_deployment.params import upgrade
from proxy_deployment.procedure import run

CONTRACT_NAME_V1 = "GachaContract"
CONTRACT_NAME_V2 = "GachaContract"


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@proxy_address_option(envvar="GACHA_PROXY_ADDRESS")
@verify_option
@autosign_option
def cli(network, proxy_address, verify, auto):
    """Upgrade the GachaContract proxy to a new implementation."""
    click.echo(f"Connected to {network.name} network.")
    run(
        upgrade,
        proxy_address=proxy_address,
        contract_name=CONTRACT_NAME_V2,
        current_contract_name=CONTRACT_NAME_V1,
        verify=verify,
        autosign=auto,
    )


if __name__ == "__main__":
    cli()
