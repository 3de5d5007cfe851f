#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from proxy_deployment.options import (
    autosign_option,
    contract_name_option,
    current_contract_name_option,
    proxy_address_option,
    verify_option,
)
from proxy_deployment.params import upgrade
from proxy_deployment.procedure import run


@click.command(cls=ConnectedProviderCommand, name="upgrade-proxy")
@network_option(required=True)
@proxy_address_option()
@contract_name_option
@current_contract_name_option
@verify_option
@autosign_option
def cli(network, proxy_address, contract_name, current_contract_name, verify, auto):
    """Point an existing UUPS proxy at a new implementation."""
    click.echo(f"Connected to {network.name} network.")
    run(
        upgrade,
        proxy_address=proxy_address,
        contract_name=contract_name,
        current_contract_name=current_contract_name,
        verify=verify,
        autosign=auto,
    )


if __name__ == "__main__":
    cli()
