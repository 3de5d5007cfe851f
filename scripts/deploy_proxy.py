#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from proxy_deployment.options import (
    autosign_option,
    contract_name_option,
    params_file_option,
    verify_option,
)
from proxy_deployment.params import deploy_from_yaml
from proxy_deployment.procedure import run


@click.command(cls=ConnectedProviderCommand, name="deploy-proxy")
@network_option(required=True)
@params_file_option
@contract_name_option
@verify_option
@autosign_option
def cli(network, params_file, contract_name, verify, auto):
    """Deploy any contract from a params file behind a UUPS proxy."""
    click.echo(f"Connected to {network.name} network.")
    run(
        deploy_from_yaml,
        filepath=params_file,
        contract_name=contract_name,
        verify=verify,
        autosign=auto,
    )


if __name__ == "__main__":
    cli()
