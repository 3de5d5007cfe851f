from pathlib import Path

import click

from proxy_deployment.types import ChecksumAddress


def proxy_address_option(envvar=None, required=True):
    return click.option(
        "--proxy-address",
        "-p",
        help="Address of an existing UUPS proxy.",
        type=ChecksumAddress(),
        envvar=envvar,
        required=required,
    )


contract_name_option = click.option(
    "--contract-name",
    "-c",
    help="Name of the compiled contract.",
    type=click.STRING,
    required=True,
)

current_contract_name_option = click.option(
    "--current-contract-name",
    help="Contract the proxy currently implements; defaults to --contract-name.",
    type=click.STRING,
    required=False,
)

params_file_option = click.option(
    "--params-file",
    "-f",
    help="YAML file with the initializer parameters.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

verify_option = click.option(
    "--verify",
    help="Publish deployed contracts to the block explorer.",
    is_flag=True,
)

autosign_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)
