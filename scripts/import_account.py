#!/usr/bin/env python3

from ape_accounts import import_account_from_private_key

from proxy_deployment.config import DeploymentConfig, DeploymentConfigError
from proxy_deployment.constants import PASSPHRASE_ENVVAR, PRIVATE_KEY_ENVVAR


def main():
    deployment_config = DeploymentConfig.from_env()
    if not (deployment_config.passphrase and deployment_config.private_key):
        raise DeploymentConfigError(
            "There are missing environment variables. "
            f"Please set {PASSPHRASE_ENVVAR} and {PRIVATE_KEY_ENVVAR}."
        )
    account = import_account_from_private_key(
        deployment_config.account_alias,
        deployment_config.passphrase,
        deployment_config.private_key,
    )
    print(f"Account imported: {account.address}")


if __name__ == "__main__":
    main()
