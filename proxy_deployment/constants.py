from pathlib import Path

import proxy_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(proxy_deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
INITIALIZER_PARAMS_DIR = PROJECT_ROOT / "deployment_params"

#
# Networks
#

BSC_MAINNET = "mainnet"
BSC_TESTNET = "testnet"

LOCAL_NETWORKS = ["local"]

#
# Environment
#

PRIVATE_KEY_ENVVAR = "PRIVATE_KEY"
OWNER_ADDRESS_ENVVAR = "ADDRESS"
BSC_PROVIDER_ENVVAR = "BSC_PROVIDER"
BSC_TESTNET_PROVIDER_ENVVAR = "BSC_TESTNET_PROVIDER"
EXPLORER_API_KEY_ENVVAR = "BSC_API_KEY"
ACCOUNT_ALIAS_ENVVAR = "DEPLOYER_ACCOUNT"
PASSPHRASE_ENVVAR = "DEPLOYER_PASSPHRASE"

DEFAULT_ACCOUNT_ALIAS = "DEPLOYER"

#
# Contracts
#

UUPS_PROXY_KIND = "uups"
SUPPORTED_PROXY_KINDS = [UUPS_PROXY_KIND]

PROXY_CONTRACT_NAME = "ERC1967Proxy"
INITIALIZER_METHOD = "initialize"
UPGRADE_METHOD = "upgradeTo"
UPGRADE_AND_CALL_METHOD = "upgradeToAndCall"

# EIP1967 implementation slot - https://eips.ethereum.org/EIPS/eip-1967#logic-contract-address
EIP1967_IMPLEMENTATION_SLOT = 0x360894A13BA1A3210667C828492DB98DCA3E2076CC3735A920A3CA505D382BBC
