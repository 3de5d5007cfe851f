from typing import Any, Optional, Sequence

from ape import chain
from ape.contracts import ContractContainer, ContractInstance
from ape.utils import EMPTY_BYTES32
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from proxy_deployment.constants import (
    EIP1967_IMPLEMENTATION_SLOT,
    INITIALIZER_METHOD,
    PROXY_CONTRACT_NAME,
    SUPPORTED_PROXY_KINDS,
    UPGRADE_AND_CALL_METHOD,
    UPGRADE_METHOD,
    UUPS_PROXY_KIND,
)
from proxy_deployment.procedure import Upgrader
from proxy_deployment.utils import get_contract_container, validate_method_args


class UUPSUpgrader(Upgrader):
    """
    Deploys and upgrades UUPS proxies.

    A proxy is an ``ERC1967Proxy`` whose constructor delegates the initializer
    call to a freshly deployed implementation. Upgrades go through the
    implementation's own ``upgradeTo`` (or ``upgradeToAndCall`` when there is
    call data), so the caller must hold the upgrade authorization on-chain.

    No storage layout compatibility check is performed; an incompatible
    implementation is only rejected if the contract itself reverts.
    """

    def __init__(
        self,
        transactor,
        proxy_container: Optional[ContractContainer] = None,
        provider=None,
    ):
        self.transactor = transactor
        self._proxy_container = proxy_container
        self._provider = provider

    @property
    def proxy_container(self) -> ContractContainer:
        if self._proxy_container is None:
            self._proxy_container = get_contract_container(PROXY_CONTRACT_NAME)
        return self._proxy_container

    @property
    def provider(self):
        return self._provider or chain.provider

    def deploy_proxy(
        self,
        factory: ContractContainer,
        args: Sequence[Any],
        kind: str = UUPS_PROXY_KIND,
    ) -> ContractInstance:
        if kind not in SUPPORTED_PROXY_KINDS:
            raise ValueError(
                f"Unsupported proxy kind '{kind}'; expected one of {SUPPORTED_PROXY_KINDS}"
            )
        contract_name = factory.contract_type.name
        initializer_abis = [
            abi for abi in factory.contract_type.methods if abi.name == INITIALIZER_METHOD
        ]
        validate_method_args(method_abis=initializer_abis, args=args)

        implementation = self.transactor.deploy(factory)
        data = getattr(implementation, INITIALIZER_METHOD).encode_input(*args)

        print(f"\nDeploying {PROXY_CONTRACT_NAME} contract to proxy {contract_name}.")
        proxy = self.transactor.deploy(self.proxy_container, implementation.address, data)
        print(
            f"\nWrapping {contract_name} into {PROXY_CONTRACT_NAME} "
            f"at {proxy.address}."
        )
        return factory.at(proxy.address)

    def upgrade_proxy(
        self, proxy: ContractInstance, factory: ContractContainer, data: bytes = b""
    ) -> ContractInstance:
        # fails early if the target is not an EIP1967 proxy
        current_implementation = self.implementation_address(proxy.address)
        print(f"Current implementation of {proxy.address}: {current_implementation}")

        implementation = self.transactor.deploy(factory)
        if data:
            upgrade_method = getattr(proxy, UPGRADE_AND_CALL_METHOD)
            self.transactor.transact(upgrade_method, implementation.address, data)
        else:
            # upgradeToAndCall with empty data still delegatecalls the new implementation
            upgrade_method = getattr(proxy, UPGRADE_METHOD)
            self.transactor.transact(upgrade_method, implementation.address)
        return factory.at(proxy.address)

    def implementation_address(self, proxy_address: str) -> ChecksumAddress:
        implementation_slot = self.provider.get_storage(
            to_checksum_address(proxy_address), EIP1967_IMPLEMENTATION_SLOT
        )
        if implementation_slot == EMPTY_BYTES32:
            raise ValueError(
                f"Implementation slot for contract at {proxy_address} is empty. "
                "Are you sure this is an EIP1967-compatible proxy?"
            )
        return to_checksum_address(implementation_slot[-20:])
