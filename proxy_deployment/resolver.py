from ape.contracts import ContractContainer, ContractInstance
from eth_utils import to_checksum_address

from proxy_deployment.procedure import Resolver
from proxy_deployment.utils import get_contract_container


class ApeContractResolver(Resolver):
    """Resolves contract names against the compiled ape project and its dependencies."""

    def get_factory(self, contract_name: str) -> ContractContainer:
        return get_contract_container(contract_name)

    def attach(self, contract_name: str, address: str) -> ContractInstance:
        container = self.get_factory(contract_name)
        return container.at(to_checksum_address(address))
