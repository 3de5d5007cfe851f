import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, Optional

from ape import networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from ape.utils import ZERO_ADDRESS
from ape_accounts import KeyfileAccount
from eth_typing import ChecksumAddress

from proxy_deployment import procedure
from proxy_deployment.config import DeploymentConfig
from proxy_deployment.confirm import _confirm_resolution, _continue
from proxy_deployment.procedure import ProxyDeployment, Resolver, Upgrader
from proxy_deployment.resolver import ApeContractResolver
from proxy_deployment.upgrader import UUPSUpgrader
from proxy_deployment.utils import (
    _load_yaml,
    check_plugins,
    get_deployer_account,
    validate_config,
    validate_method_args,
    verify_contracts,
)

CONTRACT_INITIALIZER_PARAMETER_KEY = "initializer"


class VariableContext:
    def __init__(
        self,
        deployment_config: DeploymentConfig,
        constants: typing.Dict[str, Any] = None,
        deployer_address: Optional[ChecksumAddress] = None,
    ):
        self.deployment_config = deployment_config
        self.constants = constants or dict()
        self.deployer_address = deployer_address


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    def __init__(self, context: VariableContext):
        self.deployer_address = context.deployer_address

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self) -> Any:
        if self.deployer_address is None:
            return ZERO_ADDRESS
        return self.deployer_address


class OwnerAddress(Variable):
    OWNER_INDICATOR = "owner"

    def __init__(self, context: VariableContext):
        self.owner_address = context.deployment_config.require_owner()

    @classmethod
    def is_owner(cls, value: str) -> bool:
        """Returns True if the variable refers to the configured owner address."""
        return value == cls.OWNER_INDICATOR

    def resolve(self) -> Any:
        return self.owner_address


class EnvironmentValue(Variable):
    ENV_PREFIX = "env:"

    def __init__(self, variable: str, context: VariableContext):
        self.name = variable[len(self.ENV_PREFIX) :]
        self.value = context.deployment_config.get_env(self.name)

    @classmethod
    def is_env(cls, value: str) -> bool:
        """Returns True if the variable is read from the environment."""
        return value.startswith(cls.ENV_PREFIX)

    def resolve(self) -> Any:
        return self.value


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise ValueError(f"Constant '{constant_name}' not found in deployment file.")

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self) -> Any:
        return self.constant_value


def _resolve_param(value: Any) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v) for v in value]

    if isinstance(value, Variable):
        return value.resolve()

    return value  # literally a value


def _resolve_params(parameters: OrderedDict) -> OrderedDict:
    resolved_parameters = OrderedDict()
    for name, value in parameters.items():
        resolved_parameters[name] = _resolve_param(value)

    return resolved_parameters


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount(context)
    elif OwnerAddress.is_owner(variable):
        return OwnerAddress(context)
    elif EnvironmentValue.is_env(variable):
        return EnvironmentValue(variable, context)
    elif Constant.is_constant(variable):
        return Constant(variable, context)
    raise InitializerParameters.Invalid(f"Unknown variable '${variable}'.")


def _process_raw_value(value: Any, variable_context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, variable_context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, variable_context)

    return value


def _process_raw_values(values: typing.Dict, variable_context: VariableContext) -> OrderedDict:
    processed_parameters = OrderedDict()
    for name, value in values.items():
        processed_parameters[name] = _process_raw_value(value, variable_context)

    return processed_parameters


class InitializerParameters:
    """Represents the proxy initializer parameters for a set of contracts."""

    class Invalid(Exception):
        """Raised when the initializer parameters are invalid"""

    def __init__(self, parameters: OrderedDict):
        self.parameters = parameters

    @classmethod
    def from_config(
        cls, config: typing.Dict, variable_context: VariableContext
    ) -> "InitializerParameters":
        """Loads the initializer parameters from a params config."""
        print("Processing contract initializer parameters...")
        contracts_config = OrderedDict()
        for contract_info in config["contracts"]:
            if isinstance(contract_info, str):
                contracts_config[contract_info] = OrderedDict()
            elif isinstance(contract_info, dict) and len(contract_info) == 1:
                contract_name = list(contract_info.keys())[0]  # only one entry
                contract_data = contract_info[contract_name] or dict()
                initializer_data = contract_data.get(CONTRACT_INITIALIZER_PARAMETER_KEY) or dict()
                if not isinstance(initializer_data, dict):
                    raise cls.Invalid(f"Malformed initializer parameters for {contract_name}.")
                contracts_config[contract_name] = _process_raw_values(
                    initializer_data, variable_context
                )
            else:
                raise cls.Invalid("Malformed initializer parameters YAML.")

        return cls(parameters=contracts_config)

    def resolve(self, contract_name: str) -> OrderedDict:
        """Resolves the initializer parameters for a single contract."""
        try:
            parameters = self.parameters[contract_name]
        except KeyError:
            raise self.Invalid(f"No initializer parameters for {contract_name}.")
        return _resolve_params(parameters)


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(
        self,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        passphrase: typing.Optional[str] = None,
    ):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        if isinstance(self._account, KeyfileAccount):
            self._account.set_autosign(autosign, passphrase=passphrase)
        self.deployments: List[ContractInstance] = list()

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        named_args = validate_method_args(method_abis=method.abis, args=args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        return method(*args, sender=self._account)

    def deploy(self, container: ContractContainer, *args) -> ContractInstance:
        contract_name = container.contract_type.name
        if not self._autosign:
            abi_inputs = container.constructor.abi.inputs
            resolved_params = OrderedDict(
                (abi_input.name, arg) for abi_input, arg in zip(abi_inputs, args)
            )
            _confirm_resolution(resolved_params, contract_name)

        instance = self._account.deploy(container, *args)
        self.deployments.append(instance)
        return instance


class Deployer(Transactor):
    """
    Represents an ape account plus deployment configuration and
    initializer parameters, plus proxy deploy/upgrade execution.
    """

    def __init__(
        self,
        deployment_config: DeploymentConfig,
        verify: bool,
        config: typing.Optional[typing.Dict] = None,
        path: typing.Optional[Path] = None,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        resolver: typing.Optional[Resolver] = None,
        upgrader: typing.Optional[Upgrader] = None,
    ):
        if account is None:
            account = get_deployer_account(deployment_config)
        super().__init__(account, autosign, passphrase=deployment_config.passphrase)

        check_plugins(deployment_config, verify=verify)
        self.deployment_config = deployment_config
        self.path = path
        self.config = config
        self.verify = verify
        self.initializer_parameters = None
        if config is not None:
            validate_config(config=config)
            variable_context = VariableContext(
                deployment_config=deployment_config,
                constants=config.get("constants"),
                deployer_address=self._account.address,
            )
            self.initializer_parameters = InitializerParameters.from_config(
                config, variable_context
            )

        self.resolver = resolver or ApeContractResolver()
        self.upgrader = upgrader or UUPSUpgrader(transactor=self)
        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        config = _load_yaml(filepath)
        return cls(config=config, path=filepath, *args, **kwargs)

    def deploy_proxy(self, contract_name: str) -> ProxyDeployment:
        if self.initializer_parameters is None:
            raise InitializerParameters.Invalid("No params file was provided for deployment.")
        resolved_params = self.initializer_parameters.resolve(contract_name)
        if not self._autosign:
            _confirm_resolution(resolved_params, contract_name, kind="initializer")

        procedure.announce_deployer(self._account)
        deployment = procedure.deploy_proxy(
            resolver=self.resolver,
            upgrader=self.upgrader,
            contract_name=contract_name,
            initializer_args=list(resolved_params.values()),
        )
        self.finalize()
        return deployment

    def upgrade_proxy(
        self,
        proxy_address: str,
        contract_name: str,
        current_contract_name: typing.Optional[str] = None,
    ) -> ProxyDeployment:
        procedure.announce_deployer(self._account)
        deployment = procedure.upgrade_proxy(
            resolver=self.resolver,
            upgrader=self.upgrader,
            proxy_address=proxy_address,
            contract_name=contract_name,
            current_contract_name=current_contract_name,
        )
        self.finalize()
        return deployment

    def finalize(self) -> None:
        """Optionally publishes the deployed contracts to the block explorer."""
        if self.verify:
            verify_contracts(contracts=self.deployments)

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Config: {self.path}",
            f"Verify: {self.verify}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )


def deploy_from_yaml(
    filepath: Path,
    contract_name: str,
    deployment_config: typing.Optional[DeploymentConfig] = None,
    **kwargs,
) -> ProxyDeployment:
    """Deploys a UUPS proxy for a contract described in a params file."""
    deployment_config = deployment_config or DeploymentConfig.from_env()
    kwargs.setdefault("verify", False)
    deployer = Deployer.from_yaml(
        filepath=filepath, deployment_config=deployment_config, **kwargs
    )
    return deployer.deploy_proxy(contract_name)


def upgrade(
    proxy_address: str,
    contract_name: str,
    current_contract_name: typing.Optional[str] = None,
    deployment_config: typing.Optional[DeploymentConfig] = None,
    **kwargs,
) -> ProxyDeployment:
    """Upgrades an existing UUPS proxy to a new implementation of a contract."""
    deployment_config = deployment_config or DeploymentConfig.from_env()
    kwargs.setdefault("verify", False)
    deployer = Deployer(deployment_config=deployment_config, **kwargs)
    return deployer.upgrade_proxy(
        proxy_address=proxy_address,
        contract_name=contract_name,
        current_contract_name=current_contract_name,
    )
