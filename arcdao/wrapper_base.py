"""
Contract Wrapper Base
=====================
Common machinery for the typed wrappers around deployed Arc contracts:
function-call logging, transaction invocation with lifecycle events,
event fetcher creation, and the factories that locate or deploy
wrapped contracts.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from web3 import Web3

from .artifacts import ArtifactResolver
from .chain import ChainClient
from .config import ArcConfig
from .errors import ContractNotFoundError
from .events import EventFetcherFactory, EventTransform
from .transactions import ArcTransactionResult, TransactionService, TxEventContext
from .types import SchemePermissions

logger = logging.getLogger(__name__)


@dataclass
class WrapperContext:
    """Collaborators shared by every wrapper, built once per process."""
    chain: ChainClient
    artifacts: ArtifactResolver
    config: ArcConfig
    transactions: TransactionService
    registry: Any = None  # WrapperRegistry, set once it exists


class ContractWrapperBase:
    """
    Base class of all contract wrappers.

    Subclasses set `name` (the contract/artifact name) and create their
    event fetcher factories in `hydrated()`.
    """

    name: str = "ContractWrapperBase"
    friendly_name: str = "Contract Wrapper Base"

    # Parameterized via a voting machine and a parameters hash
    universal: bool = False

    # Minimum permissions when registered as a scheme in a DAO
    default_permissions: int = SchemePermissions.IS_REGISTERED

    def __init__(self, context: WrapperContext, contract, factory: "ContractWrapperFactory" = None):
        self.context = context
        self.contract = contract
        self.factory = factory
        self.hydrated()

    @property
    def chain(self) -> ChainClient:
        return self.context.chain

    @property
    def transactions(self) -> TransactionService:
        return self.context.transactions

    @property
    def address(self) -> str:
        return self.contract.address

    def hydrated(self):
        """Called once the contract instance is known."""
        pass

    def get_default_permissions(self) -> int:
        return self.default_permissions

    def log_contract_function_call(self, function_name: str, options: Any = None):
        logger.debug(f"{function_name}: {options if options is not None else ''}")

    def create_event_fetcher_factory(self, event_name: str, transform: Optional[EventTransform] = None) -> EventFetcherFactory:
        return EventFetcherFactory(self.contract, event_name, transform)

    async def call(self, method_name: str, *args) -> Any:
        """Read-only contract call."""
        return await getattr(self.contract.functions, method_name)(*args).call()

    async def send_transaction(
        self,
        event_context: Optional[TxEventContext],
        method_name: str,
        args: list,
        gas: Optional[int] = None,
    ) -> str:
        """Submit `method_name(*args)` and announce it under `event_context`."""
        contract_function = getattr(self.contract.functions, method_name)(*args)
        tx = await self.chain.send_transaction(contract_function, gas=gas)
        if event_context:
            self.transactions.publish_tx_sent(event_context, tx)
        return tx

    async def wrap_transaction_invocation(
        self,
        function_name: str,
        options: Dict[str, Any],
        method_name: str,
        args: list,
        gas: Optional[int] = None,
        event_context: Optional[TxEventContext] = None,
        result_class: Type[ArcTransactionResult] = ArcTransactionResult,
        **result_kwargs,
    ) -> ArcTransactionResult:
        """
        Send one transaction and wrap it in a result.

        With an `event_context` the transaction is a step of a larger
        invocation and reports under it. Otherwise it is an invocation of
        its own: kickoff is published here and mined/completed follow in
        the background.
        """
        top_level = event_context is None
        if top_level:
            payload = self.transactions.publish_kickoff_event(function_name, options, 1)
            event_context = self.transactions.new_tx_event_context(function_name, payload, options)

        tx = await self.send_transaction(event_context, method_name, args, gas=gas)

        result = result_class(
            tx,
            self.contract,
            self.chain,
            context=event_context,
            transactions=self.transactions,
            **result_kwargs,
        )
        if top_level:
            self.transactions.publish_tx_lifecycle_events(event_context, result)
        return result


class ContractWrapperFactory:
    """
    Locates or deploys contracts and wraps them.

    Usage:
        factory = ContractWrapperFactory(AbsoluteVoteWrapper, context)
        absolute_vote = await factory.deployed()
    """

    def __init__(self, wrapper_class: Type[ContractWrapperBase], context: WrapperContext):
        self.wrapper_class = wrapper_class
        self.context = context

    @property
    def name(self) -> str:
        return self.wrapper_class.name

    def _wrap(self, contract) -> ContractWrapperBase:
        return self.wrapper_class(self.context, contract, factory=self)

    async def at(self, address: str) -> ContractWrapperBase:
        """Wrap the contract at `address`, which must hold code."""
        code = await self.context.chain.web3.eth.get_code(Web3.to_checksum_address(address))
        if not code:
            raise ContractNotFoundError(f"An instance of '{self.name}' could not be found at {address}")
        artifact = self.context.artifacts.require_contract(self.name)
        return self._wrap(artifact.at(address))

    async def deployed(self) -> ContractWrapperBase:
        """Wrap the instance deployed with this release of the contracts."""
        artifact = self.context.artifacts.require_contract(self.name)
        return self._wrap(await artifact.deployed())

    async def new(self, *args, gas: Optional[int] = None) -> ContractWrapperBase:
        """Deploy a new instance and wrap it."""
        artifact = self.context.artifacts.require_contract(self.name)
        logger.info(f"Deploying new {self.name}")
        return self._wrap(await artifact.new(*args, gas=gas))
