"""
Wrapper Registry
================
Known contract wrappers by name: a factory for each wrapper type, and the
wrapped instance deployed on the current chain where there is one.
"""

import logging
from typing import Dict, Optional, Type

from .artifacts import ArtifactResolver
from .chain import ChainClient
from .config import ArcConfig
from .errors import ContractNotFoundError, UnsupportedOperationError
from .transactions import TransactionService
from .wrapper_base import ContractWrapperBase, ContractWrapperFactory, WrapperContext
from .wrappers.absolute_vote import AbsoluteVoteWrapper
from .wrappers.dao_creator import DaoCreatorFactory, DaoCreatorWrapper
from .wrappers.genesis_protocol import GenesisProtocolFactory, GenesisProtocolWrapper
from .wrappers.int_vote_interface import IntVoteInterfaceFactory, IntVoteInterfaceWrapper
from .wrappers.schemes import (
    ContributionRewardWrapper,
    GlobalConstraintRegistrarWrapper,
    SchemeRegistrarWrapper,
    UpgradeSchemeWrapper,
    VoteInOrganizationSchemeWrapper,
)

logger = logging.getLogger(__name__)

BUNDLED_WRAPPERS = [
    (IntVoteInterfaceWrapper, IntVoteInterfaceFactory),
    (AbsoluteVoteWrapper, ContractWrapperFactory),
    (GenesisProtocolWrapper, GenesisProtocolFactory),
    (SchemeRegistrarWrapper, ContractWrapperFactory),
    (ContributionRewardWrapper, ContractWrapperFactory),
    (GlobalConstraintRegistrarWrapper, ContractWrapperFactory),
    (UpgradeSchemeWrapper, ContractWrapperFactory),
    (VoteInOrganizationSchemeWrapper, ContractWrapperFactory),
    (DaoCreatorWrapper, DaoCreatorFactory),
]


class WrapperRegistry:
    """
    Usage:
        context = create_context(ArcConfig.from_env())
        await context.registry.initialize()
        dao_creator = context.registry.wrappers["DaoCreator"]
    """

    def __init__(self, context: WrapperContext):
        self.context = context
        self.factories: Dict[str, ContractWrapperFactory] = {}
        self.wrappers: Dict[str, ContractWrapperBase] = {}
        context.registry = self

    def register(
        self,
        wrapper_class: Type[ContractWrapperBase],
        factory_class: Type[ContractWrapperFactory] = ContractWrapperFactory,
    ) -> ContractWrapperFactory:
        factory = factory_class(wrapper_class, self.context)
        self.factories[wrapper_class.name] = factory
        return factory

    async def initialize(self):
        """Wrap the deployed instance of every registered contract that has one."""
        for name, factory in self.factories.items():
            try:
                self.wrappers[name] = await factory.deployed()
            except (ContractNotFoundError, UnsupportedOperationError) as e:
                logger.debug(f"No deployed {name}: {e}")

        logger.info(f"Wrapped deployed contracts: {', '.join(self.wrappers) or 'none'}")

    async def get_contract_wrapper(self, name: str, address: Optional[str] = None) -> Optional[ContractWrapperBase]:
        """
        The wrapper for `name` at `address`, or its deployed instance when
        no address is given. None when it cannot be resolved.
        """
        factory = self.factories.get(name)
        if not factory:
            return None

        if address:
            try:
                return await factory.at(address)
            except ContractNotFoundError:
                return None

        return self.wrappers.get(name)


def create_context(config: ArcConfig, web3=None) -> WrapperContext:
    """Build the process-wide collaborators and a registry of the bundled wrappers."""
    chain = ChainClient(config, web3=web3)
    context = WrapperContext(
        chain=chain,
        artifacts=ArtifactResolver(chain, config.artifacts_dir),
        config=config,
        transactions=TransactionService(),
    )
    registry = WrapperRegistry(context)
    for wrapper_class, factory_class in BUNDLED_WRAPPERS:
        registry.register(wrapper_class, factory_class)
    return context
