"""
Arc DAO Client
==============
Async Python bindings for Arc DAO contracts on EVM chains:
create DAOs, register their schemes, and drive voting machines.

Usage:
    from arcdao import ArcConfig, create_context

    context = create_context(ArcConfig.from_env())
    await context.registry.initialize()
    dao_creator = context.registry.wrappers["DaoCreator"]
"""

from .config import ArcConfig
from .errors import (
    ArcError,
    ContractNotFoundError,
    MissingArgumentError,
    OutOfRangeError,
    TransactionFailedError,
    UnsupportedOperationError,
)
from .registry import WrapperRegistry, create_context
from .types import (
    NULL_ADDRESS,
    NULL_HASH,
    BinaryVoteResult,
    FounderConfig,
    SchemeConfig,
    SchemePermissions,
    VoteRange,
)

__all__ = [
    "ArcConfig",
    "ArcError",
    "BinaryVoteResult",
    "ContractNotFoundError",
    "FounderConfig",
    "MissingArgumentError",
    "NULL_ADDRESS",
    "NULL_HASH",
    "OutOfRangeError",
    "SchemeConfig",
    "SchemePermissions",
    "TransactionFailedError",
    "UnsupportedOperationError",
    "VoteRange",
    "WrapperRegistry",
    "create_context",
]
