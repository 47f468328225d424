"""
Contract Wrappers
=================
Typed wrappers around the Arc contracts this client drives.
"""

from .absolute_vote import AbsoluteVoteWrapper
from .dao_creator import DaoCreatorFactory, DaoCreatorWrapper
from .genesis_protocol import GenesisProtocolFactory, GenesisProtocolWrapper
from .int_vote_interface import IntVoteInterfaceFactory, IntVoteInterfaceWrapper
from .schemes import (
    ContributionRewardWrapper,
    GlobalConstraintRegistrarWrapper,
    SchemeRegistrarWrapper,
    SchemeWrapper,
    UniversalSchemeWrapper,
    UpgradeSchemeWrapper,
    VoteInOrganizationSchemeWrapper,
)
from .voting_machine import VotingMachineWrapper

__all__ = [
    "AbsoluteVoteWrapper",
    "ContributionRewardWrapper",
    "DaoCreatorFactory",
    "DaoCreatorWrapper",
    "GenesisProtocolFactory",
    "GenesisProtocolWrapper",
    "GlobalConstraintRegistrarWrapper",
    "IntVoteInterfaceFactory",
    "IntVoteInterfaceWrapper",
    "SchemeRegistrarWrapper",
    "SchemeWrapper",
    "UniversalSchemeWrapper",
    "UpgradeSchemeWrapper",
    "VoteInOrganizationSchemeWrapper",
    "VotingMachineWrapper",
]
