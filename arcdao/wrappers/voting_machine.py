"""Voting machines whose configuration is registered under a parameters hash."""

from .int_vote_interface import IntVoteInterfaceWrapper
from .parameters import ParameterizedWrapperMixin


class VotingMachineWrapper(ParameterizedWrapperMixin, IntVoteInterfaceWrapper):
    pass
