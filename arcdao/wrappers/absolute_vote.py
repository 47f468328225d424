"""
AbsoluteVote Wrapper
====================
The default voting machine: a proposal passes once a fixed percentage of
all reputation votes for one choice.
"""

from typing import Any, Dict

from ..errors import MissingArgumentError, OutOfRangeError
from .voting_machine import VotingMachineWrapper


class AbsoluteVoteWrapper(VotingMachineWrapper):
    """
    Parameters, in contract order:
        reputation  - Reputation contract that weighs votes (required)
        votePerc    - Percentage of reputation needed to decide, 0-100
        ownerVote   - Whether the proposal owner may vote on behalf of others
    """

    name = "AbsoluteVote"
    friendly_name = "Absolute Vote"

    parameter_names = ["reputation", "votePerc", "ownerVote"]

    def get_default_parameters(self) -> Dict[str, Any]:
        return {"votePerc": 50, "ownerVote": True}

    def validate_parameters(self, params: Dict[str, Any]):
        if not params.get("reputation"):
            raise MissingArgumentError("reputation", "reputation must be set")

        vote_perc = params["votePerc"]
        if not isinstance(vote_perc, int) or not 0 <= vote_perc <= 100:
            raise OutOfRangeError("votePerc must be a number from 0 to 100")
