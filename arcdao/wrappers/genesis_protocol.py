"""
GenesisProtocol Wrapper
=======================
Voting machine with staking-based boosting of proposals. Its parameters
are a fixed 14-element uint array; the order below is the contract's.
"""

from typing import Any, Dict, List

from web3 import Web3

from ..errors import MissingArgumentError, OutOfRangeError
from ..wrapper_base import ContractWrapperFactory
from .voting_machine import VotingMachineWrapper

GENESIS_PROTOCOL_PARAMETERS = [
    "preBoostedVoteRequiredPercentage",
    "preBoostedVotePeriodLimit",
    "boostedVotePeriodLimit",
    "thresholdConstA",
    "thresholdConstB",
    "minimumStakingFee",
    "quietEndingPeriod",
    "proposingRepRewardConstA",
    "proposingRepRewardConstB",
    "stakerFeeRatioForVoters",
    "votersReputationLossRatio",
    "votersGainRepRatioFromLostRep",
    "daoBountyConst",
    "daoBountyLimit",
]

# Parameters that are percentages
PERCENTAGE_PARAMETERS = (
    "preBoostedVoteRequiredPercentage",
    "stakerFeeRatioForVoters",
    "votersReputationLossRatio",
    "votersGainRepRatioFromLostRep",
)


def get_default_genesis_protocol_parameters() -> Dict[str, Any]:
    """Defaults used when a DAO doesn't configure GenesisProtocol itself."""
    return {
        "preBoostedVoteRequiredPercentage": 50,
        "preBoostedVotePeriodLimit": 1814400,   # 21 days
        "boostedVotePeriodLimit": 259200,       # 3 days
        "thresholdConstA": Web3.to_wei(7, "ether"),
        "thresholdConstB": 3,
        "minimumStakingFee": 0,
        "quietEndingPeriod": 86400,             # 1 day
        "proposingRepRewardConstA": 5,
        "proposingRepRewardConstB": 5,
        "stakerFeeRatioForVoters": 50,
        "votersReputationLossRatio": 1,
        "votersGainRepRatioFromLostRep": 80,
        "daoBountyConst": 75,
        "daoBountyLimit": Web3.to_wei(100, "ether"),
    }


class GenesisProtocolWrapper(VotingMachineWrapper):
    name = "GenesisProtocol"
    friendly_name = "Genesis Protocol"

    parameter_names = GENESIS_PROTOCOL_PARAMETERS

    def get_default_parameters(self) -> Dict[str, Any]:
        return get_default_genesis_protocol_parameters()

    def validate_parameters(self, params: Dict[str, Any]):
        for name in GENESIS_PROTOCOL_PARAMETERS:
            value = params.get(name)
            if value is None:
                raise MissingArgumentError(name, f"{name} must be set")
            if not isinstance(value, int) or value < 0:
                raise OutOfRangeError(f"{name} must be a non-negative integer")

        for name in PERCENTAGE_PARAMETERS:
            if params[name] > 100:
                raise OutOfRangeError(f"{name} must be a number from 0 to 100")

    def parameters_args(self, params: Dict[str, Any]) -> List[list]:
        # One uint[14] argument
        return [[params[name] for name in GENESIS_PROTOCOL_PARAMETERS]]


class GenesisProtocolFactory(ContractWrapperFactory):
    """Deploying a GenesisProtocol requires the token stakers stake with."""

    async def new(self, staking_token_address: str = None, gas=None):
        if not staking_token_address:
            raise MissingArgumentError("stakingTokenAddress")
        return await super().new(staking_token_address, gas=gas)
