"""
IntVoteInterface Wrapper
========================
Services of any voting machine implementing Arc's `IntVoteInterface`.
Also the base class of the specific voting machine wrappers.

Every proposal gets a unique id: the keccak256 of a packing of an
incremented counter and the voting machine's address.
"""

from typing import Any, AsyncIterator, Dict, List, Optional

from ..errors import MissingArgumentError, OutOfRangeError, UnsupportedOperationError
from ..events import BlockIdentifier, DecodedLogEvent
from ..transactions import ArcTransactionProposalResult, ArcTransactionResult, TxEventContext
from ..types import NULL_ADDRESS, NULL_HASH, VoteRange
from ..wrapper_base import ContractWrapperBase, ContractWrapperFactory


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_proposal_id(proposal_id: Optional[str]):
    if not proposal_id:
        raise MissingArgumentError("proposalId")


class IntVoteInterfaceWrapper(ContractWrapperBase):
    """
    Typed, validated facade over one deployed voting machine.

    Event fetcher factories (created on hydration):
        NewProposal, CancelProposal, ExecuteProposal, VoteProposal, CancelVoting

    CancelProposal and CancelVoting never fire on GenesisProtocol, whose
    proposals and votes are not cancellable.
    """

    name = "IntVoteInterface"
    friendly_name = "IntVoteInterface"

    def hydrated(self):
        self.NewProposal = self.create_event_fetcher_factory("NewProposal")
        self.CancelProposal = self.create_event_fetcher_factory("CancelProposal")
        self.ExecuteProposal = self.create_event_fetcher_factory("ExecuteProposal")
        self.VoteProposal = self.create_event_fetcher_factory("VoteProposal")
        self.CancelVoting = self.create_event_fetcher_factory("CancelVoting")

    async def votable_proposals(
        self,
        argument_filters: Optional[Dict[str, Any]] = None,
        from_block: BlockIdentifier = 0,
        to_block: BlockIdentifier = "latest",
        watch: bool = False,
        poll_interval: float = 2.0,
    ) -> AsyncIterator[DecodedLogEvent]:
        """
        NewProposal events whose proposal is still votable, checked one by
        one as they are yielded.

        With `watch`, keeps polling for proposals made in new blocks from
        `from_block` on and never ends; `to_block` is ignored.
        """
        fetcher = self.NewProposal(argument_filters, from_block=from_block, to_block=to_block)
        if watch:
            async for event in fetcher.watch(poll_interval):
                if await self.is_votable(event.args["_proposalId"]):
                    yield event
        else:
            for event in await fetcher.get():
                if await self.is_votable(event.args["_proposalId"]):
                    yield event

    async def propose(
        self,
        avatar_address: str,
        executable: str,
        num_of_choices: int,
        proposal_parameters: Optional[str] = None,
        proposer_address: Optional[str] = None,
        event_context: Optional[TxEventContext] = None,
    ) -> ArcTransactionProposalResult:
        """
        Register a new proposal.

        Args:
            avatar_address: The DAO the proposal belongs to
            executable: Contract executed when the vote is decided
            num_of_choices: Must lie within getAllowedRangeOfChoices()
            proposal_parameters: Parameters hash; the null hash by default
            proposer_address: The null address by default
        """
        if not avatar_address:
            raise MissingArgumentError("avatar", "avatar is not defined")

        if not executable:
            raise MissingArgumentError("executable", "executable is not defined")

        bounds = await self.get_allowed_range_of_choices()

        if not _is_integer(num_of_choices):
            raise OutOfRangeError("numOfChoices must be a number")

        if num_of_choices < bounds.min_vote:
            raise OutOfRangeError(f"numOfChoices cannot be less than {bounds.min_vote}")

        if num_of_choices > bounds.max_vote:
            raise OutOfRangeError(f"numOfChoices cannot be greater than {bounds.max_vote}")

        proposal_parameters = proposal_parameters or NULL_HASH
        proposer_address = proposer_address or NULL_ADDRESS

        options = {
            "avatarAddress": avatar_address,
            "executable": executable,
            "numOfChoices": num_of_choices,
            "proposalParameters": proposal_parameters,
            "proposerAddress": proposer_address,
        }
        self.log_contract_function_call("IntVoteInterface.propose", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.propose",
            options,
            "propose",
            [num_of_choices, proposal_parameters, avatar_address, executable, proposer_address],
            event_context=event_context,
            result_class=ArcTransactionProposalResult,
            voting_machine=self,
        )

    async def cancel_proposal(self, proposal_id: str) -> ArcTransactionResult:
        """Cancel the given proposal."""
        _require_proposal_id(proposal_id)

        options = {"proposalId": proposal_id}
        self.log_contract_function_call("IntVoteInterface.cancelProposal", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.cancelProposal", options, "cancelProposal", [proposal_id]
        )

    async def owner_vote(self, proposal_id: str, vote: int, voter_address: str) -> ArcTransactionResult:
        """Vote on behalf of the owner of the proposal, i.e. the agent that created it."""
        _require_proposal_id(proposal_id)
        await self._validate_vote(vote, proposal_id)
        if not voter_address:
            raise MissingArgumentError("voterAddress")

        options = {"proposalId": proposal_id, "vote": vote, "voterAddress": voter_address}
        self.log_contract_function_call("IntVoteInterface.ownerVote", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.ownerVote", options, "ownerVote", [proposal_id, vote, voter_address]
        )

    async def vote(self, proposal_id: str, vote: int) -> ArcTransactionResult:
        """Vote on behalf of the current account."""
        _require_proposal_id(proposal_id)
        await self._validate_vote(vote, proposal_id)

        options = {"proposalId": proposal_id, "vote": vote}
        self.log_contract_function_call("IntVoteInterface.vote", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.vote", options, "vote", [proposal_id, vote]
        )

    async def vote_with_specified_amounts(self, proposal_id: str, vote: int, reputation: int) -> ArcTransactionResult:
        """
        Vote a specified amount of reputation.

        The contract takes a second amount after the reputation; it is
        always sent as zero.
        """
        _require_proposal_id(proposal_id)
        await self._validate_vote(vote, proposal_id)

        options = {"proposalId": proposal_id, "vote": vote, "reputation": reputation}
        self.log_contract_function_call("IntVoteInterface.voteWithSpecifiedAmounts", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.voteWithSpecifiedAmounts",
            options,
            "voteWithSpecifiedAmounts",
            [proposal_id, vote, reputation, 0],
        )

    async def cancel_vote(self, proposal_id: str) -> ArcTransactionResult:
        """Cancel the current account's vote on the proposal."""
        _require_proposal_id(proposal_id)

        options = {"proposalId": proposal_id}
        self.log_contract_function_call("IntVoteInterface.cancelVote", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.cancelVote", options, "cancelVote", [proposal_id]
        )

    async def execute(self, proposal_id: str) -> ArcTransactionResult:
        """Attempt to execute the given proposal vote."""
        _require_proposal_id(proposal_id)

        options = {"proposalId": proposal_id}
        self.log_contract_function_call("IntVoteInterface.execute", options)

        return await self.wrap_transaction_invocation(
            "IntVoteInterface.execute", options, "execute", [proposal_id]
        )

    async def get_number_of_choices(self, proposal_id: str) -> int:
        """Number of voting choices allowed by the proposal."""
        _require_proposal_id(proposal_id)

        self.log_contract_function_call("IntVoteInterface.getNumberOfChoices", {"proposalId": proposal_id})

        return int(await self.call("getNumberOfChoices", proposal_id))

    async def is_votable(self, proposal_id: str) -> bool:
        """Whether the proposal can currently be voted upon."""
        _require_proposal_id(proposal_id)

        self.log_contract_function_call("IntVoteInterface.isVotable", {"proposalId": proposal_id})

        return bool(await self.call("isVotable", proposal_id))

    async def vote_status(self, proposal_id: str, vote: int) -> int:
        """Votes currently cast on the given choice."""
        _require_proposal_id(proposal_id)
        await self._validate_vote(vote, proposal_id)

        self.log_contract_function_call("IntVoteInterface.voteStatus", {"proposalId": proposal_id, "vote": vote})

        return await self.call("voteStatus", proposal_id, vote)

    async def is_abstain_allow(self) -> bool:
        """Whether voters may cast an abstaining vote."""
        self.log_contract_function_call("IntVoteInterface.isAbstainAllow")

        return bool(await self.call("isAbstainAllow"))

    async def get_current_vote_status(self, proposal_id: str) -> List[int]:
        """
        Current count of each vote choice on the proposal.

        Index 0 is always the abstain count, zero when the machine does not
        allow abstaining; for yes/no proposals BinaryVoteResult indexes the
        list. The loop runs through num_choices inclusive, after the abstain
        adjustment, so a machine without abstain yields num_choices + 2
        entries.
        """
        num_choices = await self.get_number_of_choices(proposal_id)
        abstain_allowed = await self.is_abstain_allow()
        # num_choices excludes abstain when it is not allowed
        if not abstain_allowed:
            num_choices += 1

        self.log_contract_function_call("IntVoteInterface.getCurrentVoteStatus", {"proposalId": proposal_id})

        # Read directly: the top choice here lies past what _validate_vote accepts
        vote_totals = []
        for choice in range(num_choices + 1):
            vote_totals.append(await self.call("voteStatus", proposal_id, choice))

        return vote_totals

    async def get_allowed_range_of_choices(self) -> VoteRange:
        """Allowed range of choices for proposals on this machine."""
        result = await self.call("getAllowedRangeOfChoices")
        return VoteRange(min_vote=int(result[0]), max_vote=int(result[1]))

    async def _validate_vote(self, vote: int, proposal_id: str):
        num_choices = await self.get_number_of_choices(proposal_id)
        if not _is_integer(vote) or vote < 0 or vote > num_choices:
            raise OutOfRangeError(
                f"vote choice is not valid: must be a number from 0 to {num_choices}"
            )


class IntVoteInterfaceFactory(ContractWrapperFactory):
    """Only `at` is supported: IntVoteInterface is an interface, never deployed."""

    async def new(self, *args, gas=None):
        raise UnsupportedOperationError("`new` is not supported on IntVoteInterface. Only `at` is supported.")

    async def deployed(self):
        raise UnsupportedOperationError("`deployed` is not supported on IntVoteInterface. Only `at` is supported.")
