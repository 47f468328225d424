"""
Contract Events
===============
Fetch past occurrences of a contract event, or watch for new ones.

Usage:
    fetcher = voting_machine.NewProposal({"_avatar": avatar}, from_block=0)
    for event in await fetcher.get():
        print(event.args["_proposalId"])

    async for event in fetcher.watch(poll_interval=2.0):
        ...
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union

from web3 import Web3
from web3.logs import DISCARD

logger = logging.getLogger(__name__)

BlockIdentifier = Union[int, str]


@dataclass
class DecodedLogEvent:
    """A decoded contract event."""
    event: str
    args: Dict[str, Any]
    address: str
    block_number: int
    transaction_hash: str
    log_index: int

    @classmethod
    def from_log(cls, log) -> "DecodedLogEvent":
        tx_hash = log["transactionHash"]
        return cls(
            event=log["event"],
            args=dict(log["args"]),
            address=log["address"],
            block_number=log["blockNumber"],
            transaction_hash=tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash),
            log_index=log["logIndex"],
        )


def event_names(contract) -> List[str]:
    return [item["name"] for item in contract.abi if item.get("type") == "event"]


def decode_events(contract, receipt: Dict[str, Any], event_name: Optional[str] = None) -> List[DecodedLogEvent]:
    """Decode the logs of a receipt against a contract's events, in log order."""
    names = [event_name] if event_name else event_names(contract)
    decoded = []
    for name in names:
        logs = getattr(contract.events, name)().process_receipt(receipt, errors=DISCARD)
        decoded.extend(DecodedLogEvent.from_log(log) for log in logs)
    decoded.sort(key=lambda e: e.log_index)
    return decoded


EventTransform = Callable[[List[DecodedLogEvent]], List[DecodedLogEvent]]


class EventFetcher:
    """Fetches one event type with fixed argument filters and block range."""

    def __init__(
        self,
        contract,
        event_name: str,
        argument_filters: Optional[Dict[str, Any]] = None,
        from_block: BlockIdentifier = "latest",
        to_block: BlockIdentifier = "latest",
        transform: Optional[EventTransform] = None,
    ):
        self.contract = contract
        self.event_name = event_name
        self.argument_filters = argument_filters or {}
        self.from_block = from_block
        self.to_block = to_block
        self.transform = transform

    async def _get_logs(self, from_block: BlockIdentifier, to_block: BlockIdentifier) -> List[DecodedLogEvent]:
        event = getattr(self.contract.events, self.event_name)()
        logs = await event.get_logs(
            argument_filters=self.argument_filters or None,
            from_block=from_block,
            to_block=to_block,
        )
        events = [DecodedLogEvent.from_log(log) for log in logs]
        if self.transform:
            events = self.transform(events)
        return events

    async def get(self) -> List[DecodedLogEvent]:
        """Past events in the configured block range."""
        return await self._get_logs(self.from_block, self.to_block)

    async def watch(self, poll_interval: float = 2.0) -> AsyncIterator[DecodedLogEvent]:
        """Yield events as new blocks arrive, starting at `from_block`."""
        web3 = self.contract.w3
        if isinstance(self.from_block, int):
            next_block = self.from_block
        else:
            next_block = await web3.eth.block_number

        while True:
            latest = await web3.eth.block_number
            if latest >= next_block:
                for event in await self._get_logs(next_block, latest):
                    yield event
                next_block = latest + 1
            await asyncio.sleep(poll_interval)


class EventFetcherFactory:
    """Creates EventFetchers for one event of one contract."""

    def __init__(self, contract, event_name: str, transform: Optional[EventTransform] = None):
        self.contract = contract
        self.event_name = event_name
        self.transform = transform

    def __call__(
        self,
        argument_filters: Optional[Dict[str, Any]] = None,
        from_block: BlockIdentifier = "latest",
        to_block: BlockIdentifier = "latest",
    ) -> EventFetcher:
        return EventFetcher(
            self.contract,
            self.event_name,
            argument_filters=argument_filters,
            from_block=from_block,
            to_block=to_block,
            transform=self.transform,
        )
