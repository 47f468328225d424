"""
Transactions
============
Results of transaction-generating wrapper calls, and the publisher of
transaction lifecycle events.

Lifecycle topics are `TxTracking.<functionName>.<stage>` with stages:
    kickoff   - before the first transaction, carries the expected tx count
    sent      - a transaction was submitted
    mined     - a transaction was mined
    completed - the last transaction of the invocation was mined
    failed    - the last transaction reverted or could not be watched

Sub-transactions sent on behalf of a parent invocation (for example the
parameter registrations inside DaoCreator.setSchemes) publish under the
parent's function name.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set

from .events import decode_events

logger = logging.getLogger(__name__)

TOPIC_ROOT = "TxTracking"

KICKOFF = "kickoff"
SENT = "sent"
MINED = "mined"
COMPLETED = "completed"
FAILED = "failed"


@dataclass
class TxEventContext:
    """Ties the transactions of one wrapper invocation together."""
    function_name: str
    invocation_key: str
    tx_count: int
    options: Dict[str, Any] = field(default_factory=dict)
    tx_sent_count: int = 0
    tx_mined_count: int = 0

    @property
    def topic(self) -> str:
        return f"{TOPIC_ROOT}.{self.function_name}"


class Subscription:
    """Handle returned by TransactionService.subscribe."""

    def __init__(self, service: "TransactionService", key: int):
        self._service = service
        self._key = key

    def unsubscribe(self):
        self._service._subscribers.pop(self._key, None)


class TransactionService:
    """
    Publishes transaction lifecycle events to subscribers.

    Usage:
        service = TransactionService()
        sub = service.subscribe("TxTracking.DaoCreator.setSchemes", on_event)
        ...
        sub.unsubscribe()
    """

    def __init__(self):
        self._subscribers: Dict[int, tuple] = {}
        self._next_key = 0
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, topic_prefix: str, callback: Callable[[str, Dict[str, Any]], None]) -> Subscription:
        """Call `callback(topic, payload)` for every topic starting with `topic_prefix`."""
        key = self._next_key
        self._next_key += 1
        self._subscribers[key] = (topic_prefix, callback)
        return Subscription(self, key)

    def publish(self, topic: str, payload: Dict[str, Any]):
        for prefix, callback in list(self._subscribers.values()):
            if topic.startswith(prefix):
                try:
                    callback(topic, payload)
                except Exception:
                    logger.exception(f"Subscriber for {prefix} failed on {topic}")

    def _payload(self, context: TxEventContext, **extra) -> Dict[str, Any]:
        payload = {
            "invocation_key": context.invocation_key,
            "function_name": context.function_name,
            "options": context.options,
            "tx_count": context.tx_count,
            "tx_sent_count": context.tx_sent_count,
            "tx_mined_count": context.tx_mined_count,
        }
        payload.update(extra)
        return payload

    def publish_kickoff_event(self, function_name: str, options: Dict[str, Any], tx_count: int) -> Dict[str, Any]:
        """Announce a new invocation. Returns the payload that seeds its context."""
        payload = {
            "invocation_key": uuid.uuid4().hex,
            "function_name": function_name,
            "options": options,
            "tx_count": tx_count,
            "tx_sent_count": 0,
            "tx_mined_count": 0,
        }
        self.publish(f"{TOPIC_ROOT}.{function_name}.{KICKOFF}", payload)
        return payload

    def new_tx_event_context(self, function_name: str, payload: Dict[str, Any], options: Dict[str, Any]) -> TxEventContext:
        return TxEventContext(
            function_name=function_name,
            invocation_key=payload["invocation_key"],
            tx_count=payload["tx_count"],
            options=options,
        )

    def publish_tx_sent(self, context: TxEventContext, tx: str):
        context.tx_sent_count += 1
        self.publish(f"{context.topic}.{SENT}", self._payload(context, tx=tx))

    def publish_tx_mined(self, context: TxEventContext, tx: str, receipt: Dict[str, Any]):
        context.tx_mined_count += 1
        self.publish(f"{context.topic}.{MINED}", self._payload(context, tx=tx, receipt=receipt))

    def publish_tx_completed(self, context: TxEventContext, tx: str, receipt: Dict[str, Any]):
        self.publish(f"{context.topic}.{COMPLETED}", self._payload(context, tx=tx, receipt=receipt))

    def publish_tx_failed(self, context: TxEventContext, tx: str, error: Exception):
        self.publish(f"{context.topic}.{FAILED}", self._payload(context, tx=tx, error=str(error)))

    def publish_tx_lifecycle_events(self, context: TxEventContext, result: "ArcTransactionResult") -> asyncio.Task:
        """
        Publish `mined` and `completed` for the final transaction of an
        invocation, in the background. Nobody awaits the task, so a failure
        is logged and published as `failed` instead of raised.
        """

        async def _watch():
            try:
                receipt = await result.watch_for_tx_mined()
            except Exception as e:
                logger.exception(f"{context.function_name} transaction {result.tx} failed")
                self.publish_tx_failed(context, result.tx, e)
                return
            self.publish_tx_completed(context, result.tx, receipt)

        task = asyncio.ensure_future(_watch())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task


class ArcTransactionResult:
    """
    Result of a transaction-generating wrapper call.

    `result` carries an optional value computed alongside the transaction,
    such as the parameters hash registered by `setParameters`.
    """

    def __init__(
        self,
        tx: str,
        contract,
        chain,
        result: Any = None,
        context: Optional[TxEventContext] = None,
        transactions: Optional[TransactionService] = None,
    ):
        self.tx = tx
        self.contract = contract
        self.chain = chain
        self.result = result
        self.context = context
        self.transactions = transactions
        self._receipt: Optional[Dict[str, Any]] = None

    async def watch_for_tx_mined(self) -> Dict[str, Any]:
        """Wait for the transaction to be mined and return its receipt."""
        if self._receipt is None:
            receipt = await self.chain.wait_for_receipt(self.tx)
            if self._receipt is None:
                self._receipt = receipt
                if self.context and self.transactions:
                    self.transactions.publish_tx_mined(self.context, self.tx, receipt)
        return self._receipt

    async def get_tx_mined_receipt(self) -> Dict[str, Any]:
        return await self.watch_for_tx_mined()

    async def get_value_from_tx(self, value_name: str, event_name: Optional[str] = None, index: int = 0) -> Any:
        """
        Wait for mining, then return argument `value_name` of the `index`th
        matching event in the receipt. None if no event carries it.
        """
        receipt = await self.watch_for_tx_mined()
        events = decode_events(self.contract, receipt, event_name)
        values = [event.args[value_name] for event in events if value_name in event.args]
        if index < len(values):
            return values[index]
        return None


class ArcTransactionProposalResult(ArcTransactionResult):
    """Result of a transaction that creates a proposal."""

    def __init__(self, tx: str, contract, chain, voting_machine=None, **kwargs):
        super().__init__(tx, contract, chain, **kwargs)
        self.voting_machine = voting_machine

    async def get_proposal_id_from_mined_tx(self) -> Optional[str]:
        proposal_id = await self.get_value_from_tx("_proposalId", "NewProposal")
        if isinstance(proposal_id, (bytes, bytearray)):
            return "0x" + bytes(proposal_id).hex()
        return proposal_id


class ArcTransactionDataResult(ArcTransactionResult):
    """Result of a transaction that also returns a value (in `result`)."""
    pass
